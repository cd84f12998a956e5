# (c) Copyright Datacraft, 2026
"""Resolve the acting user from reverse-proxy headers."""
import logging

from fastapi import HTTPException, Request, status

from onboard.core.config import get_settings
from onboard.core.identity import Actor, ActorRole

logger = logging.getLogger(__name__)


def get_actor(request: Request) -> Actor:
	settings = get_settings()
	user_id = request.headers.get(settings.remote_user_header)
	if not user_id:
		logger.debug(f"Missing {settings.remote_user_header} header")
		raise HTTPException(
			status_code=status.HTTP_401_UNAUTHORIZED,
			detail="Not authenticated",
		)

	roles_header = request.headers.get(settings.remote_roles_header, "")
	roles = {r.strip().lower() for r in roles_header.split(",") if r.strip()}
	role = ActorRole.STAFF if ActorRole.STAFF.value in roles else ActorRole.CUSTOMER

	return Actor(id=user_id, role=role)


def require_staff(actor: Actor) -> None:
	if not actor.is_staff:
		raise HTTPException(
			status_code=status.HTTP_403_FORBIDDEN,
			detail="Staff access required",
		)
