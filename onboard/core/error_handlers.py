# (c) Copyright Datacraft, 2026
"""Map domain errors to JSON HTTP responses."""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from onboard.core.exceptions import (
	ConflictError,
	NotFoundError,
	OnboardError,
	PermissionDenied,
	StoreError,
	ValidationFailure,
)
from onboard.core.storage import BlobStoreError

logger = logging.getLogger(__name__)

STATUS_CODES: list[tuple[type[Exception], int]] = [
	(NotFoundError, status.HTTP_404_NOT_FOUND),
	(ValidationFailure, status.HTTP_422_UNPROCESSABLE_CONTENT),
	(PermissionDenied, status.HTTP_403_FORBIDDEN),
	(ConflictError, status.HTTP_409_CONFLICT),
	(StoreError, status.HTTP_503_SERVICE_UNAVAILABLE),
	(BlobStoreError, status.HTTP_502_BAD_GATEWAY),
]


def status_code_for(exc: Exception) -> int:
	for exc_type, code in STATUS_CODES:
		if isinstance(exc, exc_type):
			return code
	return status.HTTP_500_INTERNAL_SERVER_ERROR


async def handle_error(request: Request, exc: Exception) -> JSONResponse:
	code = status_code_for(exc)
	if code >= 500:
		logger.error(f"{code} error for path: {request.url.path}: {exc}")
	else:
		logger.warning(f"{code} error for path: {request.url.path}: {exc}")

	return JSONResponse(
		status_code=code,
		content={
			"error": exc.__class__.__name__,
			"status_code": code,
			"detail": str(exc),
		},
	)


def register_error_handlers(app: FastAPI) -> None:
	app.add_exception_handler(OnboardError, handle_error)
