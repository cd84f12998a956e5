# (c) Copyright Datacraft, 2026
"""Append-only activity log attached to each project."""
import logging

from onboard.core.identity import Actor
from onboard.core.store import EntityStore

from .repository import mutate_project
from .schema import ActivityLog, ActivityType, Project

logger = logging.getLogger(__name__)


def new_entry(
	type: ActivityType,
	description: str,
	actor: Actor,
	related_entity_id: str | None = None,
) -> ActivityLog:
	return ActivityLog(
		type=type,
		description=description,
		performed_by=actor.id,
		performed_by_type=actor.role,
		related_entity_id=related_entity_id,
	)


async def append(store: EntityStore, project_id: str, *entries: ActivityLog) -> Project:
	"""Append entries to the project's log in one write."""

	async def add_entries(project: Project):
		return {"activities": [*project.activities, *entries]}

	project = await mutate_project(store, project_id, add_entries)
	logger.debug(f"Appended {len(entries)} activity entries to project {project_id}")
	return project


def timeline(project: Project) -> list[ActivityLog]:
	"""Entries newest first; entries with equal timestamps keep reverse insertion order."""
	indexed = sorted(
		enumerate(project.activities),
		key=lambda pair: (pair[1].timestamp, pair[0]),
		reverse=True,
	)
	return [entry for _, entry in indexed]
