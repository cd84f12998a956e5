# (c) Copyright Datacraft, 2026
"""Compare-and-swap writes of the Project aggregate."""
import logging
from typing import Any, Awaitable, Callable, Mapping

from onboard.core.config import get_settings
from onboard.core.exceptions import ConflictError
from onboard.core.features.monitoring.metrics import PROJECT_WRITE_CONFLICTS
from onboard.core.store import EntityStore

from .schema import Project

logger = logging.getLogger(__name__)

# Receives the freshly read project, returns the fields to write
Mutation = Callable[[Project], Awaitable[Mapping[str, Any]]]


async def mutate_project(
	store: EntityStore,
	project_id: str,
	mutation: Mutation,
	retries: int | None = None,
) -> Project:
	"""Apply `mutation` to the current project state and write it back.

	The write is conditional on the revision that was read. When another
	writer wins, the project is re-read and the mutation re-applied, up to
	`retries` extra attempts (`project_write_retries` by default).

	Raises:
		NotFoundError: If the project does not exist
		ConflictError: If every attempt lost against a concurrent writer
	"""
	if retries is None:
		retries = get_settings().project_write_retries

	attempt = 0
	while True:
		project = await store.get(Project, project_id)
		fields = await mutation(project)
		try:
			return await store.update(
				Project,
				project_id,
				fields,
				expected_revision=project.revision,
			)
		except ConflictError:
			PROJECT_WRITE_CONFLICTS.inc()
			if attempt >= retries:
				logger.error(
					f"Giving up on project {project_id} after {attempt + 1} conflicting writes"
				)
				raise
			attempt += 1
			logger.info(
				f"Concurrent write on project {project_id}, retrying ({attempt}/{retries})"
			)
