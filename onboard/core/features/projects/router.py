# (c) Copyright Datacraft, 2026
"""FastAPI router for onboarding projects."""
from fastapi import APIRouter, status

from onboard.core.auth import require_staff
from onboard.core.dependencies import CurrentActor, Store

from . import service
from .activity import timeline
from .progress import recompute_project
from .schema import (
	ActivityLog,
	Note,
	NoteCreate,
	Project,
	ProjectCreate,
	ProjectSortKey,
	ProjectStatus,
	ProjectStatusUpdate,
)

router = APIRouter(prefix="/projects", tags=["projects"])


async def _load(store, project_id: str, actor) -> Project:
	project = await service.get_project(store, project_id)
	service.ensure_project_access(project, actor)
	return project


@router.get("", response_model=list[Project])
async def list_projects(
	actor: CurrentActor,
	store: Store,
	status: ProjectStatus | None = None,
	search: str | None = None,
	sort_by: ProjectSortKey = "date",
	staff_id: str | None = None,
) -> list[Project]:
	"""List projects; customers only see their own."""
	customer_id = actor.id if actor.is_customer else None
	projects = await service.list_projects(
		store,
		customer_id=customer_id,
		staff_id=staff_id,
		status=status,
		search=search,
		sort_by=sort_by,
	)
	return [service.for_actor(p, actor) for p in projects]


@router.post("", response_model=Project, status_code=status.HTTP_201_CREATED)
async def create_project(
	data: ProjectCreate,
	actor: CurrentActor,
	store: Store,
) -> Project:
	require_staff(actor)
	return await service.create_project(store, data)


@router.get("/{project_id}", response_model=Project)
async def get_project(
	project_id: str,
	actor: CurrentActor,
	store: Store,
) -> Project:
	project = await _load(store, project_id, actor)
	return service.for_actor(project, actor)


@router.patch("/{project_id}/status", response_model=Project)
async def set_project_status(
	project_id: str,
	data: ProjectStatusUpdate,
	actor: CurrentActor,
	store: Store,
) -> Project:
	require_staff(actor)
	return await service.set_project_status(store, project_id, data.status, actor)


@router.post("/{project_id}/recompute", response_model=Project)
async def recompute_progress(
	project_id: str,
	actor: CurrentActor,
	store: Store,
) -> Project:
	"""Recompute progress from the current documents and forms."""
	require_staff(actor)
	return await recompute_project(store, project_id, actor)


# =====================================================
# Notes & Activity
# =====================================================


@router.get("/{project_id}/notes", response_model=list[Note])
async def list_notes(
	project_id: str,
	actor: CurrentActor,
	store: Store,
) -> list[Note]:
	project = await _load(store, project_id, actor)
	return service.visible_notes(project, actor)


@router.post("/{project_id}/notes", response_model=Project, status_code=status.HTTP_201_CREATED)
async def add_note(
	project_id: str,
	data: NoteCreate,
	actor: CurrentActor,
	store: Store,
) -> Project:
	await _load(store, project_id, actor)
	project = await service.add_note(
		store, project_id, data.content, actor, is_internal=data.is_internal
	)
	return service.for_actor(project, actor)


@router.get("/{project_id}/activities", response_model=list[ActivityLog])
async def list_activities(
	project_id: str,
	actor: CurrentActor,
	store: Store,
) -> list[ActivityLog]:
	"""Project timeline, newest first."""
	project = await _load(store, project_id, actor)
	return timeline(project)
