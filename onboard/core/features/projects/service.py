# (c) Copyright Datacraft, 2026
"""Service layer for onboarding projects."""
import logging

from onboard.core.exceptions import PermissionDenied, ValidationFailure
from onboard.core.identity import SYSTEM, Actor
from onboard.core.store import EntityStore

from .activity import new_entry
from .repository import mutate_project
from .schema import (
	ActivityType,
	DocumentChecklist,
	FormChecklist,
	Note,
	Project,
	ProjectCreate,
	ProjectSortKey,
	ProjectStatus,
)

logger = logging.getLogger(__name__)


# =====================================================
# Projects
# =====================================================


async def create_project(store: EntityStore, data: ProjectCreate) -> Project:
	project = Project(
		customer_id=data.customer_id,
		customer_name=data.customer_name,
		company_name=data.company_name,
		assigned_staff_id=data.assigned_staff_id,
		tags=data.tags,
		documents=DocumentChecklist(required=list(dict.fromkeys(data.required_documents))),
		forms=FormChecklist(required=list(dict.fromkeys(data.required_forms))),
		activities=[new_entry(ActivityType.STATUS, "Project created", SYSTEM)],
	)
	if data.start_date is not None:
		project.start_date = data.start_date

	project = await store.create(project)
	logger.info(f"Created project {project.id} for customer {project.customer_id}")
	return project


async def get_project(store: EntityStore, project_id: str) -> Project:
	return await store.get(Project, project_id)


async def list_projects(
	store: EntityStore,
	customer_id: str | None = None,
	staff_id: str | None = None,
	status: ProjectStatus | None = None,
	search: str | None = None,
	sort_by: ProjectSortKey = "date",
) -> list[Project]:
	"""Staff dashboard listing.

	`search` matches the customer name case-insensitively. Sorting is by
	customer name (A-Z), progress (highest first) or last update (newest
	first).
	"""
	where = {}
	if customer_id is not None:
		where["customer_id"] = customer_id
	if staff_id is not None:
		where["assigned_staff_id"] = staff_id
	if status is not None:
		where["status"] = status

	if sort_by == "progress":
		projects = await store.find(Project, where, order_by="progress", descending=True)
	elif sort_by == "date":
		projects = await store.find(Project, where, order_by="last_updated", descending=True)
	elif sort_by == "name":
		projects = await store.find(Project, where)
		projects.sort(key=lambda p: p.customer_name.casefold())
	else:
		raise ValidationFailure(f"Unknown sort key: {sort_by}")

	if search:
		needle = search.casefold()
		projects = [p for p in projects if needle in p.customer_name.casefold()]

	return projects


async def set_project_status(
	store: EntityStore,
	project_id: str,
	status: ProjectStatus,
	actor: Actor,
) -> Project:
	entry = new_entry(ActivityType.STATUS, f"Status changed to {status.value}", actor)

	async def change_status(project: Project):
		return {"status": status, "activities": [*project.activities, entry]}

	project = await mutate_project(store, project_id, change_status)
	logger.info(f"Project {project_id} status set to {status.value} by {actor.id}")
	return project


# =====================================================
# Notes
# =====================================================


async def add_note(
	store: EntityStore,
	project_id: str,
	content: str,
	actor: Actor,
	is_internal: bool = False,
) -> Project:
	if not content.strip():
		raise ValidationFailure("Note content must not be empty")
	if is_internal and not actor.is_staff:
		raise PermissionDenied("Only staff can add internal notes")
	if not (actor.is_staff or actor.is_customer):
		raise PermissionDenied("Notes must be written by a customer or staff member")

	note = Note(
		content=content,
		created_by=actor.id,
		created_by_type=actor.role,
		is_internal=is_internal,
	)
	entry = new_entry(ActivityType.NOTE, "Note added", actor, related_entity_id=note.id)

	async def add(project: Project):
		return {
			"notes": [*project.notes, note],
			"activities": [*project.activities, entry],
		}

	return await mutate_project(store, project_id, add)


def visible_notes(project: Project, actor: Actor) -> list[Note]:
	if actor.is_customer:
		return [n for n in project.notes if not n.is_internal]
	return list(project.notes)


def ensure_customer_access(customer_id: str, actor: Actor) -> None:
	"""Customers may only act on their own records."""
	if actor.is_customer and customer_id != actor.id:
		raise PermissionDenied("Record belongs to another customer")


def ensure_project_access(project: Project, actor: Actor) -> None:
	ensure_customer_access(project.customer_id, actor)


def for_actor(project: Project, actor: Actor) -> Project:
	"""Copy of the project as the actor may see it."""
	if actor.is_customer:
		return project.model_copy(update={"notes": visible_notes(project, actor)})
	return project
