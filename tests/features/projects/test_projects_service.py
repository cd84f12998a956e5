# (c) Copyright Datacraft, 2026
"""Project service tests."""
import pytest

from onboard.core.exceptions import PermissionDenied, ValidationFailure
from onboard.core.features.projects import service
from onboard.core.features.projects.schema import ActivityType, ProjectStatus
from onboard.core.identity import Actor, ActorRole


async def test_create_project(make_project):
	project = await make_project(required_documents=["id", "contract", "id"])

	assert project.status == ProjectStatus.ON_TRACK
	assert project.progress == 0
	assert project.documents.required == ["id", "contract"]
	assert project.documents.uploaded == []
	assert project.call_scheduled is None
	[created] = project.activities
	assert created.description == "Project created"
	assert created.performed_by_type == ActorRole.SYSTEM


async def test_list_projects_filters_and_sorts(store, make_project, staff):
	charlie = await make_project(customer_name="Charlie", customer_id="c3")
	await make_project(customer_name="alice", customer_id="c1", assigned_staff_id=staff.id)
	await make_project(customer_name="Bob", customer_id="c2")
	await store.update(type(charlie), charlie.id, {"progress": 80})

	by_name = await service.list_projects(store, sort_by="name")
	assert [p.customer_name for p in by_name] == ["alice", "Bob", "Charlie"]

	by_progress = await service.list_projects(store, sort_by="progress")
	assert by_progress[0].customer_name == "Charlie"

	found = await service.list_projects(store, search="LI", sort_by="name")
	assert [p.customer_name for p in found] == ["alice", "Charlie"]

	mine = await service.list_projects(store, staff_id=staff.id)
	assert [p.customer_name for p in mine] == ["alice"]

	theirs = await service.list_projects(store, customer_id="c2")
	assert [p.customer_name for p in theirs] == ["Bob"]


async def test_list_projects_by_date_puts_recent_updates_first(store, make_project, staff):
	first = await make_project(customer_name="First", customer_id="c1")
	await make_project(customer_name="Second", customer_id="c2")

	await service.set_project_status(store, first.id, ProjectStatus.DELAYED, staff)

	projects = await service.list_projects(store, sort_by="date")
	assert [p.customer_name for p in projects] == ["First", "Second"]

	delayed = await service.list_projects(store, status=ProjectStatus.DELAYED)
	assert [p.customer_name for p in delayed] == ["First"]


async def test_set_project_status(store, make_project, staff):
	project = await make_project()

	project = await service.set_project_status(store, project.id, ProjectStatus.DELAYED, staff)

	assert project.status == ProjectStatus.DELAYED
	entry = project.activities[-1]
	assert entry.description == "Status changed to Delayed"
	assert entry.type == ActivityType.STATUS
	assert entry.performed_by == staff.id


async def test_add_note(store, make_project, customer):
	project = await make_project()

	project = await service.add_note(store, project.id, "Please call after 3pm", customer)

	[note] = project.notes
	assert note.content == "Please call after 3pm"
	assert note.created_by_type == ActorRole.CUSTOMER
	assert not note.is_internal
	assert project.activities[-1].description == "Note added"
	assert project.activities[-1].related_entity_id == note.id


async def test_internal_notes(store, make_project, staff, customer):
	project = await make_project()

	with pytest.raises(PermissionDenied):
		await service.add_note(store, project.id, "secret", customer, is_internal=True)

	await service.add_note(store, project.id, "public", staff)
	project = await service.add_note(store, project.id, "secret", staff, is_internal=True)

	assert [n.content for n in service.visible_notes(project, staff)] == ["public", "secret"]
	assert [n.content for n in service.visible_notes(project, customer)] == ["public"]
	assert [n.content for n in service.for_actor(project, customer).notes] == ["public"]


async def test_empty_note_is_rejected(store, make_project, customer):
	project = await make_project()

	with pytest.raises(ValidationFailure):
		await service.add_note(store, project.id, "   ", customer)


async def test_customers_only_reach_their_own_projects(make_project, customer):
	project = await make_project(customer_id="someone-else")

	with pytest.raises(PermissionDenied):
		service.ensure_project_access(project, customer)

	service.ensure_project_access(project, Actor(id="anyone", role=ActorRole.STAFF))
