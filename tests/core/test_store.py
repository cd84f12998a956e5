# (c) Copyright Datacraft, 2026
"""Entity store tests against an in-memory SQLite database."""
import pytest

from onboard.core.exceptions import ConflictError, NotFoundError, StoreError
from onboard.core.features.projects.activity import new_entry
from onboard.core.features.projects.schema import (
	ActivityType,
	Project,
	ProjectStatus,
)
from onboard.core.identity import SYSTEM


def _project(**kwargs) -> Project:
	return Project(
		customer_id=kwargs.pop("customer_id", "cust-1"),
		customer_name=kwargs.pop("customer_name", "Ada Lovelace"),
		company_name="Analytical Engines Ltd",
		**kwargs,
	)


async def test_create_and_get(store):
	project = await store.create(_project(tags=["priority"]))

	fetched = await store.get(Project, project.id)

	assert fetched.id == project.id
	assert fetched.customer_name == "Ada Lovelace"
	assert fetched.tags == ["priority"]
	assert fetched.status == ProjectStatus.ON_TRACK
	assert fetched.revision == 0
	assert fetched.created_at.tzinfo is not None


async def test_nested_collections_survive_a_round_trip(store):
	entry = new_entry(ActivityType.STATUS, "Project created", SYSTEM)
	project = await store.create(_project(activities=[entry]))

	fetched = await store.get(Project, project.id)

	assert fetched.activities == [entry]


async def test_get_missing_raises_not_found(store):
	with pytest.raises(NotFoundError):
		await store.get(Project, "missing")


async def test_update_increments_revision(store):
	project = await store.create(_project())

	updated = await store.update(Project, project.id, {"progress": 50})

	assert updated.progress == 50
	assert updated.revision == 1
	assert updated.last_updated >= project.last_updated


async def test_update_with_stale_revision_conflicts(store):
	project = await store.create(_project())
	await store.update(Project, project.id, {"progress": 10}, expected_revision=0)

	with pytest.raises(ConflictError):
		await store.update(Project, project.id, {"progress": 20}, expected_revision=0)

	assert (await store.get(Project, project.id)).progress == 10


async def test_update_missing_raises_not_found(store):
	with pytest.raises(NotFoundError):
		await store.update(Project, "missing", {"progress": 10})

	with pytest.raises(NotFoundError):
		await store.update(Project, "missing", {"progress": 10}, expected_revision=0)


async def test_delete(store):
	project = await store.create(_project())

	await store.delete(Project, project.id)

	with pytest.raises(NotFoundError):
		await store.get(Project, project.id)
	with pytest.raises(NotFoundError):
		await store.delete(Project, project.id)


async def test_duplicate_id_is_a_store_error(store):
	project = await store.create(_project())

	with pytest.raises(StoreError):
		await store.create(project)


async def test_list_where_operators(store):
	for progress in (10, 50, 90):
		await store.create(_project(progress=progress))
	await store.create(_project(progress=70, status=ProjectStatus.DELAYED))

	async def progresses(where, **kwargs):
		return [p.progress for p in await store.find(Project, where, **kwargs)]

	assert await progresses({"progress__gte": 50}, order_by="progress") == [50, 70, 90]
	assert await progresses({"progress__lt": 50}) == [10]
	assert await progresses({"progress__in": [10, 90]}, order_by="progress") == [10, 90]
	assert await progresses({"status": ProjectStatus.DELAYED}) == [70]
	assert await progresses(
		{"status__ne": ProjectStatus.DELAYED}, order_by="progress", descending=True
	) == [90, 50, 10]
	assert await progresses({"assigned_staff_id": None}, order_by="progress") == [10, 50, 70, 90]


async def test_list_where_is_a_single_pass_iterator(store):
	await store.create(_project())

	results = store.list_where(Project)
	assert len([p async for p in results]) == 1
	assert [p async for p in results] == []


async def test_list_where_rejects_unknown_fields(store):
	with pytest.raises(ValueError):
		await store.find(Project, {"colour": "blue"})
