# (c) Copyright Datacraft, 2026
"""Scheduling manager tests."""
from datetime import date, datetime, timezone

import pytest

from onboard.core.exceptions import InvalidTransitionError, NotFoundError, ValidationFailure
from onboard.core.features.projects.schema import ActivityType, Project
from onboard.core.features.scheduling import service
from onboard.core.features.scheduling.schema import AppointmentStatus, AppointmentType

NOV_2 = datetime(2026, 11, 2, 9, 0, tzinfo=timezone.utc)
NOV_3 = datetime(2026, 11, 3, 10, 0, tzinfo=timezone.utc)


async def _schedule(store, project, actor, when=NOV_2, slot="09:00 AM", **kwargs):
	return await service.schedule_call(
		store, project.id, project.customer_id, when, slot, actor, **kwargs
	)


async def test_schedule_call(store, make_project, customer):
	project = await make_project()

	appointment = await _schedule(store, project, customer)

	assert appointment.status == AppointmentStatus.SCHEDULED
	assert appointment.duration == 30
	assert appointment.type == AppointmentType.ONBOARDING
	assert appointment.created_by == customer.id
	project = await store.get(Project, project.id)
	assert project.call_scheduled == NOV_2
	entry = project.activities[-1]
	assert entry.type == ActivityType.CALL
	assert entry.description == "Call scheduled for 2026-11-02 at 09:00 AM"
	assert entry.related_entity_id == appointment.id


async def test_schedule_validations(store, make_project, customer):
	project = await make_project()

	with pytest.raises(ValidationFailure):
		await _schedule(store, project, customer, slot="12:00 PM")
	with pytest.raises(ValidationFailure):
		await service.schedule_call(store, project.id, "someone-else", NOV_2, "09:00 AM", customer)
	with pytest.raises(NotFoundError):
		await service.schedule_call(store, "missing", customer.id, NOV_2, "09:00 AM", customer)


async def test_call_scheduled_mirrors_earliest_remaining(store, make_project, customer):
	project = await make_project()
	later = await _schedule(store, project, customer, when=NOV_3, slot="10:00 AM")
	earlier = await _schedule(store, project, customer, when=NOV_2)
	assert (await store.get(Project, project.id)).call_scheduled == NOV_2

	await service.cancel_appointment(store, earlier.id, customer)
	assert (await store.get(Project, project.id)).call_scheduled == NOV_3

	cancelled = await service.cancel_appointment(store, later.id, customer)
	assert cancelled.status == AppointmentStatus.CANCELLED
	project = await store.get(Project, project.id)
	assert project.call_scheduled is None
	assert project.activities[-1].description == "Call cancelled: 2026-11-03 at 10:00 AM"


async def test_schedule_after_cancel_sets_new_call(store, make_project, customer):
	project = await make_project()
	first = await _schedule(store, project, customer)
	await service.cancel_appointment(store, first.id, customer)
	assert (await store.get(Project, project.id)).call_scheduled is None

	second = await _schedule(store, project, customer, when=NOV_3, slot="10:00 AM")

	project = await store.get(Project, project.id)
	assert project.call_scheduled == NOV_3 == second.date
	assert project.activities[-1].description == "Call scheduled for 2026-11-03 at 10:00 AM"
	assert project.activities[-1].related_entity_id == second.id


async def test_reschedule_sets_call_again(store, make_project, customer):
	project = await make_project()
	appointment = await _schedule(store, project, customer)

	appointment = await service.reschedule_appointment(
		store, appointment.id, NOV_3, "10:00 AM", customer
	)

	assert appointment.date == NOV_3
	assert appointment.time == "10:00 AM"
	project = await store.get(Project, project.id)
	assert project.call_scheduled == NOV_3
	assert project.activities[-1].description == "Call rescheduled to 2026-11-03 at 10:00 AM"


async def test_complete_appointment(store, make_project, customer, staff):
	project = await make_project()
	appointment = await _schedule(store, project, customer, notes="Bring contract")

	appointment = await service.complete_appointment(store, appointment.id, staff, notes="Went well")

	assert appointment.status == AppointmentStatus.COMPLETED
	assert appointment.notes == "Bring contract\nWent well"
	assert (await store.get(Project, project.id)).call_scheduled is None


async def test_terminal_states(store, make_project, customer, staff):
	project = await make_project()
	appointment = await _schedule(store, project, customer)
	await service.cancel_appointment(store, appointment.id, customer)

	with pytest.raises(InvalidTransitionError):
		await service.complete_appointment(store, appointment.id, staff)
	with pytest.raises(InvalidTransitionError):
		await service.cancel_appointment(store, appointment.id, customer)
	with pytest.raises(InvalidTransitionError):
		await service.reschedule_appointment(store, appointment.id, NOV_3, "10:00 AM", customer)


async def test_available_slots(store, make_project, customer):
	project = await make_project()
	await _schedule(store, project, customer, slot="09:00 AM")
	cancelled = await _schedule(
		store, project, customer, when=datetime(2026, 11, 2, 11, 0, tzinfo=timezone.utc), slot="11:00 AM"
	)
	await service.cancel_appointment(store, cancelled.id, customer)
	await _schedule(store, project, customer, when=NOV_3, slot="10:00 AM")

	slots = await service.available_slots(store, date(2026, 11, 2))

	assert slots == ["10:00 AM", "11:00 AM", "01:00 PM", "02:00 PM", "03:00 PM", "04:00 PM"]
	assert len(await service.available_slots(store, date(2026, 11, 4))) == 7


async def test_listing(store, make_project, customer):
	project = await make_project()
	first = await _schedule(store, project, customer, when=NOV_2)
	second = await _schedule(store, project, customer, when=NOV_3, slot="10:00 AM")

	listed = await service.list_project_appointments(store, project.id)
	assert [a.id for a in listed] == [second.id, first.id]

	upcoming = await service.upcoming_appointments(
		store, customer_id=customer.id, after=datetime(2026, 11, 2, 12, 0, tzinfo=timezone.utc)
	)
	assert [a.id for a in upcoming] == [second.id]
