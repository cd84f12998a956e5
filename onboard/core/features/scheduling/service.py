# (c) Copyright Datacraft, 2026
"""
Service layer for onboarding call scheduling.

`Project.call_scheduled` mirrors the earliest appointment of the project
that is still scheduled, or None once none is left.
"""
import logging
from datetime import date, datetime, timedelta, timezone

from onboard.core.config import get_settings
from onboard.core.exceptions import InvalidTransitionError, ValidationFailure
from onboard.core.features.projects.activity import new_entry
from onboard.core.features.projects.repository import mutate_project
from onboard.core.features.projects.schema import ActivityLog, ActivityType, Project
from onboard.core.identity import Actor
from onboard.core.store import EntityStore
from onboard.core.utils.clock import utc_now

from .schema import Appointment, AppointmentStatus, AppointmentType

logger = logging.getLogger(__name__)


def _describe(when: datetime, slot: str) -> str:
	return f"{when.strftime('%Y-%m-%d')} at {slot}"


def _check_slot(slot: str) -> None:
	slots = get_settings().call_slots
	if slot not in slots:
		raise ValidationFailure(f"'{slot}' is not a bookable slot ({', '.join(slots)})")


async def _sync_call_scheduled(
	store: EntityStore,
	project_id: str,
	entry: ActivityLog,
) -> Project:
	async def sync(project: Project):
		remaining = await store.find(
			Appointment,
			{"project_id": project_id, "status": AppointmentStatus.SCHEDULED},
			order_by="date",
		)
		return {
			"call_scheduled": remaining[0].date if remaining else None,
			"activities": [*project.activities, entry],
		}

	return await mutate_project(store, project_id, sync)


async def _get_scheduled(
	store: EntityStore,
	appointment_id: str,
	requested: AppointmentStatus,
) -> Appointment:
	appointment = await store.get(Appointment, appointment_id)
	if appointment.status != AppointmentStatus.SCHEDULED:
		raise InvalidTransitionError(
			"Appointment", appointment.status.value, requested.value
		)
	return appointment


# =====================================================
# Booking
# =====================================================


async def schedule_call(
	store: EntityStore,
	project_id: str,
	customer_id: str,
	date: datetime,
	time: str,
	actor: Actor,
	duration: int | None = None,
	type: AppointmentType = AppointmentType.ONBOARDING,
	notes: str | None = None,
) -> Appointment:
	_check_slot(time)
	project = await store.get(Project, project_id)
	if project.customer_id != customer_id:
		raise ValidationFailure(
			f"Project {project_id} does not belong to customer {customer_id}"
		)

	appointment = await store.create(Appointment(
		project_id=project_id,
		customer_id=customer_id,
		date=date,
		time=time,
		duration=duration or get_settings().default_call_duration,
		type=type,
		notes=notes,
		created_by=actor.id,
	))
	logger.info(f"Appointment {appointment.id} scheduled for project {project_id}")

	await _sync_call_scheduled(store, project_id, new_entry(
		ActivityType.CALL,
		f"Call scheduled for {_describe(appointment.date, time)}",
		actor,
		related_entity_id=appointment.id,
	))
	return appointment


async def cancel_appointment(
	store: EntityStore,
	appointment_id: str,
	actor: Actor,
) -> Appointment:
	await _get_scheduled(store, appointment_id, AppointmentStatus.CANCELLED)
	appointment = await store.update(Appointment, appointment_id, {
		"status": AppointmentStatus.CANCELLED,
	})
	logger.info(f"Appointment {appointment_id} cancelled by {actor.id}")

	await _sync_call_scheduled(store, appointment.project_id, new_entry(
		ActivityType.CALL,
		f"Call cancelled: {_describe(appointment.date, appointment.time)}",
		actor,
		related_entity_id=appointment.id,
	))
	return appointment


async def complete_appointment(
	store: EntityStore,
	appointment_id: str,
	actor: Actor,
	notes: str | None = None,
) -> Appointment:
	current = await _get_scheduled(store, appointment_id, AppointmentStatus.COMPLETED)
	fields: dict = {"status": AppointmentStatus.COMPLETED}
	if notes:
		fields["notes"] = f"{current.notes}\n{notes}" if current.notes else notes

	appointment = await store.update(Appointment, appointment_id, fields)
	logger.info(f"Appointment {appointment_id} completed by {actor.id}")

	await _sync_call_scheduled(store, appointment.project_id, new_entry(
		ActivityType.CALL,
		f"Call completed: {_describe(appointment.date, appointment.time)}",
		actor,
		related_entity_id=appointment.id,
	))
	return appointment


async def reschedule_appointment(
	store: EntityStore,
	appointment_id: str,
	date: datetime,
	time: str,
	actor: Actor,
) -> Appointment:
	_check_slot(time)
	await _get_scheduled(store, appointment_id, AppointmentStatus.SCHEDULED)
	appointment = await store.update(Appointment, appointment_id, {
		"date": date,
		"time": time,
	})
	logger.info(f"Appointment {appointment_id} rescheduled by {actor.id}")

	await _sync_call_scheduled(store, appointment.project_id, new_entry(
		ActivityType.CALL,
		f"Call rescheduled to {_describe(appointment.date, time)}",
		actor,
		related_entity_id=appointment.id,
	))
	return appointment


# =====================================================
# Queries
# =====================================================


async def available_slots(store: EntityStore, day: date) -> list[str]:
	"""Slots of the day not taken by a scheduled appointment (UTC day)."""
	start = datetime.combine(day, datetime.min.time(), tzinfo=timezone.utc)
	booked = await store.find(Appointment, {
		"status": AppointmentStatus.SCHEDULED,
		"date__gte": start,
		"date__lt": start + timedelta(days=1),
	})
	taken = {a.time for a in booked}
	return [slot for slot in get_settings().call_slots if slot not in taken]


async def list_project_appointments(store: EntityStore, project_id: str) -> list[Appointment]:
	return await store.find(
		Appointment, {"project_id": project_id}, order_by="date", descending=True
	)


async def upcoming_appointments(
	store: EntityStore,
	project_id: str | None = None,
	customer_id: str | None = None,
	after: datetime | None = None,
) -> list[Appointment]:
	where: dict = {
		"status": AppointmentStatus.SCHEDULED,
		"date__gte": after or utc_now(),
	}
	if project_id is not None:
		where["project_id"] = project_id
	if customer_id is not None:
		where["customer_id"] = customer_id
	return await store.find(Appointment, where, order_by="date")
