# (c) Copyright Datacraft, 2026
"""FastAPI router for onboarding call appointments."""
from datetime import date

from fastapi import APIRouter, Query, status

from onboard.core.auth import require_staff
from onboard.core.dependencies import CurrentActor, Store
from onboard.core.features.projects import service as projects_service

from . import service
from .schema import (
	Appointment,
	AppointmentComplete,
	AppointmentCreate,
	AppointmentReschedule,
)

router = APIRouter(prefix="/appointments", tags=["appointments"])


async def _load(store, appointment_id: str, actor) -> Appointment:
	appointment = await store.get(Appointment, appointment_id)
	projects_service.ensure_customer_access(appointment.customer_id, actor)
	return appointment


@router.post("", response_model=Appointment, status_code=status.HTTP_201_CREATED)
async def schedule_call(
	data: AppointmentCreate,
	actor: CurrentActor,
	store: Store,
) -> Appointment:
	project = await projects_service.get_project(store, data.project_id)
	projects_service.ensure_project_access(project, actor)
	return await service.schedule_call(
		store,
		project_id=project.id,
		customer_id=project.customer_id,
		date=data.date,
		time=data.time,
		actor=actor,
		duration=data.duration,
		type=data.type,
		notes=data.notes,
	)


@router.get("", response_model=list[Appointment])
async def list_appointments(
	actor: CurrentActor,
	store: Store,
	project_id: str = Query(...),
) -> list[Appointment]:
	"""Appointments of a project, latest date first."""
	project = await projects_service.get_project(store, project_id)
	projects_service.ensure_project_access(project, actor)
	return await service.list_project_appointments(store, project_id)


@router.get("/slots", response_model=list[str])
async def available_slots(
	actor: CurrentActor,
	store: Store,
	day: date = Query(..., alias="date"),
) -> list[str]:
	return await service.available_slots(store, day)


@router.get("/upcoming", response_model=list[Appointment])
async def upcoming_appointments(
	actor: CurrentActor,
	store: Store,
	project_id: str | None = Query(None),
) -> list[Appointment]:
	customer_id = actor.id if actor.is_customer else None
	return await service.upcoming_appointments(
		store, project_id=project_id, customer_id=customer_id
	)


@router.post("/{appointment_id}/cancel", response_model=Appointment)
async def cancel_appointment(
	appointment_id: str,
	actor: CurrentActor,
	store: Store,
) -> Appointment:
	await _load(store, appointment_id, actor)
	return await service.cancel_appointment(store, appointment_id, actor)


@router.post("/{appointment_id}/complete", response_model=Appointment)
async def complete_appointment(
	appointment_id: str,
	data: AppointmentComplete,
	actor: CurrentActor,
	store: Store,
) -> Appointment:
	require_staff(actor)
	return await service.complete_appointment(store, appointment_id, actor, notes=data.notes)


@router.post("/{appointment_id}/reschedule", response_model=Appointment)
async def reschedule_appointment(
	appointment_id: str,
	data: AppointmentReschedule,
	actor: CurrentActor,
	store: Store,
) -> Appointment:
	await _load(store, appointment_id, actor)
	return await service.reschedule_appointment(
		store, appointment_id, data.date, data.time, actor
	)
