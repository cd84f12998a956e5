# (c) Copyright Datacraft, 2026
"""FastAPI router for onboarding forms."""
from fastapi import APIRouter, Query, status

from onboard.core.auth import require_staff
from onboard.core.dependencies import CurrentActor, Store
from onboard.core.features.projects import service as projects_service

from . import service
from .schema import (
	Form,
	FormCreate,
	FormFieldsUpdate,
	FormResponse,
	FormResponseCreate,
	FormStatusUpdate,
)

router = APIRouter(prefix="/forms", tags=["forms"])


async def _load(store, form_id: str, actor) -> Form:
	form = await service.get_form(store, form_id)
	projects_service.ensure_customer_access(form.customer_id, actor)
	return form


@router.post("", response_model=Form, status_code=status.HTTP_201_CREATED)
async def create_form(
	data: FormCreate,
	actor: CurrentActor,
	store: Store,
) -> Form:
	require_staff(actor)
	return await service.create_form(store, data, actor)


@router.get("", response_model=list[Form])
async def list_forms(
	actor: CurrentActor,
	store: Store,
	project_id: str = Query(...),
) -> list[Form]:
	"""Forms of a project in step order."""
	project = await projects_service.get_project(store, project_id)
	projects_service.ensure_project_access(project, actor)
	return await service.list_project_forms(store, project_id)


@router.get("/{form_id}", response_model=Form)
async def get_form(
	form_id: str,
	actor: CurrentActor,
	store: Store,
) -> Form:
	return await _load(store, form_id, actor)


@router.put("/{form_id}/fields", response_model=Form)
async def revise_form_fields(
	form_id: str,
	data: FormFieldsUpdate,
	actor: CurrentActor,
	store: Store,
) -> Form:
	require_staff(actor)
	return await service.revise_form_fields(store, form_id, data.fields, actor)


@router.patch("/{form_id}/status", response_model=Form)
async def set_form_status(
	form_id: str,
	data: FormStatusUpdate,
	actor: CurrentActor,
	store: Store,
) -> Form:
	await _load(store, form_id, actor)
	return await service.set_form_status(
		store, form_id, data.status, actor, review_notes=data.review_notes
	)


# =====================================================
# Responses
# =====================================================


@router.post("/{form_id}/responses", response_model=FormResponse, status_code=status.HTTP_201_CREATED)
async def submit_response(
	form_id: str,
	data: FormResponseCreate,
	actor: CurrentActor,
	store: Store,
) -> FormResponse:
	await _load(store, form_id, actor)
	return await service.submit_response(
		store, form_id, data.project_id, actor, data.responses
	)


@router.get("/{form_id}/responses", response_model=list[FormResponse])
async def list_responses(
	form_id: str,
	actor: CurrentActor,
	store: Store,
) -> list[FormResponse]:
	"""All submissions, newest first."""
	await _load(store, form_id, actor)
	return await service.list_form_responses(store, form_id)


@router.get("/{form_id}/responses/latest", response_model=FormResponse | None)
async def latest_response(
	form_id: str,
	actor: CurrentActor,
	store: Store,
) -> FormResponse | None:
	await _load(store, form_id, actor)
	return await service.latest_response(store, form_id)
