# (c) Copyright Datacraft, 2026
"""Service layer for onboarding forms and their responses."""
import logging
from typing import Any, Mapping

from onboard.core.exceptions import (
	InvalidTransitionError,
	NotFoundError,
	PermissionDenied,
	ValidationFailure,
)
from onboard.core.features.projects.activity import new_entry
from onboard.core.features.projects.progress import recompute_project
from onboard.core.features.projects.schema import ActivityType, Project
from onboard.core.identity import Actor
from onboard.core.store import EntityStore
from onboard.core.utils.clock import utc_now

from .schema import Form, FormCreate, FormField, FormResponse, FormStatus

logger = logging.getLogger(__name__)

TRANSITIONS: dict[FormStatus, set[FormStatus]] = {
	FormStatus.PENDING: {FormStatus.IN_PROGRESS, FormStatus.COMPLETED},
	FormStatus.IN_PROGRESS: {FormStatus.COMPLETED},
	FormStatus.COMPLETED: {FormStatus.REVIEWED},
	FormStatus.REVIEWED: set(),
}


def _check_fields(fields: list[FormField]) -> None:
	ids = [f.id for f in fields]
	if len(ids) != len(set(ids)):
		raise ValidationFailure("Form field ids must be unique")


# =====================================================
# Forms
# =====================================================


async def create_form(store: EntityStore, data: FormCreate, actor: Actor) -> Form:
	project = await store.get(Project, data.project_id)
	if project.customer_id != data.customer_id:
		raise ValidationFailure(
			f"Project {project.id} does not belong to customer {data.customer_id}"
		)
	_check_fields(data.fields)

	form = await store.create(Form(**data.model_dump()))
	logger.info(f"Created form {form.id} ({form.type.value}) on project {project.id}")

	if form.required:
		await recompute_project(store, project.id, actor)
	return form


async def revise_form_fields(
	store: EntityStore,
	form_id: str,
	fields: list[FormField],
	actor: Actor,
) -> Form:
	"""Replace the field schema; responses already given keep their version."""
	_check_fields(fields)
	form = await store.get(Form, form_id)
	form = await store.update(Form, form_id, {
		"fields": fields,
		"version": form.version + 1,
	})
	logger.info(f"Form {form_id} revised to version {form.version} by {actor.id}")
	return form


async def set_form_status(
	store: EntityStore,
	form_id: str,
	new_status: FormStatus,
	actor: Actor,
	review_notes: str | None = None,
) -> Form:
	form = await store.get(Form, form_id)
	if new_status not in TRANSITIONS[form.status]:
		raise InvalidTransitionError("Form", form.status.value, new_status.value)
	if new_status == FormStatus.REVIEWED and actor.is_customer:
		raise PermissionDenied("Only staff can review forms")

	now = utc_now()
	fields: dict[str, Any] = {"status": new_status}
	if new_status == FormStatus.COMPLETED:
		fields.update(completed_at=now, completed_by=actor.id)
		description = f"Form completed: {form.title}"
	elif new_status == FormStatus.REVIEWED:
		fields.update(reviewed_at=now, reviewed_by=actor.id, review_notes=review_notes)
		description = f"Form reviewed: {form.title}"
	else:
		description = f"Form started: {form.title}"

	previous = form.status
	form = await store.update(Form, form_id, fields)
	logger.info(
		f"Form {form_id} moved from {previous.value} to {new_status.value} by {actor.id}"
	)

	await recompute_project(store, form.project_id, actor, [
		new_entry(ActivityType.FORM, description, actor, related_entity_id=form.id),
	])
	return form


# =====================================================
# Responses
# =====================================================


async def submit_response(
	store: EntityStore,
	form_id: str,
	project_id: str,
	actor: Actor,
	responses: Mapping[str, Any],
) -> FormResponse:
	"""Record a submission and mark the form completed.

	Every submission is a new FormResponse; earlier ones are kept.
	"""
	form = await store.get(Form, form_id)
	if form.project_id != project_id:
		raise NotFoundError("Form", form_id)
	if form.status == FormStatus.REVIEWED:
		raise InvalidTransitionError("Form", form.status.value, FormStatus.COMPLETED.value)

	known = {f.id for f in form.fields}
	unknown = sorted(set(responses) - known) if known else []
	if unknown:
		raise ValidationFailure(f"Unknown form fields: {', '.join(unknown)}")
	missing = [
		f.label for f in form.fields
		if f.required and responses.get(f.id) in (None, "", [])
	]
	if missing:
		raise ValidationFailure(f"Missing required fields: {', '.join(missing)}")

	now = utc_now()
	response = await store.create(FormResponse(
		form_id=form.id,
		project_id=project_id,
		customer_id=form.customer_id,
		responses=dict(responses),
		submitted_at=now,
		submitted_by=actor.id,
		form_version=form.version,
	))

	await store.update(Form, form_id, {
		"status": FormStatus.COMPLETED,
		"completed_at": now,
		"completed_by": actor.id,
	})
	logger.info(f"Response {response.id} submitted for form {form_id} by {actor.id}")

	await recompute_project(store, project_id, actor, [
		new_entry(
			ActivityType.FORM,
			f"Form submitted: {form.title}",
			actor,
			related_entity_id=form.id,
		),
	])
	return response


# =====================================================
# Queries
# =====================================================


async def get_form(store: EntityStore, form_id: str) -> Form:
	return await store.get(Form, form_id)


async def list_project_forms(store: EntityStore, project_id: str) -> list[Form]:
	return await store.find(Form, {"project_id": project_id}, order_by="order")


async def list_form_responses(store: EntityStore, form_id: str) -> list[FormResponse]:
	return await store.find(
		FormResponse, {"form_id": form_id}, order_by="submitted_at", descending=True
	)


async def latest_response(store: EntityStore, form_id: str) -> FormResponse | None:
	responses = await list_form_responses(store, form_id)
	return responses[0] if responses else None
