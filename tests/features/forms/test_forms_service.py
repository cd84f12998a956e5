# (c) Copyright Datacraft, 2026
"""Form lifecycle tests."""
import pytest

from onboard.core.exceptions import (
	InvalidTransitionError,
	NotFoundError,
	PermissionDenied,
	ValidationFailure,
)
from onboard.core.features.forms import service
from onboard.core.features.forms.schema import (
	FieldType,
	FormCreate,
	FormField,
	FormStatus,
	FormType,
)
from onboard.core.features.projects.schema import Project


@pytest.fixture
def make_form(store, staff):
	"""Factory fixture for creating forms through the form service."""
	async def _make_form(project, **kwargs):
		data = FormCreate(
			project_id=project.id,
			customer_id=project.customer_id,
			title=kwargs.pop("title", "Company information"),
			type=kwargs.pop("type", FormType.COMPANY_INFORMATION),
			fields=kwargs.pop("fields", [
				FormField(id="company", name="company", label="Company name", required=True),
				FormField(id="size", name="size", label="Headcount", type=FieldType.NUMBER),
			]),
			**kwargs,
		)
		return await service.create_form(store, data, staff)

	return _make_form


async def test_required_form_counts_towards_progress(store, make_project, make_form, customer):
	project = await make_project(required_forms=["company-information"])
	form = await make_form(project, required=True)
	assert (await store.get(Project, project.id)).progress == 0

	response = await service.submit_response(
		store, form.id, project.id, customer, {"company": "Analytical Engines"}
	)

	assert response.form_version == 1
	assert response.submitted_by == customer.id
	form = await service.get_form(store, form.id)
	assert form.status == FormStatus.COMPLETED
	assert form.completed_by == customer.id
	project = await store.get(Project, project.id)
	assert project.progress == 100
	assert project.forms.completed == ["company-information"]
	assert project.activities[-1].description == "Form submitted: Company information"


async def test_flagged_form_without_tag_is_its_own_item(store, make_project, make_form, customer):
	project = await make_project(required_documents=["id"])
	form = await make_form(project, type=FormType.CUSTOM, required=True)

	await service.submit_response(store, form.id, project.id, customer, {"company": "AE"})

	assert (await store.get(Project, project.id)).progress == 50


async def test_submit_validations(store, make_project, make_form, customer):
	project = await make_project()
	other = await make_project(customer_name="Someone else")
	form = await make_form(project)

	with pytest.raises(NotFoundError):
		await service.submit_response(store, form.id, other.id, customer, {"company": "AE"})
	with pytest.raises(ValidationFailure):
		await service.submit_response(store, form.id, project.id, customer, {"size": 3})
	with pytest.raises(ValidationFailure):
		await service.submit_response(store, form.id, project.id, customer, {"colour": "blue"})
	with pytest.raises(NotFoundError):
		await service.submit_response(store, "missing", project.id, customer, {})


async def test_resubmission_keeps_history(store, make_project, make_form, customer, staff):
	project = await make_project()
	form = await make_form(project)

	first = await service.submit_response(store, form.id, project.id, customer, {"company": "AE"})
	await service.revise_form_fields(store, form.id, [
		FormField(id="company", name="company", label="Legal name", required=True),
	], staff)
	second = await service.submit_response(
		store, form.id, project.id, customer, {"company": "AE Ltd"}
	)

	responses = await service.list_form_responses(store, form.id)
	assert [r.id for r in responses] == [second.id, first.id]
	assert [r.form_version for r in responses] == [2, 1]
	assert (await service.latest_response(store, form.id)).responses == {"company": "AE Ltd"}


async def test_no_submission_after_review(store, make_project, make_form, customer, staff):
	project = await make_project()
	form = await make_form(project)
	await service.submit_response(store, form.id, project.id, customer, {"company": "AE"})

	form = await service.set_form_status(
		store, form.id, FormStatus.REVIEWED, staff, review_notes="Looks good"
	)
	assert form.reviewed_by == staff.id
	assert form.review_notes == "Looks good"

	with pytest.raises(InvalidTransitionError):
		await service.submit_response(store, form.id, project.id, customer, {"company": "AE"})
	with pytest.raises(InvalidTransitionError):
		await service.set_form_status(store, form.id, FormStatus.COMPLETED, staff)


async def test_status_transitions(store, make_project, make_form, customer):
	project = await make_project()
	form = await make_form(project)

	form = await service.set_form_status(store, form.id, FormStatus.IN_PROGRESS, customer)
	assert form.status == FormStatus.IN_PROGRESS

	with pytest.raises(InvalidTransitionError):
		await service.set_form_status(store, form.id, FormStatus.PENDING, customer)
	with pytest.raises(InvalidTransitionError):
		await service.set_form_status(store, form.id, FormStatus.REVIEWED, customer)

	form = await service.set_form_status(store, form.id, FormStatus.COMPLETED, customer)
	assert form.completed_at is not None

	with pytest.raises(PermissionDenied):
		await service.set_form_status(store, form.id, FormStatus.REVIEWED, customer)


async def test_revise_form_fields(store, make_project, make_form, staff):
	project = await make_project()
	form = await make_form(project)

	form = await service.revise_form_fields(store, form.id, [
		FormField(id="email", name="email", label="Email", type=FieldType.EMAIL),
	], staff)

	assert form.version == 2
	assert [f.id for f in form.fields] == ["email"]

	with pytest.raises(ValidationFailure):
		await service.revise_form_fields(store, form.id, [
			FormField(id="dup", name="a", label="A"),
			FormField(id="dup", name="b", label="B"),
		], staff)


async def test_create_form_checks_customer(store, make_project, staff):
	project = await make_project()

	with pytest.raises(ValidationFailure):
		await service.create_form(store, FormCreate(
			project_id=project.id,
			customer_id="someone-else",
			title="Requirements",
		), staff)


async def test_forms_listed_in_step_order(store, make_project, make_form):
	project = await make_project()
	second = await make_form(project, title="Step 2", order=2)
	first = await make_form(project, title="Step 1", order=1)

	forms = await service.list_project_forms(store, project.id)

	assert [f.id for f in forms] == [first.id, second.id]
	assert await service.latest_response(store, first.id) is None
