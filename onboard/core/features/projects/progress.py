# (c) Copyright Datacraft, 2026
"""
Progress aggregation for the Project aggregate.

Progress is the rounded percentage of required items in a done status.
A required item is either a document/form type tag listed on the project,
or a document/form record flagged required whose type is not listed.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, Literal, Sequence

from onboard.core.features.documents.schema import Document, DocumentStatus
from onboard.core.features.forms.schema import Form, FormStatus
from onboard.core.features.monitoring.metrics import PROGRESS_RECOMPUTES
from onboard.core.identity import Actor
from onboard.core.store import EntityStore

from .activity import new_entry
from .repository import mutate_project
from .schema import ActivityLog, ActivityType, Project

logger = logging.getLogger(__name__)

DOCUMENT_DONE = frozenset({DocumentStatus.UPLOADED, DocumentStatus.VERIFIED})
FORM_DONE = frozenset({FormStatus.COMPLETED, FormStatus.REVIEWED})

# Higher rank wins when several records share one required tag
DOCUMENT_RANK = {
	DocumentStatus.PENDING: 0,
	DocumentStatus.REJECTED: 1,
	DocumentStatus.UPLOADED: 2,
	DocumentStatus.VERIFIED: 3,
}
FORM_RANK = {
	FormStatus.PENDING: 0,
	FormStatus.IN_PROGRESS: 1,
	FormStatus.COMPLETED: 2,
	FormStatus.REVIEWED: 3,
}


@dataclass(frozen=True)
class RequiredItem:
	kind: Literal["document", "form"]
	key: str
	status: DocumentStatus | FormStatus

	@property
	def done(self) -> bool:
		if self.kind == "document":
			return self.status in DOCUMENT_DONE
		return self.status in FORM_DONE


def compute_progress(items: Iterable[RequiredItem]) -> int:
	items = list(items)
	total = len(items)
	if total == 0:
		return 0
	done = sum(1 for item in items if item.done)
	# round(100 * done / total) with halves rounded up
	return (200 * done + total) // (2 * total)


def _best(statuses: list, rank: dict, default):
	if not statuses:
		return default
	return max(statuses, key=lambda s: rank[s])


def required_items(
	project: Project,
	documents: Sequence[Document],
	forms: Sequence[Form],
) -> list[RequiredItem]:
	items: list[RequiredItem] = []

	doc_tags = list(dict.fromkeys(project.documents.required))
	for tag in doc_tags:
		statuses = [d.status for d in documents if d.type.value == tag]
		items.append(RequiredItem(
			"document", tag, _best(statuses, DOCUMENT_RANK, DocumentStatus.PENDING)
		))
	for doc in documents:
		if doc.required and doc.type.value not in doc_tags:
			items.append(RequiredItem("document", doc.id, doc.status))

	form_tags = list(dict.fromkeys(project.forms.required))
	for tag in form_tags:
		statuses = [f.status for f in forms if f.type.value == tag]
		items.append(RequiredItem(
			"form", tag, _best(statuses, FORM_RANK, FormStatus.PENDING)
		))
	for form in forms:
		if form.required and form.type.value not in form_tags:
			items.append(RequiredItem("form", form.id, form.status))

	return items


def _done_types(records: Sequence[Document] | Sequence[Form], done: frozenset) -> list[str]:
	return sorted({r.type.value for r in records if r.status in done})


async def recompute_project(
	store: EntityStore,
	project_id: str,
	actor: Actor,
	entries: Sequence[ActivityLog] = (),
) -> Project:
	"""Recompute progress from ground truth in a single project write.

	Also refreshes `documents.uploaded` and `forms.completed`. When the
	percentage changed a `Progress updated to N%` entry attributed to
	`actor` is appended, followed by the caller's own entries.
	"""

	async def recompute(project: Project):
		documents = await store.find(Document, {"project_id": project_id})
		forms = await store.find(Form, {"project_id": project_id})

		progress = compute_progress(required_items(project, documents, forms))
		checklist_docs = project.documents.model_copy(
			update={"uploaded": _done_types(documents, DOCUMENT_DONE)}
		)
		checklist_forms = project.forms.model_copy(
			update={"completed": _done_types(forms, FORM_DONE)}
		)
		activities = list(project.activities)
		if progress != project.progress:
			activities.append(new_entry(
				ActivityType.STATUS, f"Progress updated to {progress}%", actor
			))
		return {
			"progress": progress,
			"documents": checklist_docs,
			"forms": checklist_forms,
			"activities": [*activities, *entries],
		}

	project = await mutate_project(store, project_id, recompute)
	PROGRESS_RECOMPUTES.inc()
	logger.info(f"Project {project_id} progress is {project.progress}%")
	return project
