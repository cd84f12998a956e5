# (c) Copyright Datacraft, 2026
"""
Document lifecycle: upload, review, re-upload and removal.

A document record names its blob key before the blob is written (a
re-upload through `pending_path`), so a blob without a record can only come
from a crash between the two writes; `reconcile_orphans` sweeps those up.
"""
import logging
import re
from datetime import datetime

from onboard.core.config import get_settings
from onboard.core.exceptions import (
	InvalidTransitionError,
	PermissionDenied,
	ValidationFailure,
)
from onboard.core.features.monitoring.metrics import DOCUMENT_UPLOADS
from onboard.core.features.projects.activity import new_entry
from onboard.core.features.projects.progress import recompute_project
from onboard.core.features.projects.schema import ActivityType, Project
from onboard.core.identity import SYSTEM, Actor
from onboard.core.storage import BlobStore, ProgressCallback
from onboard.core.store import EntityStore
from onboard.core.utils.clock import utc_now

from .schema import (
	Document,
	DocumentStatus,
	DocumentType,
	DocumentVersion,
	DownloadUrl,
	FileMetadata,
	IncomingFile,
)

logger = logging.getLogger(__name__)

DEFAULT_REJECTION_REASON = "Document requires revision"

# Transitions reachable through set_document_status. Rejected documents
# only come back through reupload_document.
TRANSITIONS: dict[DocumentStatus, set[DocumentStatus]] = {
	DocumentStatus.PENDING: {DocumentStatus.UPLOADED},
	DocumentStatus.UPLOADED: {DocumentStatus.VERIFIED, DocumentStatus.REJECTED},
	DocumentStatus.REJECTED: set(),
	DocumentStatus.VERIFIED: set(),
}
REVIEW_STATES = {DocumentStatus.VERIFIED, DocumentStatus.REJECTED}


def blob_prefix(project_id: str) -> str:
	return f"documents/{project_id}/"


def blob_key(project_id: str, filename: str, now: datetime | None = None) -> str:
	"""documents/<project_id>/<epoch-ms>_<filename with unsafe chars replaced>"""
	now = now or utc_now()
	safe_name = re.sub(r"[^a-zA-Z0-9.]", "_", filename)
	return f"{blob_prefix(project_id)}{int(now.timestamp() * 1000)}_{safe_name}"


def _check_file(file: IncomingFile) -> None:
	settings = get_settings()
	if not file.filename:
		raise ValidationFailure("Uploaded file has no name")
	if file.size > settings.max_file_size:
		raise ValidationFailure(
			f"File {file.filename} is larger than {settings.max_file_size_mb} MB"
		)


async def _download_url(storage: BlobStore, key: str) -> DownloadUrl:
	signed = await storage.signed_url(key, get_settings().download_url_expires_in)
	return DownloadUrl(url=signed.url, expires_at=signed.expires_at)


async def _discard_blob(storage: BlobStore, key: str) -> None:
	try:
		await storage.delete(key)
	except Exception as e:
		logger.error(f"Failed to delete blob {key} during cleanup: {e}")


# =====================================================
# Upload
# =====================================================


async def upload_document(
	store: EntityStore,
	storage: BlobStore,
	file: IncomingFile,
	project_id: str,
	document_type: DocumentType,
	required: bool,
	actor: Actor,
	on_progress: ProgressCallback | None = None,
) -> Document:
	_check_file(file)
	project = await store.get(Project, project_id)

	key = blob_key(project_id, file.filename)
	document = await store.create(Document(
		project_id=project_id,
		customer_id=project.customer_id,
		name=file.filename,
		type=document_type,
		required=required,
		file_path=key,
	))

	try:
		await storage.put(
			key,
			file.data,
			content_type=file.content_type,
			metadata={"document_id": document.id, "project_id": project_id},
			on_progress=on_progress,
		)
	except Exception as e:
		logger.error(f"Upload of {key} failed, removing document {document.id}: {e}")
		DOCUMENT_UPLOADS.labels(outcome="failed").inc()
		await store.delete(Document, document.id)
		raise

	try:
		url = await _download_url(storage, key)
		document = await store.update(Document, document.id, {
			"status": DocumentStatus.UPLOADED,
			"uploaded_at": utc_now(),
			"uploaded_by": actor.id,
			"file_url": url.url,
			"file_type": file.content_type,
			"file_size": file.size,
			"file_metadata": FileMetadata(
				original_filename=file.filename,
				content_type=file.content_type,
			),
		})
	except Exception as e:
		logger.error(f"Finalizing document {document.id} failed, rolling back: {e}")
		DOCUMENT_UPLOADS.labels(outcome="failed").inc()
		await _discard_blob(storage, key)
		await store.delete(Document, document.id)
		raise

	logger.info(f"Document {document.id} uploaded to project {project_id} by {actor.id}")
	DOCUMENT_UPLOADS.labels(outcome="uploaded").inc()
	await recompute_project(store, project_id, actor, [
		new_entry(
			ActivityType.DOCUMENT,
			f"Document uploaded: {document.name}",
			actor,
			related_entity_id=document.id,
		),
	])
	return document


async def reupload_document(
	store: EntityStore,
	storage: BlobStore,
	document_id: str,
	file: IncomingFile,
	actor: Actor,
	on_progress: ProgressCallback | None = None,
) -> Document:
	"""Replace the file of a rejected document, keeping the old file as a version."""
	_check_file(file)
	document = await store.get(Document, document_id)
	if document.status != DocumentStatus.REJECTED:
		raise InvalidTransitionError(
			"Document", document.status.value, DocumentStatus.UPLOADED.value
		)

	snapshot = DocumentVersion(
		version=document.version,
		file_path=document.file_path,
		file_url=document.file_url,
		file_type=document.file_type,
		file_size=document.file_size,
		file_metadata=document.file_metadata,
		uploaded_at=document.uploaded_at,
		uploaded_by=document.uploaded_by,
		rejection_reason=document.rejection_reason,
	)

	key = blob_key(document.project_id, file.filename)
	# Claim the key on the record first so reconcile_orphans never sees
	# the new file as unreferenced
	document = await store.update(Document, document.id, {"pending_path": key})

	try:
		await storage.put(
			key,
			file.data,
			content_type=file.content_type,
			metadata={"document_id": document.id, "project_id": document.project_id},
			on_progress=on_progress,
		)
		url = await _download_url(storage, key)
		document = await store.update(Document, document.id, {
			"status": DocumentStatus.UPLOADED,
			"name": file.filename,
			"uploaded_at": utc_now(),
			"uploaded_by": actor.id,
			"rejection_reason": None,
			"file_path": key,
			"pending_path": None,
			"file_url": url.url,
			"file_type": file.content_type,
			"file_size": file.size,
			"file_metadata": FileMetadata(
				original_filename=file.filename,
				content_type=file.content_type,
			),
			"version": document.version + 1,
			"previous_versions": [*document.previous_versions, snapshot],
		})
	except Exception as e:
		logger.error(f"Re-upload of document {document_id} failed, rolling back: {e}")
		await _discard_blob(storage, key)
		await store.update(Document, document.id, {"pending_path": None})
		raise

	logger.info(f"Document {document.id} re-uploaded as version {document.version}")
	await recompute_project(store, document.project_id, actor, [
		new_entry(
			ActivityType.DOCUMENT,
			f"Document re-uploaded: {document.name} (version {document.version})",
			actor,
			related_entity_id=document.id,
		),
	])
	return document


# =====================================================
# Review
# =====================================================


async def set_document_status(
	store: EntityStore,
	document_id: str,
	new_status: DocumentStatus,
	actor: Actor,
	reason: str | None = None,
	override: bool = False,
) -> Document:
	"""Move a document through its review states.

	A verified document is final; staff may still move it with
	`override=True`.
	"""
	document = await store.get(Document, document_id)
	current = document.status

	if override:
		if not actor.is_staff:
			raise PermissionDenied("Only staff can override a document status")
		if new_status == current:
			raise InvalidTransitionError("Document", current.value, new_status.value)
	elif new_status not in TRANSITIONS[current]:
		raise InvalidTransitionError("Document", current.value, new_status.value)

	if new_status in REVIEW_STATES and actor.is_customer:
		raise PermissionDenied("Only staff can review documents")

	fields: dict = {"status": new_status}
	if new_status == DocumentStatus.VERIFIED:
		fields.update(verified_at=utc_now(), verified_by=actor.id, rejection_reason=None)
		description = f"Document verified: {document.name}"
	elif new_status == DocumentStatus.REJECTED:
		fields["rejection_reason"] = reason or DEFAULT_REJECTION_REASON
		description = f"Document rejected: {document.name}"
	elif new_status == DocumentStatus.UPLOADED:
		fields.update(
			uploaded_at=document.uploaded_at or utc_now(),
			uploaded_by=document.uploaded_by or actor.id,
		)
		description = f"Document marked as uploaded: {document.name}"
	else:
		description = f"Document reset to pending: {document.name}"

	document = await store.update(Document, document_id, fields)
	logger.info(
		f"Document {document_id} moved from {current.value} to {new_status.value} by {actor.id}"
	)

	await recompute_project(store, document.project_id, actor, [
		new_entry(ActivityType.DOCUMENT, description, actor, related_entity_id=document.id),
	])
	return document


# =====================================================
# Removal
# =====================================================


async def remove_document(
	store: EntityStore,
	storage: BlobStore,
	document_id: str,
	actor: Actor = SYSTEM,
) -> None:
	"""Delete every stored file of the document, then the record."""
	document = await store.get(Document, document_id)

	failed = await storage.delete_many(sorted(document.blob_keys()))
	if failed:
		logger.warning(f"Could not delete blobs {failed} of document {document_id}")

	await store.delete(Document, document_id)
	logger.info(f"Document {document_id} removed by {actor.id}")

	await recompute_project(store, document.project_id, SYSTEM, [
		new_entry(
			ActivityType.DOCUMENT,
			f"Document removed: {document.name}",
			actor,
			related_entity_id=document.id,
		),
	])


async def reconcile_orphans(
	store: EntityStore,
	storage: BlobStore,
	project_id: str,
) -> list[str]:
	"""Delete blobs under the project's prefix that no document references.

	Returns:
		Keys that were deleted
	"""
	referenced: set[str] = set()
	async for document in store.list_where(Document, {"project_id": project_id}):
		referenced |= document.blob_keys()

	keys = await storage.list_keys(blob_prefix(project_id))
	orphans = [key for key in keys if key not in referenced]
	if not orphans:
		return []

	failed = set(await storage.delete_many(orphans))
	deleted = [key for key in orphans if key not in failed]
	logger.info(f"Removed {len(deleted)} orphaned blobs of project {project_id}")
	return deleted


# =====================================================
# Queries
# =====================================================


async def get_document(store: EntityStore, document_id: str) -> Document:
	return await store.get(Document, document_id)


async def list_project_documents(store: EntityStore, project_id: str) -> list[Document]:
	return await store.find(Document, {"project_id": project_id}, order_by="created_at")


async def list_customer_documents(store: EntityStore, customer_id: str) -> list[Document]:
	return await store.find(
		Document, {"customer_id": customer_id}, order_by="created_at", descending=True
	)


async def get_download_url(
	store: EntityStore,
	storage: BlobStore,
	document_id: str,
) -> DownloadUrl:
	document = await store.get(Document, document_id)
	return await _download_url(storage, document.file_path)
