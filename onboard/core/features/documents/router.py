# (c) Copyright Datacraft, 2026
"""FastAPI router for customer documents."""
from fastapi import APIRouter, File, Form, HTTPException, Query, UploadFile, status

from onboard.core.auth import require_staff
from onboard.core.config import get_settings
from onboard.core.dependencies import CurrentActor, Storage, Store
from onboard.core.exceptions import ValidationFailure
from onboard.core.features.projects import service as projects_service

from . import service
from .schema import (
	Document,
	DocumentStatusUpdate,
	DocumentType,
	DownloadUrl,
	IncomingFile,
)

router = APIRouter(prefix="/documents", tags=["documents"])


async def _incoming(file: UploadFile) -> IncomingFile:
	"""Read an upload, refusing it before buffering when it is over the size limit."""
	settings = get_settings()
	limit = settings.max_file_size
	too_large = ValidationFailure(
		f"File {file.filename} is larger than {settings.max_file_size_mb} MB"
	)
	if file.size is not None and file.size > limit:
		raise too_large

	data = await file.read(limit + 1)
	if len(data) > limit:
		raise too_large
	return IncomingFile(
		filename=file.filename or "",
		content_type=file.content_type,
		data=data,
	)


async def _load(store, document_id: str, actor) -> Document:
	document = await service.get_document(store, document_id)
	projects_service.ensure_customer_access(document.customer_id, actor)
	return document


@router.post("", response_model=Document, status_code=status.HTTP_201_CREATED)
async def upload_document(
	actor: CurrentActor,
	store: Store,
	storage: Storage,
	project_id: str = Form(...),
	type: DocumentType = Form(...),
	required: bool = Form(False),
	file: UploadFile = File(...),
) -> Document:
	"""Upload a document file to a project (multipart form)."""
	project = await projects_service.get_project(store, project_id)
	projects_service.ensure_project_access(project, actor)
	return await service.upload_document(
		store,
		storage,
		await _incoming(file),
		project_id=project_id,
		document_type=type,
		required=required,
		actor=actor,
	)


@router.get("", response_model=list[Document])
async def list_documents(
	actor: CurrentActor,
	store: Store,
	project_id: str | None = Query(None),
) -> list[Document]:
	"""Documents of a project, or all of the calling customer's documents."""
	if project_id is not None:
		project = await projects_service.get_project(store, project_id)
		projects_service.ensure_project_access(project, actor)
		return await service.list_project_documents(store, project_id)
	if actor.is_customer:
		return await service.list_customer_documents(store, actor.id)
	raise HTTPException(
		status_code=status.HTTP_400_BAD_REQUEST,
		detail="project_id is required",
	)


@router.post("/reconcile", response_model=list[str])
async def reconcile_orphans(
	actor: CurrentActor,
	store: Store,
	storage: Storage,
	project_id: str = Query(...),
) -> list[str]:
	"""Delete stored files of a project that no document references."""
	require_staff(actor)
	await projects_service.get_project(store, project_id)
	return await service.reconcile_orphans(store, storage, project_id)


@router.get("/{document_id}", response_model=Document)
async def get_document(
	document_id: str,
	actor: CurrentActor,
	store: Store,
) -> Document:
	return await _load(store, document_id, actor)


@router.get("/{document_id}/download-url", response_model=DownloadUrl)
async def get_download_url(
	document_id: str,
	actor: CurrentActor,
	store: Store,
	storage: Storage,
) -> DownloadUrl:
	await _load(store, document_id, actor)
	return await service.get_download_url(store, storage, document_id)


@router.patch("/{document_id}/status", response_model=Document)
async def set_document_status(
	document_id: str,
	data: DocumentStatusUpdate,
	actor: CurrentActor,
	store: Store,
) -> Document:
	await _load(store, document_id, actor)
	return await service.set_document_status(
		store,
		document_id,
		data.status,
		actor,
		reason=data.reason,
		override=data.override,
	)


@router.post("/{document_id}/reupload", response_model=Document)
async def reupload_document(
	document_id: str,
	actor: CurrentActor,
	store: Store,
	storage: Storage,
	file: UploadFile = File(...),
) -> Document:
	"""Replace the file of a rejected document."""
	await _load(store, document_id, actor)
	return await service.reupload_document(
		store, storage, document_id, await _incoming(file), actor
	)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_document(
	document_id: str,
	actor: CurrentActor,
	store: Store,
	storage: Storage,
) -> None:
	await _load(store, document_id, actor)
	await service.remove_document(store, storage, document_id, actor)
