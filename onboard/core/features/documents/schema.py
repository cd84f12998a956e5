# (c) Copyright Datacraft, 2026
"""Pydantic models for the Documents feature."""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from uuid_extensions import uuid7str

from onboard.core.utils.clock import utc_now


class DocumentType(str, Enum):
	ID = "id"
	CONTRACT = "contract"
	REGISTRATION = "registration"
	FINANCIAL = "financial"
	OTHER = "other"


class DocumentStatus(str, Enum):
	PENDING = "pending"
	UPLOADED = "uploaded"
	VERIFIED = "verified"
	REJECTED = "rejected"


@dataclass
class IncomingFile:
	"""An uploaded file as received from the client."""
	filename: str
	content_type: str | None
	data: bytes

	@property
	def size(self) -> int:
		return len(self.data)


class FileMetadata(BaseModel):
	original_filename: str
	content_type: str | None = None


class DocumentVersion(BaseModel):
	"""Snapshot of a superseded file kept on re-upload."""
	model_config = ConfigDict(frozen=True)

	version: int
	file_path: str
	file_url: str | None = None
	file_type: str | None = None
	file_size: int = 0
	file_metadata: FileMetadata | None = None
	uploaded_at: datetime | None = None
	uploaded_by: str | None = None
	rejection_reason: str | None = None


class Document(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: str = Field(default_factory=uuid7str)
	project_id: str
	customer_id: str
	name: str
	type: DocumentType
	status: DocumentStatus = DocumentStatus.PENDING
	required: bool = False
	uploaded_at: datetime | None = None
	uploaded_by: str | None = None
	verified_at: datetime | None = None
	verified_by: str | None = None
	rejection_reason: str | None = None
	file_url: str | None = None
	file_path: str
	# Key of a replacement file being written by a re-upload
	pending_path: str | None = None
	file_type: str | None = None
	file_size: int = 0
	file_metadata: FileMetadata | None = None
	notes: str | None = None
	version: int = 1
	previous_versions: list[DocumentVersion] = Field(default_factory=list)
	created_at: datetime = Field(default_factory=utc_now)
	updated_at: datetime = Field(default_factory=utc_now)

	def blob_keys(self) -> set[str]:
		"""Storage keys of the current, pending and every kept file."""
		keys = {self.file_path}
		if self.pending_path:
			keys.add(self.pending_path)
		keys.update(v.file_path for v in self.previous_versions)
		return keys


class DocumentStatusUpdate(BaseModel):
	status: DocumentStatus
	reason: str | None = None
	override: bool = False


class DownloadUrl(BaseModel):
	url: str
	expires_at: datetime
