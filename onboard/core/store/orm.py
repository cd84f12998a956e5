# (c) Copyright Datacraft, 2026
"""
ORM models backing the entity store.

Column names match the pydantic schema field names so rows validate
directly into the schema classes.
"""
from datetime import datetime, timezone

from sqlalchemy import (
	JSON,
	Boolean,
	DateTime,
	Integer,
	String,
	Text,
	TypeDecorator,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from uuid_extensions import uuid7str

from onboard.core.db.base import Base


JsonType = JSON().with_variant(JSONB(), "postgresql")


class UTCDateTime(TypeDecorator):
	"""Timezone-aware datetime stored as UTC.

	SQLite drops tzinfo, so values read back are re-tagged as UTC.
	"""
	impl = DateTime(timezone=True)
	cache_ok = True

	def process_bind_param(self, value, dialect):
		if value is None:
			return None
		if value.tzinfo is None:
			return value.replace(tzinfo=timezone.utc)
		return value.astimezone(timezone.utc)

	def process_result_value(self, value, dialect):
		if value is None:
			return None
		if value.tzinfo is None:
			return value.replace(tzinfo=timezone.utc)
		return value.astimezone(timezone.utc)


class ProjectModel(Base):
	__tablename__ = "onboarding_projects"
	__modified_column__ = "last_updated"

	id: Mapped[str] = mapped_column(String(36), primary_key=True, default=uuid7str)
	customer_id: Mapped[str] = mapped_column(String(255), index=True)
	customer_name: Mapped[str] = mapped_column(String(255))
	company_name: Mapped[str] = mapped_column(String(255))
	status: Mapped[str] = mapped_column(String(32), index=True)
	progress: Mapped[int] = mapped_column(Integer, default=0)
	start_date: Mapped[datetime] = mapped_column(UTCDateTime)
	# {"required": [...], "uploaded": [...]}
	documents: Mapped[dict] = mapped_column(JsonType, default=dict)
	# {"required": [...], "completed": [...]}
	forms: Mapped[dict] = mapped_column(JsonType, default=dict)
	call_scheduled: Mapped[datetime | None] = mapped_column(UTCDateTime)
	activities: Mapped[list] = mapped_column(JsonType, default=list)
	notes: Mapped[list] = mapped_column(JsonType, default=list)
	assigned_staff_id: Mapped[str | None] = mapped_column(String(255), index=True)
	tags: Mapped[list] = mapped_column(JsonType, default=list)
	created_at: Mapped[datetime] = mapped_column(UTCDateTime)
	last_updated: Mapped[datetime] = mapped_column(UTCDateTime, index=True)
	revision: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class DocumentModel(Base):
	__tablename__ = "onboarding_documents"
	__modified_column__ = "updated_at"

	id: Mapped[str] = mapped_column(String(36), primary_key=True, default=uuid7str)
	project_id: Mapped[str] = mapped_column(String(36), index=True)
	customer_id: Mapped[str] = mapped_column(String(255), index=True)
	name: Mapped[str] = mapped_column(String(500))
	type: Mapped[str] = mapped_column(String(32))
	status: Mapped[str] = mapped_column(String(32))
	required: Mapped[bool] = mapped_column(Boolean, default=False)
	uploaded_at: Mapped[datetime | None] = mapped_column(UTCDateTime)
	uploaded_by: Mapped[str | None] = mapped_column(String(255))
	verified_at: Mapped[datetime | None] = mapped_column(UTCDateTime)
	verified_by: Mapped[str | None] = mapped_column(String(255))
	rejection_reason: Mapped[str | None] = mapped_column(Text)
	file_url: Mapped[str | None] = mapped_column(Text)
	file_path: Mapped[str] = mapped_column(String(1024))
	pending_path: Mapped[str | None] = mapped_column(String(1024))
	file_type: Mapped[str | None] = mapped_column(String(255))
	file_size: Mapped[int] = mapped_column(Integer, default=0)
	file_metadata: Mapped[dict | None] = mapped_column(JsonType)
	notes: Mapped[str | None] = mapped_column(Text)
	version: Mapped[int] = mapped_column(Integer, default=1)
	previous_versions: Mapped[list] = mapped_column(JsonType, default=list)
	created_at: Mapped[datetime] = mapped_column(UTCDateTime)
	updated_at: Mapped[datetime] = mapped_column(UTCDateTime)


class FormModel(Base):
	__tablename__ = "onboarding_forms"
	__modified_column__ = "updated_at"

	id: Mapped[str] = mapped_column(String(36), primary_key=True, default=uuid7str)
	project_id: Mapped[str] = mapped_column(String(36), index=True)
	customer_id: Mapped[str] = mapped_column(String(255), index=True)
	title: Mapped[str] = mapped_column(String(255))
	description: Mapped[str | None] = mapped_column(Text)
	type: Mapped[str] = mapped_column(String(32))
	status: Mapped[str] = mapped_column(String(32))
	required: Mapped[bool] = mapped_column(Boolean, default=False)
	fields: Mapped[list] = mapped_column(JsonType, default=list)
	order: Mapped[int] = mapped_column(Integer, default=0)
	version: Mapped[int] = mapped_column(Integer, default=1)
	completed_at: Mapped[datetime | None] = mapped_column(UTCDateTime)
	completed_by: Mapped[str | None] = mapped_column(String(255))
	reviewed_at: Mapped[datetime | None] = mapped_column(UTCDateTime)
	reviewed_by: Mapped[str | None] = mapped_column(String(255))
	review_notes: Mapped[str | None] = mapped_column(Text)
	created_at: Mapped[datetime] = mapped_column(UTCDateTime)
	updated_at: Mapped[datetime] = mapped_column(UTCDateTime)


class FormResponseModel(Base):
	"""Immutable; a resubmission is a new row."""
	__tablename__ = "onboarding_form_responses"

	id: Mapped[str] = mapped_column(String(36), primary_key=True, default=uuid7str)
	form_id: Mapped[str] = mapped_column(String(36), index=True)
	project_id: Mapped[str] = mapped_column(String(36), index=True)
	customer_id: Mapped[str] = mapped_column(String(255))
	responses: Mapped[dict] = mapped_column(JsonType, default=dict)
	submitted_at: Mapped[datetime] = mapped_column(UTCDateTime, index=True)
	submitted_by: Mapped[str] = mapped_column(String(255))
	form_version: Mapped[int] = mapped_column(Integer)


class AppointmentModel(Base):
	__tablename__ = "onboarding_appointments"
	__modified_column__ = "updated_at"

	id: Mapped[str] = mapped_column(String(36), primary_key=True, default=uuid7str)
	project_id: Mapped[str] = mapped_column(String(36), index=True)
	customer_id: Mapped[str] = mapped_column(String(255), index=True)
	date: Mapped[datetime] = mapped_column(UTCDateTime, index=True)
	time: Mapped[str] = mapped_column(String(16))
	duration: Mapped[int] = mapped_column(Integer, default=30)
	type: Mapped[str] = mapped_column(String(32))
	status: Mapped[str] = mapped_column(String(32), index=True)
	notes: Mapped[str | None] = mapped_column(Text)
	created_by: Mapped[str] = mapped_column(String(255))
	created_at: Mapped[datetime] = mapped_column(UTCDateTime)
	updated_at: Mapped[datetime] = mapped_column(UTCDateTime)


# Keyed by the name of the pydantic schema each model stores
MODELS: dict[str, type[Base]] = {
	"Project": ProjectModel,
	"Document": DocumentModel,
	"Form": FormModel,
	"FormResponse": FormResponseModel,
	"Appointment": AppointmentModel,
}
