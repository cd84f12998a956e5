# (c) Copyright Datacraft, 2026
"""Pydantic models for the Project aggregate."""
from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from uuid_extensions import uuid7str

from onboard.core.identity import ActorRole
from onboard.core.utils.clock import utc_now


class ProjectStatus(str, Enum):
	ON_TRACK = "On Track"
	DELAYED = "Delayed"
	COMPLETED = "Completed"


class ActivityType(str, Enum):
	DOCUMENT = "document"
	FORM = "form"
	CALL = "call"
	STATUS = "status"
	NOTE = "note"


# =====================================================
# Append-only entries
# =====================================================


class ActivityLog(BaseModel):
	model_config = ConfigDict(frozen=True)

	id: str = Field(default_factory=uuid7str)
	timestamp: datetime = Field(default_factory=utc_now)
	type: ActivityType
	description: str
	performed_by: str
	performed_by_type: ActorRole
	related_entity_id: str | None = None


class Note(BaseModel):
	model_config = ConfigDict(frozen=True)

	id: str = Field(default_factory=uuid7str)
	content: str = Field(..., min_length=1)
	created_at: datetime = Field(default_factory=utc_now)
	created_by: str
	created_by_type: ActorRole
	is_internal: bool = False


# =====================================================
# Project Models
# =====================================================


class DocumentChecklist(BaseModel):
	required: list[str] = Field(default_factory=list)
	uploaded: list[str] = Field(default_factory=list)


class FormChecklist(BaseModel):
	required: list[str] = Field(default_factory=list)
	completed: list[str] = Field(default_factory=list)


class ProjectBase(BaseModel):
	model_config = ConfigDict(extra="forbid", populate_by_name=True)

	customer_id: str = Field(..., min_length=1)
	customer_name: str = Field(..., min_length=1, max_length=255)
	company_name: str = Field(..., min_length=1, max_length=255)
	assigned_staff_id: str | None = None
	tags: list[str] = Field(default_factory=list)


class ProjectCreate(ProjectBase):
	start_date: datetime | None = None
	required_documents: list[str] = Field(default_factory=list)
	required_forms: list[str] = Field(default_factory=list)


class Project(ProjectBase):
	model_config = ConfigDict(from_attributes=True)

	id: str = Field(default_factory=uuid7str)
	status: ProjectStatus = ProjectStatus.ON_TRACK
	progress: int = Field(default=0, ge=0, le=100)
	start_date: datetime = Field(default_factory=utc_now)
	documents: DocumentChecklist = Field(default_factory=DocumentChecklist)
	forms: FormChecklist = Field(default_factory=FormChecklist)
	call_scheduled: datetime | None = None
	activities: list[ActivityLog] = Field(default_factory=list)
	notes: list[Note] = Field(default_factory=list)
	created_at: datetime = Field(default_factory=utc_now)
	last_updated: datetime = Field(default_factory=utc_now)
	revision: int = 0


# =====================================================
# Request bodies
# =====================================================


class ProjectStatusUpdate(BaseModel):
	status: ProjectStatus


class NoteCreate(BaseModel):
	content: str = Field(..., min_length=1)
	is_internal: bool = False


ProjectSortKey = Literal["name", "progress", "date"]
