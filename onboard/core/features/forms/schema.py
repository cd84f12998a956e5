# (c) Copyright Datacraft, 2026
"""Pydantic models for the Forms feature."""
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from uuid_extensions import uuid7str

from onboard.core.utils.clock import utc_now


class FormType(str, Enum):
	COMPANY_INFORMATION = "company-information"
	REQUIREMENTS = "requirements"
	CONTACT_DETAILS = "contact-details"
	CUSTOM = "custom"


class FormStatus(str, Enum):
	PENDING = "pending"
	IN_PROGRESS = "in-progress"
	COMPLETED = "completed"
	REVIEWED = "reviewed"


class FieldType(str, Enum):
	TEXT = "text"
	TEXTAREA = "textarea"
	NUMBER = "number"
	EMAIL = "email"
	PHONE = "phone"
	DATE = "date"
	SELECT = "select"
	MULTISELECT = "multiselect"
	RADIO = "radio"
	CHECKBOX = "checkbox"
	FILE = "file"


class FieldOption(BaseModel):
	label: str
	value: str


class FormField(BaseModel):
	id: str = Field(default_factory=uuid7str)
	name: str
	label: str
	type: FieldType = FieldType.TEXT
	required: bool = False
	placeholder: str | None = None
	help_text: str | None = None
	options: list[FieldOption] | None = None
	order: int = 0


# =====================================================
# Form Models
# =====================================================


class FormBase(BaseModel):
	model_config = ConfigDict(extra="forbid", populate_by_name=True)

	project_id: str
	customer_id: str
	title: str = Field(..., min_length=1, max_length=255)
	description: str | None = None
	type: FormType = FormType.CUSTOM
	required: bool = False
	fields: list[FormField] = Field(default_factory=list)
	order: int = 0


class FormCreate(FormBase):
	pass


class Form(FormBase):
	model_config = ConfigDict(from_attributes=True)

	id: str = Field(default_factory=uuid7str)
	status: FormStatus = FormStatus.PENDING
	version: int = 1
	completed_at: datetime | None = None
	completed_by: str | None = None
	reviewed_at: datetime | None = None
	reviewed_by: str | None = None
	review_notes: str | None = None
	created_at: datetime = Field(default_factory=utc_now)
	updated_at: datetime = Field(default_factory=utc_now)


class FormResponse(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: str = Field(default_factory=uuid7str)
	form_id: str
	project_id: str
	customer_id: str
	responses: dict[str, Any] = Field(default_factory=dict)
	submitted_at: datetime = Field(default_factory=utc_now)
	submitted_by: str
	form_version: int


# =====================================================
# Request bodies
# =====================================================


class FormFieldsUpdate(BaseModel):
	fields: list[FormField]


class FormResponseCreate(BaseModel):
	project_id: str
	responses: dict[str, Any] = Field(default_factory=dict)


class FormStatusUpdate(BaseModel):
	status: FormStatus
	review_notes: str | None = None
