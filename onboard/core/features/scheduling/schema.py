# (c) Copyright Datacraft, 2026
"""Pydantic models for the Scheduling feature."""
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from uuid_extensions import uuid7str

from onboard.core.utils.clock import utc_now


class AppointmentType(str, Enum):
	ONBOARDING = "onboarding"
	FOLLOW_UP = "follow-up"
	REVIEW = "review"


class AppointmentStatus(str, Enum):
	SCHEDULED = "scheduled"
	COMPLETED = "completed"
	CANCELLED = "cancelled"


class Appointment(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: str = Field(default_factory=uuid7str)
	project_id: str
	customer_id: str
	date: datetime
	time: str
	duration: int = Field(default=30, gt=0)
	type: AppointmentType = AppointmentType.ONBOARDING
	status: AppointmentStatus = AppointmentStatus.SCHEDULED
	notes: str | None = None
	created_by: str
	created_at: datetime = Field(default_factory=utc_now)
	updated_at: datetime = Field(default_factory=utc_now)


# =====================================================
# Request bodies
# =====================================================


class AppointmentCreate(BaseModel):
	model_config = ConfigDict(extra="forbid")

	project_id: str
	date: datetime
	time: str
	duration: int | None = Field(default=None, gt=0)
	type: AppointmentType = AppointmentType.ONBOARDING
	notes: str | None = None


class AppointmentComplete(BaseModel):
	notes: str | None = None


class AppointmentReschedule(BaseModel):
	date: datetime
	time: str
