# (c) Copyright Datacraft, 2026
"""Domain errors raised by the onboarding managers and the entity store."""


class OnboardError(Exception):
	"""Base class for all onboarding portal errors."""


class NotFoundError(OnboardError):
	def __init__(self, kind: str, entity_id: str):
		self.kind = kind
		self.entity_id = entity_id
		super().__init__(f"{kind} not found: {entity_id}")


class ValidationFailure(OnboardError):
	"""Malformed request or a rule the data does not satisfy."""


class InvalidTransitionError(ValidationFailure):
	def __init__(self, kind: str, current: str, requested: str):
		self.kind = kind
		self.current = current
		self.requested = requested
		super().__init__(
			f"{kind} cannot move from '{current}' to '{requested}'"
		)


class PermissionDenied(OnboardError):
	"""The acting user's role does not allow the operation."""


class ConflictError(OnboardError):
	"""A conditional write lost against a concurrent writer."""

	def __init__(self, kind: str, entity_id: str, expected_revision: int | None = None):
		self.kind = kind
		self.entity_id = entity_id
		self.expected_revision = expected_revision
		super().__init__(
			f"{kind} {entity_id} was modified concurrently"
			f" (expected revision {expected_revision})"
		)


class StoreError(OnboardError):
	"""The entity store could not complete the operation."""

	def __init__(self, message: str, cause: Exception | None = None):
		self.cause = cause
		super().__init__(message)
