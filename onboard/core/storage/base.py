# (c) Copyright Datacraft, 2026
"""
The blob store holding uploaded document files.

Keys are '/'-separated paths such as `documents/<project_id>/<name>`;
the store itself attaches no meaning to them beyond prefix listing.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from onboard.core.exceptions import NotFoundError, OnboardError

logger = logging.getLogger(__name__)

# Called with (bytes_sent, total_bytes) while a file is being written
ProgressCallback = Callable[[int, int], None]


class BlobNotFoundError(NotFoundError):
	def __init__(self, key: str):
		super().__init__("Blob", key)
		self.key = key


class BlobStoreError(OnboardError):
	"""The blob backend rejected or failed an operation."""

	def __init__(self, message: str, cause: Exception | None = None):
		self.cause = cause
		super().__init__(message)


@dataclass(frozen=True)
class SignedUrl:
	url: str
	expires_at: datetime


class BlobStore(ABC):

	@abstractmethod
	async def put(
		self,
		key: str,
		data: bytes,
		content_type: str | None = None,
		metadata: dict[str, str] | None = None,
		on_progress: ProgressCallback | None = None,
	) -> int:
		"""Write `data` under `key`, replacing any blob already there.

		Returns:
			Number of bytes written
		"""
		...

	@abstractmethod
	async def get(self, key: str) -> bytes:
		"""Raises BlobNotFoundError for an unknown key."""
		...

	@abstractmethod
	async def delete(self, key: str) -> None:
		"""Remove a blob; a missing key is not an error."""
		...

	@abstractmethod
	async def exists(self, key: str) -> bool:
		...

	@abstractmethod
	async def list_keys(self, prefix: str = "") -> list[str]:
		"""Sorted keys starting with `prefix`."""
		...

	@abstractmethod
	async def signed_url(self, key: str, expires_in: int) -> SignedUrl:
		"""A time-limited URL a client can download the blob from."""
		...

	async def delete_many(self, keys: list[str]) -> list[str]:
		"""Delete every key and return the ones that could not be removed."""
		failed = []
		for key in keys:
			try:
				await self.delete(key)
			except BlobStoreError as e:
				logger.warning(f"Could not delete blob {key}: {e}")
				failed.append(key)
		return failed
