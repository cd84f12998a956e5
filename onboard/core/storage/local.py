# (c) Copyright Datacraft, 2026
"""Blob store on the local filesystem, used in development and tests."""
import json
from contextlib import suppress
from datetime import datetime, timedelta, timezone
from pathlib import Path

import aiofiles
import aiofiles.os

from .base import (
	BlobNotFoundError,
	BlobStore,
	BlobStoreError,
	ProgressCallback,
	SignedUrl,
)

CHUNK_SIZE = 64 * 1024

# Side files live under this directory of the root and never show up as keys
META_DIR = ".meta"
PARTIAL_SUFFIX = ".part"


class LocalBlobStore(BlobStore):
	def __init__(self, root: str | Path):
		self.root = Path(root).resolve()
		self.root.mkdir(parents=True, exist_ok=True)

	def _path(self, key: str) -> Path:
		path = (self.root / key.lstrip("/")).resolve()
		if path == self.root or self.root not in path.parents:
			raise BlobStoreError(f"Key escapes the storage root: {key}")
		return path

	def _meta_path(self, key: str) -> Path:
		return self._path(f"{META_DIR}/{key.lstrip('/')}.json")

	async def put(
		self,
		key: str,
		data: bytes,
		content_type: str | None = None,
		metadata: dict[str, str] | None = None,
		on_progress: ProgressCallback | None = None,
	) -> int:
		path = self._path(key)
		partial = path.with_name(path.name + PARTIAL_SUFFIX)
		total = len(data)

		try:
			path.parent.mkdir(parents=True, exist_ok=True)
			async with aiofiles.open(partial, "wb") as f:
				for start in range(0, total, CHUNK_SIZE):
					chunk = data[start:start + CHUNK_SIZE]
					await f.write(chunk)
					if on_progress:
						on_progress(start + len(chunk), total)
			await aiofiles.os.replace(partial, path)

			meta_path = self._meta_path(key)
			meta_path.parent.mkdir(parents=True, exist_ok=True)
			async with aiofiles.open(meta_path, "w") as f:
				await f.write(json.dumps({
					"content_type": content_type,
					"metadata": metadata or {},
				}))
		except OSError as e:
			with suppress(OSError):
				await aiofiles.os.remove(partial)
			raise BlobStoreError(f"Failed to write {key}", e) from e

		if on_progress and total == 0:
			on_progress(0, 0)
		return total

	async def get(self, key: str) -> bytes:
		path = self._path(key)
		try:
			async with aiofiles.open(path, "rb") as f:
				return await f.read()
		except FileNotFoundError:
			raise BlobNotFoundError(key) from None
		except OSError as e:
			raise BlobStoreError(f"Failed to read {key}", e) from e

	async def delete(self, key: str) -> None:
		for path in (self._path(key), self._meta_path(key)):
			try:
				await aiofiles.os.remove(path)
			except FileNotFoundError:
				pass
			except OSError as e:
				raise BlobStoreError(f"Failed to delete {key}", e) from e

	async def exists(self, key: str) -> bool:
		return self._path(key).is_file()

	async def list_keys(self, prefix: str = "") -> list[str]:
		meta_root = self.root / META_DIR
		keys = []
		for path in self.root.rglob("*"):
			if not path.is_file() or path.name.endswith(PARTIAL_SUFFIX):
				continue
			if path.is_relative_to(meta_root):
				continue
			key = path.relative_to(self.root).as_posix()
			if key.startswith(prefix):
				keys.append(key)
		return sorted(keys)

	async def signed_url(self, key: str, expires_in: int) -> SignedUrl:
		# No signing on a local disk; the file URI is good for development
		return SignedUrl(
			url=self._path(key).as_uri(),
			expires_at=datetime.now(timezone.utc) + timedelta(seconds=expires_in),
		)
