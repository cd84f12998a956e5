# (c) Copyright Datacraft, 2026
"""Blob store on any S3-compatible object storage (AWS S3, MinIO, R2, ...)."""
import io
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import AsyncIterator

import aioboto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .base import (
	BlobNotFoundError,
	BlobStore,
	BlobStoreError,
	ProgressCallback,
	SignedUrl,
)

logger = logging.getLogger(__name__)

MISSING_CODES = frozenset({"NoSuchKey", "NotFound", "404"})
# delete_objects accepts at most this many keys per request
DELETE_BATCH = 1000


class S3BlobStore(BlobStore):
	def __init__(
		self,
		bucket: str,
		prefix: str = "",
		region: str | None = None,
		endpoint_url: str | None = None,
		access_key_id: str | None = None,
		secret_access_key: str | None = None,
	):
		self.bucket = bucket
		self.prefix = prefix.strip("/")
		self.endpoint_url = endpoint_url
		# Credentials left as None fall through to the boto credential chain
		self._session = aioboto3.Session(
			aws_access_key_id=access_key_id,
			aws_secret_access_key=secret_access_key,
			region_name=region,
		)
		self._config = Config(
			signature_version="s3v4",
			retries={"max_attempts": 3, "mode": "adaptive"},
		)

	def _object_key(self, key: str) -> str:
		key = key.lstrip("/")
		return f"{self.prefix}/{key}" if self.prefix else key

	def _blob_key(self, object_key: str) -> str:
		if self.prefix:
			return object_key.removeprefix(f"{self.prefix}/")
		return object_key

	@asynccontextmanager
	async def _client(self, action: str, key: str = "") -> AsyncIterator:
		"""S3 client whose errors come out as blob store errors."""
		try:
			async with self._session.client(
				"s3", endpoint_url=self.endpoint_url, config=self._config
			) as client:
				yield client
		except ClientError as e:
			if e.response.get("Error", {}).get("Code") in MISSING_CODES:
				raise BlobNotFoundError(key) from e
			raise BlobStoreError(f"S3 {action} of '{key}' failed", e) from e
		except BotoCoreError as e:
			raise BlobStoreError(f"S3 {action} of '{key}' failed", e) from e

	async def put(
		self,
		key: str,
		data: bytes,
		content_type: str | None = None,
		metadata: dict[str, str] | None = None,
		on_progress: ProgressCallback | None = None,
	) -> int:
		total = len(data)
		extra_args: dict = {"Metadata": metadata or {}}
		if content_type:
			extra_args["ContentType"] = content_type

		sent = 0

		def advance(chunk: int) -> None:
			nonlocal sent
			sent += chunk
			if on_progress:
				on_progress(sent, total)

		async with self._client("upload", key) as client:
			await client.upload_fileobj(
				io.BytesIO(data),
				self.bucket,
				self._object_key(key),
				ExtraArgs=extra_args,
				Callback=advance,
			)
		if on_progress and total == 0:
			on_progress(0, 0)
		return total

	async def get(self, key: str) -> bytes:
		async with self._client("download", key) as client:
			response = await client.get_object(Bucket=self.bucket, Key=self._object_key(key))
			async with response["Body"] as body:
				return await body.read()

	async def delete(self, key: str) -> None:
		async with self._client("delete", key) as client:
			await client.delete_object(Bucket=self.bucket, Key=self._object_key(key))

	async def delete_many(self, keys: list[str]) -> list[str]:
		if not keys:
			return []

		failed: list[str] = []
		async with self._client("batch delete") as client:
			for start in range(0, len(keys), DELETE_BATCH):
				batch = keys[start:start + DELETE_BATCH]
				response = await client.delete_objects(
					Bucket=self.bucket,
					Delete={
						"Objects": [{"Key": self._object_key(k)} for k in batch],
						"Quiet": True,
					},
				)
				for error in response.get("Errors", []):
					logger.warning(f"S3 refused to delete {error.get('Key')}: {error.get('Message')}")
					failed.append(self._blob_key(error["Key"]))
		return failed

	async def exists(self, key: str) -> bool:
		try:
			async with self._client("head", key) as client:
				await client.head_object(Bucket=self.bucket, Key=self._object_key(key))
		except BlobNotFoundError:
			return False
		return True

	async def list_keys(self, prefix: str = "") -> list[str]:
		object_prefix = self._object_key(prefix) if prefix else (
			f"{self.prefix}/" if self.prefix else ""
		)
		keys = []
		async with self._client("list", prefix) as client:
			paginator = client.get_paginator("list_objects_v2")
			async for page in paginator.paginate(Bucket=self.bucket, Prefix=object_prefix):
				keys.extend(self._blob_key(obj["Key"]) for obj in page.get("Contents", []))
		return sorted(keys)

	async def signed_url(self, key: str, expires_in: int) -> SignedUrl:
		async with self._client("sign", key) as client:
			url = await client.generate_presigned_url(
				"get_object",
				Params={"Bucket": self.bucket, "Key": self._object_key(key)},
				ExpiresIn=expires_in,
			)
		return SignedUrl(
			url=url,
			expires_at=datetime.now(timezone.utc) + timedelta(seconds=expires_in),
		)
