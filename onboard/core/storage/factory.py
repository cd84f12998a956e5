# (c) Copyright Datacraft, 2026
"""Build the blob store selected by the `storage_*` settings."""
import logging

from onboard.core.config import Settings, get_settings

from .base import BlobStore

logger = logging.getLogger(__name__)


def build_blob_store(settings: Settings | None = None) -> BlobStore:
	settings = settings or get_settings()

	if settings.storage_backend == "s3":
		if not settings.storage_bucket:
			raise ValueError("storage_bucket must be set for the s3 storage backend")
		from .s3 import S3BlobStore

		logger.info(f"Storing blobs in S3 bucket {settings.storage_bucket}")
		return S3BlobStore(
			bucket=settings.storage_bucket,
			prefix=settings.storage_prefix,
			region=settings.storage_region,
			endpoint_url=settings.storage_endpoint_url,
			access_key_id=settings.storage_access_key_id,
			secret_access_key=settings.storage_secret_access_key,
		)

	from .local import LocalBlobStore

	logger.info(f"Storing blobs under {settings.storage_local_path}")
	return LocalBlobStore(settings.storage_local_path)
