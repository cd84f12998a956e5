# (c) Copyright Datacraft, 2026
from .base import (
	BlobNotFoundError,
	BlobStore,
	BlobStoreError,
	ProgressCallback,
	SignedUrl,
)
from .factory import build_blob_store

__all__ = [
	"BlobStore",
	"BlobNotFoundError",
	"BlobStoreError",
	"ProgressCallback",
	"SignedUrl",
	"build_blob_store",
]
