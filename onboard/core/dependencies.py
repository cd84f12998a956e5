# (c) Copyright Datacraft, 2026
"""FastAPI dependencies shared by the feature routers."""
from typing import Annotated

from fastapi import Depends

from onboard.core.auth import get_actor
from onboard.core.db.engine import AsyncSessionLocal
from onboard.core.identity import Actor
from onboard.core.storage import BlobStore, build_blob_store
from onboard.core.store import EntityStore
from onboard.core.store.sql import SqlEntityStore

_store: EntityStore | None = None
_blob_store: BlobStore | None = None


def get_store() -> EntityStore:
	global _store
	if _store is None:
		_store = SqlEntityStore(AsyncSessionLocal)
	return _store


def get_storage() -> BlobStore:
	global _blob_store
	if _blob_store is None:
		_blob_store = build_blob_store()
	return _blob_store


CurrentActor = Annotated[Actor, Depends(get_actor)]
Store = Annotated[EntityStore, Depends(get_store)]
Storage = Annotated[BlobStore, Depends(get_storage)]
