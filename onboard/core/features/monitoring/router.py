# (c) Copyright Datacraft, 2026
from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from onboard.core.dependencies import Storage

from .service import check_db_status, check_storage_status

router = APIRouter(
	prefix="/monitoring",
	tags=["monitoring"]
)


@router.get("/health")
async def health_check(storage: Storage):
	db_status = await check_db_status()
	storage_status = await check_storage_status(storage)

	status = "ok" if db_status and storage_status else "error"

	return {
		"status": status,
		"details": {
			"database": "up" if db_status else "down",
			"storage": "up" if storage_status else "down",
		}
	}


@router.get("/metrics")
def metrics():
	return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
