# (c) Copyright Datacraft, 2026
import logging

from sqlalchemy import text

from onboard.core.db.engine import AsyncSessionLocal
from onboard.core.storage import BlobStore

logger = logging.getLogger(__name__)


async def check_db_status() -> bool:
	try:
		async with AsyncSessionLocal() as session:
			await session.execute(text("SELECT 1"))
		return True
	except Exception as e:
		logger.error(f"Database health check failed: {e}")
		return False


async def check_storage_status(storage: BlobStore) -> bool:
	try:
		await storage.exists("healthcheck")
		return True
	except Exception as e:
		logger.error(f"Storage health check failed: {e}")
		return False
