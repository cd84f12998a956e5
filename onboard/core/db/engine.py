# (c) Copyright Datacraft, 2026
import logging
import ssl

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from onboard.core.config import get_settings
from onboard.core.db.base import Base

logger = logging.getLogger(__name__)

settings = get_settings()

connect_args = {}
if settings.db_ssl:
	# asyncpg requires an SSL context, not sslmode
	ssl_context = ssl.create_default_context()
	ssl_context.check_hostname = False
	ssl_context.verify_mode = ssl.CERT_NONE
	connect_args["ssl"] = ssl_context

engine = create_async_engine(
	settings.async_db_url,
	poolclass=NullPool,
	connect_args=connect_args
)

AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)


async def init_db(bind: AsyncEngine | None = None) -> None:
	"""Create all tables that do not exist yet."""
	# registers the ORM models on Base.metadata
	from onboard.core.store import orm  # noqa: F401

	async with (bind or engine).begin() as conn:
		await conn.run_sync(Base.metadata.create_all)
	logger.info("Database schema is up to date")
