import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from logging.config import dictConfig

import yaml
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from onboard.core.config import get_settings
from onboard.core.db.engine import init_db
from onboard.core.error_handlers import register_error_handlers
from onboard.core.router_loader import discover_routers
from onboard.core.version import __version__

logger = logging.getLogger(__name__)
config = get_settings()
prefix = config.api_prefix


@asynccontextmanager
async def lifespan(app: FastAPI):
	"""Application lifespan handler for startup/shutdown events."""
	logger.info("Starting onboarding portal API server...")

	if config.db_create_all:
		await init_db()

	yield

	logger.info("Shutting down onboarding portal API server...")


app = FastAPI(
	title="Customer Onboarding Portal REST API",
	version=__version__,
	lifespan=lifespan,
)

app.add_middleware(
	CORSMiddleware,
	allow_origins=config.cors_origins,
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
	expose_headers=[
		"Content-Disposition",
		"Content-Type",
		"Content-Length",
	]
)

register_error_handlers(app)

# Auto-discover and register all feature routers
features_path = Path(__file__).parent / "core" / "features"
routers = discover_routers(features_path)

for router, feature_name in routers:
	app.include_router(router, prefix=prefix)


logging_config_path = Path(
	os.environ.get("ONB_LOGGING_CFG", str(config.log_config or "/etc/onboard/logging.yaml"))
)

if logging_config_path.exists() and logging_config_path.is_file():
	with open(logging_config_path, "r") as stream:
		logging_config = yaml.load(stream, Loader=yaml.FullLoader)

	dictConfig(logging_config)
