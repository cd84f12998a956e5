# (c) Copyright Datacraft, 2026
"""Application settings configuration."""
from pathlib import Path
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CALL_SLOTS = [
	'09:00 AM',
	'10:00 AM',
	'11:00 AM',
	'01:00 PM',
	'02:00 PM',
	'03:00 PM',
	'04:00 PM',
]


class Settings(BaseSettings):
	db_url: str = 'sqlite+aiosqlite:///./onboard.db'
	db_ssl: bool = False
	db_create_all: bool = False
	log_config: Path | None = None
	api_prefix: str = ''
	cors_origins: list[str] = ['*']

	# Blob storage for uploaded files
	storage_backend: Literal["local", "s3"] = "local"
	storage_local_path: Path = Path("storage")
	storage_bucket: str = ""
	storage_prefix: str = ""
	storage_region: str | None = None
	storage_endpoint_url: str | None = None
	storage_access_key_id: str | None = None
	storage_secret_access_key: str | None = None

	# Uploads
	max_file_size_mb: int = Field(gt=0, default=25)
	download_url_expires_in: int = Field(gt=0, default=3600)

	# Project aggregate writes
	project_write_retries: int = Field(ge=0, default=5)

	# Scheduling
	call_slots: list[str] = Field(default_factory=lambda: list(DEFAULT_CALL_SLOTS))
	default_call_duration: int = Field(gt=0, default=30)

	# Remote user config
	remote_user_header: str = "X-Forwarded-User"
	remote_roles_header: str = "X-Forwarded-Roles"

	@computed_field
	@property
	def async_db_url(self) -> str:
		url = self.db_url
		if "postgresql+psycopg://" in url:
			return url.replace("postgresql+psycopg://", "postgresql+asyncpg://", 1)
		elif "postgresql://" in url:
			return url.replace("postgresql://", "postgresql+asyncpg://", 1)
		return url

	@computed_field
	@property
	def max_file_size(self) -> int:
		return self.max_file_size_mb * 1024 * 1024

	model_config = SettingsConfigDict(
		env_prefix='onb_',
		env_file='.env',
		env_file_encoding='utf-8',
		extra='ignore',
	)


_settings: Settings | None = None


def get_settings() -> Settings:
	global _settings
	if _settings is None:
		_settings = Settings()
	return _settings


def reset_settings() -> None:
	"""Drop cached settings (for testing)."""
	global _settings
	_settings = None
