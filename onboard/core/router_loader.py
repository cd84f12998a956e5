# (c) Copyright Datacraft, 2026
"""Discover the APIRouter of every feature package."""
import importlib
import logging
import pkgutil
from pathlib import Path

from fastapi import APIRouter

logger = logging.getLogger(__name__)


def discover_routers(features_path: Path) -> list[tuple[APIRouter, str]]:
	"""Import `<feature>.router` for each package under features_path.

	Returns (router, feature_name) pairs sorted by feature name.
	"""
	package = "onboard.core.features"
	routers: list[tuple[APIRouter, str]] = []

	for info in sorted(pkgutil.iter_modules([str(features_path)]), key=lambda i: i.name):
		if not info.ispkg:
			continue
		if not (features_path / info.name / "router.py").exists():
			continue

		module = importlib.import_module(f"{package}.{info.name}.router")
		router = getattr(module, "router", None)
		if isinstance(router, APIRouter):
			routers.append((router, info.name))
			logger.debug(f"Registered router for feature '{info.name}'")

	return routers
