# (c) Copyright Datacraft, 2026
"""Persistence boundary for the onboarding entities."""
from .base import EntityStore

__all__ = [
	"EntityStore",
]
