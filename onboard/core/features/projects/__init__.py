"""Onboarding projects: the shared aggregate, its progress and activity log."""
