"""Onboarding call scheduling."""
