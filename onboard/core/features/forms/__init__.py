"""Multi-step onboarding forms and customer responses."""
