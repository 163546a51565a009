"""Settlement, intake, onboarding and reporting services."""
