"""Domain models (pydantic)."""
