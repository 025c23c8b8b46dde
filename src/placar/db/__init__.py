"""Database engine, ORM models and repository."""
