"""
team_console.db

Persistence package.

Responsibilities:
- SQLAlchemy declarative base and ORM models.
- Async engine/session factory helpers.
- Dev/test schema bootstrap.
"""
