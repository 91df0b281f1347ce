"""
Infrastructure layer - external service integrations.

Each subdirectory wraps an external dependency:
- database: SQL persistence (SQLAlchemy) and the in-memory mock store

These wrappers translate between external formats and our domain models.
"""
