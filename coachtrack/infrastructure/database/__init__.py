"""
SQL persistence for coaches and training sessions.
"""

from .client import (
    Database,
    DatabaseConfig,
    DatabaseConnectionError,
    MockDatabase,
    create_database,
    seed_coaches,
)

__all__ = [
    "Database",
    "DatabaseConfig",
    "DatabaseConnectionError",
    "MockDatabase",
    "create_database",
    "seed_coaches",
]
