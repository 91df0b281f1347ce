"""
Repository pattern implementations of the SessionStore interface.

Repositories translate between domain models and storage representations.
"""

from .memory import InMemorySessionStore
from .sessions import SqlSessionStore

__all__ = ["InMemorySessionStore", "SqlSessionStore"]
