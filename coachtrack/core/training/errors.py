"""
Domain errors for training-hour tracking.

The API layer maps each error class to an HTTP status code; the core
never knows about HTTP.
"""


class TrainingError(Exception):
    """Base class for all training tracking errors."""
    pass


class InvalidInputError(TrainingError, ValueError):
    """
    A field is malformed or out of range.

    Subclasses ValueError so that pydantic validators calling domain
    checks report the failure as a regular validation error.
    """
    pass


class NotFoundError(TrainingError):
    """Raised when a coach or session doesn't exist (or is inactive)."""
    pass


class ConflictError(TrainingError):
    """Raised when a write would break a uniqueness rule (coach name)."""
    pass


class StoreError(TrainingError):
    """Raised when the storage backend fails."""
    pass
