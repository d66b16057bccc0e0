"""
Exception hierarchy for the ScamShield core.

Partial notification failures are deliberately absent: they are reported as
per-channel statuses on dispatch outcomes, never raised.
"""


class ScamShieldError(Exception):
    """Base class for all ScamShield errors."""


class ValidationError(ScamShieldError, ValueError):
    """Caller supplied input the core refuses to process."""

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field


class BackendUnavailableError(ScamShieldError):
    """A backing store (registry, contact store) could not be reached."""

    def __init__(self, backend: str, cause: Exception = None):
        message = f"{backend} is unavailable"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.backend = backend
        self.cause = cause


class ContactNotFoundError(ScamShieldError, LookupError):
    """Family member does not exist or belongs to another user."""
