"""Error taxonomy shared by the ingest, classify and read paths."""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for all pipeline errors."""


class TransientIOError(PipelineError):
    """Network or timeout failure. Retried only by the next scheduled cycle."""


class StoreUnavailable(PipelineError):
    """The persistence layer itself is unreachable; nothing can be recorded."""


class DuplicateConflict(PipelineError):
    """A unique key (article link, topic name, profile owner) already exists."""


class NotFoundError(PipelineError):
    """Read of an entity that does not exist."""


class ValidationFailure(PipelineError):
    """Malformed input to a read or write operation."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class PreconditionFailure(PipelineError):
    """The request cannot be served in the caller's current state."""

    AUTHENTICATION_REQUIRED = "AUTHENTICATION_REQUIRED"
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message
