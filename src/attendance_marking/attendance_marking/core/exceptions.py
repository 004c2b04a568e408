from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for marking engine failures."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ServiceError(DomainError):
    """Raised when the remote roster service cannot be reached or rejects a call."""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RosterFetchError(DomainError):
    """The roster for a selection could not be retrieved. Retryable."""


class CommitError(DomainError):
    """A batch save was rejected or failed in transit. Pending edits are kept."""


class CommitInProgressError(CommitError):
    """Raised when a commit is already in flight for the same selection."""
