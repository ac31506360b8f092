"""Exceptions raised by the content service core and its backends.

Every error carries the HTTP status the API layer should answer with and,
where it is known, the backend operation that failed (``blob.put``,
``index.upsert``, ...).

Tests:
    - tests/unit/test_errors.py
"""

from __future__ import annotations


class ContentServiceError(Exception):
    """Base exception for content service errors.

    Attributes:
        message: Error message
        operation: Backend operation that failed (if diagnosable)
        status_code: HTTP status code to report
    """

    default_status_code = 500

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        status_code: int | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            message: Error message.
            operation: Operation that failed (optional).
            status_code: Status code supplied by the failing backend (optional).
        """
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code or self.default_status_code

    @property
    def message(self) -> str:
        return self.args[0]

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [self.message]
        if self.operation:
            parts.insert(0, f"[{self.operation}]")
        if self.status_code != self.default_status_code:
            parts.insert(1 if self.operation else 0, f"({self.status_code})")
        return " ".join(parts)


class NotFoundError(ContentServiceError):
    """Requested key does not exist in the blob store."""

    default_status_code = 404

    def __init__(self, key: str, operation: str | None = None) -> None:
        super().__init__(f"No object for key [{key}]", operation=operation)
        self.key = key


class CorruptEnvelopeError(ContentServiceError):
    """Stored envelope bytes could not be parsed as a JSON object."""

    def __init__(self, content_id: str, reason: str) -> None:
        super().__init__(
            f"Envelope [{content_id}] is corrupt: {reason}",
            operation="envelope.decode",
        )
        self.content_id = content_id


class BackendError(ContentServiceError):
    """A blob store, search index or directory call failed."""


class FingerprintError(ContentServiceError):
    """An asset stream could not be read while hashing it."""

    def __init__(self, original_name: str, reason: str) -> None:
        super().__init__(
            f"Unable to fingerprint asset [{original_name}]: {reason}",
            operation="asset.fingerprint",
        )
        self.original_name = original_name


class PublishError(ContentServiceError):
    """A fingerprinted asset could not be uploaded."""

    def __init__(
        self,
        original_name: str,
        reason: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(
            f"Unable to publish asset [{original_name}]: {reason}",
            operation="asset.publish",
            status_code=status_code,
        )
        self.original_name = original_name


__all__ = [
    "BackendError",
    "ContentServiceError",
    "CorruptEnvelopeError",
    "FingerprintError",
    "NotFoundError",
    "PublishError",
]
