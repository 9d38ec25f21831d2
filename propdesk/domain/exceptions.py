"""Domain exceptions for the propdesk application.

Defines domain-level exceptions that represent business rule violations and
the failure taxonomy of store and blob operations. Presentation layer maps
them to HTTP responses in exception handlers.
"""

from typing import Any


class PropdeskException(Exception):
    """Base exception for all propdesk application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON error body used by the exception handlers."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(PropdeskException):
    """Raised when input validation fails (e.g. unknown slot, bad listing price)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(PropdeskException):
    """Raised when no acting identity accompanies a request."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class ResourceNotFoundException(PropdeskException):
    """Raised when a requested resource is not found.

    Also used when an entity exists but belongs to another owner, so callers
    cannot tell the two cases apart.
    """

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'prospect', 'document').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class TransportFailure(PropdeskException):
    """Raised when the document store is unreachable or rejects a request.

    Never retried here; the HTTP transport's own retry/timeout policy applies.
    """

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(
            f"Document store {operation} failed",
            "TRANSPORT_FAILURE",
            {"operation": operation, "reason": reason},
        )


class WriteError(TransportFailure):
    """Raised when a store write (set, upsert, update, delete, commit) fails in transport."""


class UploadFailure(PropdeskException):
    """Raised when the blob store rejects an upload or returns no URL."""

    def __init__(self, file_name: str, reason: str) -> None:
        super().__init__(
            f"Failed to upload file: {file_name}",
            "UPLOAD_FAILED",
            {"file_name": file_name, "reason": reason},
        )


class UploadInProgressException(PropdeskException):
    """Raised when an upload or delete is already in flight for a document slot."""

    def __init__(self, slot_id: str) -> None:
        super().__init__(
            f"An operation is already in progress for document slot: {slot_id}",
            "UPLOAD_IN_PROGRESS",
            {"slot_id": slot_id},
        )


class ProspectAlreadyConvertedException(PropdeskException):
    """Raised when converting a prospect whose status is already Converted."""

    def __init__(self, prospect_id: str) -> None:
        super().__init__(
            f"Prospect already converted: {prospect_id}",
            "PROSPECT_ALREADY_CONVERTED",
            {"prospect_id": prospect_id},
        )


class ConversionFailedException(PropdeskException):
    """Raised when the atomic prospect-to-property batch did not commit."""

    def __init__(self, prospect_id: str, reason: str) -> None:
        super().__init__(
            "Could not convert the prospect to a property.",
            "CONVERSION_FAILED",
            {"prospect_id": prospect_id, "reason": reason},
        )
