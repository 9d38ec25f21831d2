"""Infrastructure exceptions for store and blob operations.

Extend PropdeskException so presentation can map them to HTTP responses
consistently.
"""

from propdesk.domain.exceptions import PropdeskException


class PreconditionFailedError(PropdeskException):
    """A write's precondition (exists / unchanged since read) did not hold; nothing was written."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            f"Precondition failed for document: {path}",
            "PRECONDITION_FAILED",
            {"path": path, "reason": reason},
        )
