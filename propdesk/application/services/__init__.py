"""Application services: ownership checks."""

from propdesk.application.services.authorization_service import can_access, require_access

__all__ = ["can_access", "require_access"]
