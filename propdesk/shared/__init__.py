"""Shared utilities: datetime, generators, and logging helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from propdesk.shared.utils import ensure_utc, generate_cuid, utc_now

__all__ = [
    "ensure_utc",
    "generate_cuid",
    "utc_now",
]
