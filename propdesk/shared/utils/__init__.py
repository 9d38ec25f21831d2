"""Shared utilities: datetime and generators."""

from propdesk.shared.utils.datetime import ensure_utc, utc_now
from propdesk.shared.utils.generators import generate_cuid

__all__ = [
    "ensure_utc",
    "generate_cuid",
    "utc_now",
]
