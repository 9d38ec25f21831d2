"""Owner profile: display name and the public-listings switch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class OwnerProfile:
    """Per-user profile stored at users/{uid}.

    public_listings_enabled is the owner's opt-in for the public listing page.
    """

    uid: str
    display_name: str = ""
    public_listings_enabled: bool = False
    primary_number: str | None = None
    secondary_number: str | None = None
    email: str | None = None

    @classmethod
    def from_dict(cls, uid: str, data: dict[str, Any]) -> OwnerProfile:
        return cls(
            uid=uid,
            display_name=data.get("displayName", "") or "",
            public_listings_enabled=data.get("publicListingsEnabled") is True,
            primary_number=data.get("primaryNumber"),
            secondary_number=data.get("secondaryNumber"),
            email=data.get("email"),
        )
