"""Public listing use cases."""

from propdesk.application.use_cases.listings.public_visibility_gate import (
    PublicListingService,
    PublicVisibilityGate,
    publicly_visible,
)

__all__ = ["PublicListingService", "PublicVisibilityGate", "publicly_visible"]
