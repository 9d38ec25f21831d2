"""DTOs for the public listing view."""

from dataclasses import dataclass, field

from propdesk.application.dtos.documents import MediaFile
from propdesk.domain.entities import Property
from propdesk.domain.enums import GateState


@dataclass(frozen=True)
class PublicListingsView:
    """Gate state plus the listings it allows (empty unless Enabled)."""

    state: GateState
    owner_display_name: str | None = None
    listings: tuple[Property, ...] = ()


@dataclass(frozen=True)
class PublicPropertyDetail:
    """One publicly listed property with its media gallery."""

    property: Property
    media: list[MediaFile] = field(default_factory=list)
