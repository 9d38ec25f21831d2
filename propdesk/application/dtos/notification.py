"""User-facing notification produced at operation boundaries."""

from dataclasses import dataclass

from propdesk.domain.enums import NotificationVariant


@dataclass(frozen=True)
class Notification:
    """Toast-style message: short title, one-line description, variant."""

    title: str
    description: str
    variant: NotificationVariant = NotificationVariant.DEFAULT

    @classmethod
    def success(cls, description: str, title: str = "Success") -> "Notification":
        return cls(title=title, description=description)

    @classmethod
    def failure(cls, title: str, description: str) -> "Notification":
        return cls(title=title, description=description, variant=NotificationVariant.DESTRUCTIVE)
