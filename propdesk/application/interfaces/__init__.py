"""Application interfaces (ports): store and external service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from propdesk.infrastructure or propdesk.api.
"""

from propdesk.application.interfaces.services import IBlobUploader, NotifyCallback
from propdesk.application.interfaces.store import IDocumentStore, ISubscription

__all__ = [
    "IBlobUploader",
    "IDocumentStore",
    "ISubscription",
    "NotifyCallback",
]
