"""HTTP middleware. Applied in propdesk.main."""

from propdesk.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
