"""Core: config, logging bootstrap, lifespan and exception handlers."""

from propdesk.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
