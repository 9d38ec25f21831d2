"""Logging setup for the application."""

from propdesk.shared.telemetry.logging import RequestIDFilter, get_logger, setup_logging

__all__ = ["RequestIDFilter", "get_logger", "setup_logging"]
