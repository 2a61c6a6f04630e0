"""Logging setup for eswatcher."""

from eswatcher.observability.logging import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
