"""Exception hierarchy for eswatcher.

Only ConfigurationError, ClientConstructionError and ReadinessTimeoutError
ever reach the user; SubscriptionError and FetchError are handled (logged and
retried) inside the tailer and poller respectively.
"""

from __future__ import annotations


class EsWatcherError(Exception):
    """Base class for all eswatcher errors."""


class ConfigurationError(EsWatcherError):
    """No usable connection configuration for the control plane could be built."""


class ClientConstructionError(EsWatcherError):
    """The typed or custom-objects API client could not be created."""


class SubscriptionError(EsWatcherError):
    """An event watch stream could not be opened or failed while streaming."""


class FetchError(EsWatcherError):
    """A single status lookup of the watched resource failed."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status

    @property
    def not_found(self) -> bool:
        return self.status == 404


class ReadinessTimeoutError(EsWatcherError):
    """The resource did not report Ready before the deadline."""

    def __init__(self, resource: str, timeout_seconds: float) -> None:
        super().__init__(
            f"timeout reached: {resource} did not become Ready within {format_duration(timeout_seconds)}"
        )
        self.resource = resource
        self.timeout_seconds = timeout_seconds


def format_duration(seconds: float) -> str:
    """Render a duration as ``1h2m3s`` / ``1m30.5s`` / ``10s`` / ``1.5s``."""
    if seconds < 60:
        return f"{seconds:g}s"
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    if hours:
        return f"{int(hours)}h{int(minutes)}m{secs:g}s"
    return f"{int(minutes)}m{secs:g}s"
