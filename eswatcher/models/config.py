"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ResourceConfig:
    """API coordinates of the watched custom resource."""

    group: str = "external-secrets.io"
    version: str = "v1beta1"
    kind: str = "ExternalSecret"
    plural: str = "externalsecrets"


@dataclass
class PollConfig:
    """Readiness poller configuration."""

    timeout_seconds: float = 600.0
    interval_seconds: float = 1.0
    unbounded_interval_seconds: float = 5.0
    wait_forever: bool = False

    @property
    def effective_interval(self) -> float:
        """Tick interval for the selected mode."""
        return self.unbounded_interval_seconds if self.wait_forever else self.interval_seconds

    @property
    def effective_timeout(self) -> float | None:
        """Deadline for the selected mode; ``None`` when waiting forever."""
        return None if self.wait_forever else self.timeout_seconds


@dataclass
class TailConfig:
    """Event tailer configuration."""

    retry_delay_seconds: float = 5.0


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"
    format: str = "console"


@dataclass
class WatcherConfig:
    """Top-level eswatcher configuration."""

    resource: ResourceConfig = field(default_factory=ResourceConfig)
    poll: PollConfig = field(default_factory=PollConfig)
    tail: TailConfig = field(default_factory=TailConfig)
    log: LogConfig = field(default_factory=LogConfig)
