"""Core data structures describing the watched resource and what is observed about it."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class ResourceReference:
    """Identifies the watched custom resource.

    Built once at startup from the command-line arguments and shared by the
    event filter and the status fetch. Never mutated.
    """

    api_group: str
    api_version: str
    kind: str
    plural: str
    namespace: str
    name: str

    @property
    def display(self) -> str:
        """Return ``Kind namespace/name`` for log lines and error messages."""
        return f"{self.kind} {self.namespace}/{self.name}"


@dataclass(frozen=True)
class Condition:
    """One entry of ``status.conditions`` on the watched resource."""

    type: str = ""
    status: str = ""
    last_transition_time: str = ""
    reason: str = ""
    message: str = ""

    def summary(self) -> str:
        """Compact ``Type=Status (Reason)`` rendering used in waiting log lines."""
        text = f"{self.type}={self.status}"
        if self.reason:
            text += f" ({self.reason})"
        return text


@dataclass(frozen=True)
class ObservedEvent:
    """A core/v1 Event reported about the watched resource.

    Transient: logged as soon as it arrives and then discarded.
    """

    timestamp: datetime | None
    reason: str
    message: str
    event_type: str = ""
    count: int = 1


@dataclass(frozen=True)
class PollOutcome:
    """Result of a wait that observed the Ready condition."""

    reference: ResourceReference
    conditions: tuple[Condition, ...] = field(default_factory=tuple)
    ticks: int = 0
    elapsed_seconds: float = 0.0
