"""Shared fixtures and factories for eswatcher tests.

Nothing here talks to a real cluster: API handles are mocks and watch
streams are scripted async iterators.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
import structlog

from eswatcher.kube.client import KubeClients
from eswatcher.models.resources import ResourceReference


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def reference() -> ResourceReference:
    return make_reference()


def make_reference(namespace: str = "payments", name: str = "db-credentials") -> ResourceReference:
    return ResourceReference(
        api_group="external-secrets.io",
        api_version="v1beta1",
        kind="ExternalSecret",
        plural="externalsecrets",
        namespace=namespace,
        name=name,
    )


# ---------------------------------------------------------------------------
# Resource payload factories
# ---------------------------------------------------------------------------


def make_condition(
    type_: str = "Ready",
    status: str = "True",
    reason: str = "SecretSynced",
    message: str = "Secret was synced",
    last_transition_time: str = "2026-10-19T12:00:00Z",
) -> dict[str, Any]:
    return {
        "type": type_,
        "status": status,
        "reason": reason,
        "message": message,
        "lastTransitionTime": last_transition_time,
    }


def make_external_secret(conditions: list[Any] | None = None, with_status: bool = True) -> dict[str, Any]:
    obj: dict[str, Any] = {
        "apiVersion": "external-secrets.io/v1beta1",
        "kind": "ExternalSecret",
        "metadata": {"name": "db-credentials", "namespace": "payments"},
        "spec": {"refreshInterval": "1h"},
    }
    if with_status:
        obj["status"] = {"conditions": conditions if conditions is not None else []}
    return obj


READY = make_external_secret([make_condition()])
NOT_READY = make_external_secret(
    [make_condition(status="False", reason="Retrying", message="could not get secret data from provider")]
)


# ---------------------------------------------------------------------------
# Event factories
# ---------------------------------------------------------------------------


def make_v1event(
    reason: str = "Updated",
    message: str = "Updated Secret",
    kube_type: str = "Normal",
    count: int = 1,
    last_timestamp: datetime | None = None,
) -> MagicMock:
    obj = MagicMock()
    obj.involved_object = MagicMock(kind="ExternalSecret", name="db-credentials")
    obj.reason = reason
    obj.message = message
    obj.type = kube_type
    obj.count = count
    obj.last_timestamp = last_timestamp or datetime(2026, 10, 19, 12, 0, 0, tzinfo=UTC)
    obj.event_time = None
    obj.first_timestamp = None
    return obj


def make_watch_event(obj: Any, event_type: str = "ADDED") -> dict[str, Any]:
    return {"type": event_type, "object": obj, "raw_object": {}}


# ---------------------------------------------------------------------------
# Scripted watch streams
# ---------------------------------------------------------------------------


class FakeStream:
    """Async-context-manager stream that raises, yields, then optionally blocks."""

    def __init__(
        self,
        events: list[Any] | None = None,
        error: Exception | None = None,
        drained: asyncio.Event | None = None,
        block: bool = False,
    ) -> None:
        self._events = events or []
        self._error = error
        self._drained = drained
        self._block = block

    async def __aenter__(self) -> FakeStream:
        return self

    async def __aexit__(self, *exc: object) -> bool:
        return False

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        if self._error is not None:
            raise self._error
        for event in self._events:
            yield event
        if self._drained is not None:
            self._drained.set()
        if self._block:
            await asyncio.Event().wait()


def scripted_watch_factory(streams: list[FakeStream]) -> tuple[Callable[[], MagicMock], list[MagicMock]]:
    """Return a watch factory handing out *streams* in order (the last one repeats)."""
    sessions: list[MagicMock] = []

    def factory() -> MagicMock:
        stream = streams[min(len(sessions), len(streams) - 1)]
        session = MagicMock()
        session.stream = MagicMock(return_value=stream)
        sessions.append(session)
        return session

    return factory, sessions


def make_clients(custom_object_responses: Any) -> KubeClients:
    """KubeClients whose custom-objects GET follows *custom_object_responses* (side_effect)."""
    custom_objects = MagicMock()
    if isinstance(custom_object_responses, list):
        custom_objects.get_namespaced_custom_object = AsyncMock(side_effect=custom_object_responses)
    else:
        custom_objects.get_namespaced_custom_object = AsyncMock(return_value=custom_object_responses)
    api_client = MagicMock()
    api_client.close = AsyncMock()
    return KubeClients(api_client=api_client, core_v1=MagicMock(), custom_objects=custom_objects)
