"""EventTailer: follows core/v1 Events about the watched resource.

Runs as a background asyncio task for the lifetime of the process and logs
every Event whose involved object matches the watched resource. The tailer
is purely informational: it never influences the readiness decision and
never reports failure. A watch that cannot be opened, or that breaks while
streaming, is retried after a fixed delay; a watch the server closes cleanly
is reopened immediately.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from kubernetes_asyncio import watch  # type: ignore[import-untyped]

from eswatcher.errors import SubscriptionError
from eswatcher.models.resources import ObservedEvent, ResourceReference
from eswatcher.observability.logging import get_logger

_log = get_logger("event_tailer")

_DEFAULT_RETRY_DELAY_S = 5.0


def build_field_selector(reference: ResourceReference) -> str:
    """Server-side selector matching Events about *reference* (namespace is scoped by the request)."""
    return f"involvedObject.kind={reference.kind},involvedObject.name={reference.name}"


def _coerce_dt(value: Any) -> datetime | None:
    """Return *value* as an aware datetime, or None when it is not a datetime."""
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _parse_dt_str(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return _coerce_dt(value)
    if not isinstance(value, str) or not value:
        return None
    try:
        return _coerce_dt(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError:
        return None


def _from_object(obj: Any) -> ObservedEvent:
    metadata = getattr(obj, "metadata", None)
    timestamp = (
        _coerce_dt(getattr(obj, "last_timestamp", None))
        or _coerce_dt(getattr(obj, "event_time", None))
        or _coerce_dt(getattr(obj, "first_timestamp", None))
        or _coerce_dt(getattr(metadata, "creation_timestamp", None))
    )
    return ObservedEvent(
        timestamp=timestamp,
        reason=str(getattr(obj, "reason", "") or ""),
        message=str(getattr(obj, "message", "") or ""),
        event_type=str(getattr(obj, "type", "") or ""),
        count=int(getattr(obj, "count", 1) or 1),
    )


def _from_raw_dict(raw: dict[str, Any]) -> ObservedEvent | None:
    if not isinstance(raw.get("involvedObject"), dict):
        return None
    metadata = raw.get("metadata")
    created = metadata.get("creationTimestamp") if isinstance(metadata, dict) else None
    timestamp = (
        _parse_dt_str(raw.get("lastTimestamp"))
        or _parse_dt_str(raw.get("eventTime"))
        or _parse_dt_str(raw.get("firstTimestamp"))
        or _parse_dt_str(created)
    )
    count = raw.get("count")
    return ObservedEvent(
        timestamp=timestamp,
        reason=str(raw.get("reason") or ""),
        message=str(raw.get("message") or ""),
        event_type=str(raw.get("type") or ""),
        count=count if isinstance(count, int) and count > 0 else 1,
    )


def convert_event(obj: Any, raw: Any) -> ObservedEvent | None:
    """Convert one watch payload into an ObservedEvent.

    Prefers the deserialized V1Event and falls back to the raw dict. Returns
    None for payloads that are not Events (e.g. watch ERROR statuses).
    """
    if obj is not None and hasattr(obj, "involved_object"):
        return _from_object(obj)
    if isinstance(raw, dict):
        return _from_raw_dict(raw)
    return None


class EventTailer:
    """Reconnecting watch over the Events of a single resource.

    ``run()`` is the loop itself; ``start()``/``stop()`` manage it as a
    background task so an embedding host can cancel it explicitly.
    """

    def __init__(
        self,
        core_v1: Any,
        reference: ResourceReference,
        retry_delay: float = _DEFAULT_RETRY_DELAY_S,
        watch_factory: Callable[[], Any] | None = None,
    ) -> None:
        self._api = core_v1
        self._reference = reference
        self._retry_delay = retry_delay
        self._watch_factory = watch_factory or watch.Watch
        self._field_selector = build_field_selector(reference)
        self._task: asyncio.Task[None] | None = None
        self._running = False
        self._sessions_opened = 0
        self._failures = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Spawn the tail loop as a background task. Idempotent."""
        if self._task is not None and not self._task.done():
            return
        self._running = True
        self._task = asyncio.create_task(self.run(), name="event-tailer")

    async def stop(self) -> None:
        """Cancel the tail loop and wait for it to unwind."""
        self._running = False
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    # ------------------------------------------------------------------
    # Tail loop
    # ------------------------------------------------------------------

    async def run(self) -> None:
        """Watch forever, reopening the stream whenever it ends."""
        self._running = True
        _log.info(
            "watching events",
            kind=self._reference.kind,
            name=self._reference.name,
            namespace=self._reference.namespace,
        )
        while self._running:
            try:
                await self._watch_once()
            except SubscriptionError as exc:
                self._failures += 1
                _log.warning(
                    "error watching events",
                    error=str(exc),
                    failures=self._failures,
                    retry_in=self._retry_delay,
                )
                await asyncio.sleep(self._retry_delay)
                continue
            _log.debug("event watch closed; reopening", sessions=self._sessions_opened)

    async def _watch_once(self) -> None:
        """Run one WatchSession until the server closes it.

        Raises SubscriptionError if the stream cannot be opened or breaks.
        """
        session = self._watch_factory()
        try:
            async with session.stream(
                self._api.list_namespaced_event,
                namespace=self._reference.namespace,
                field_selector=self._field_selector,
            ) as stream:
                self._sessions_opened += 1
                async for event in stream:
                    await self._handle_event(event)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            raise SubscriptionError(str(exc) or type(exc).__name__) from exc

    async def _handle_event(self, event: Any) -> None:
        if not isinstance(event, dict):
            return
        observed = convert_event(event.get("object"), event.get("raw_object"))
        if observed is None:
            _log.debug("ignoring non-event watch payload", type=event.get("type"))
            return
        self._emit(observed)

    def _emit(self, event: ObservedEvent) -> None:
        _log.info(
            "event",
            timestamp=event.timestamp.isoformat() if event.timestamp else "",
            reason=event.reason,
            message=event.message,
            type=event.event_type,
            count=event.count,
        )
