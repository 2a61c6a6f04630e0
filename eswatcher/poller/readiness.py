"""ReadinessPoller: fetch, extract, evaluate, repeat.

One poller serves both modes. With a timeout the whole wait is bounded by
``asyncio.wait_for`` and ends in ReadinessTimeoutError; without one it polls
until the resource reports Ready. Each tick fetches the resource fresh, so a
condition that flips between ticks is judged only by the tick that sees it.
A failed fetch is logged and the next tick proceeds as usual: a resource that
never exists times out exactly like one that never becomes ready.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

from kubernetes_asyncio.client.exceptions import ApiException  # type: ignore[import-untyped]

from eswatcher.errors import FetchError, ReadinessTimeoutError, format_duration
from eswatcher.models.resources import Condition, PollOutcome, ResourceReference
from eswatcher.observability.logging import get_logger
from eswatcher.status.conditions import get_conditions, is_ready

_log = get_logger("readiness_poller")


class ReadinessPoller:
    """Polls a custom resource until its Ready condition is ``True``."""

    def __init__(
        self,
        custom_objects: Any,
        reference: ResourceReference,
        interval: float = 1.0,
        timeout: float | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        if timeout is not None and timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        self._api = custom_objects
        self._reference = reference
        self._interval = interval
        self._timeout = timeout
        self._ticks = 0

    @property
    def ticks(self) -> int:
        """Number of ticks run so far."""
        return self._ticks

    async def wait_until_ready(self) -> PollOutcome:
        """Block until Ready is observed.

        Raises ReadinessTimeoutError when a timeout is configured and expires
        first.
        """
        started = time.monotonic()
        _log.info(
            "waiting for resource to become ready",
            resource=self._reference.display,
            timeout=format_duration(self._timeout) if self._timeout is not None else "none",
            interval=self._interval,
        )
        if self._timeout is None:
            conditions = await self._poll()
        else:
            try:
                conditions = await asyncio.wait_for(self._poll(), timeout=self._timeout)
            except TimeoutError as exc:
                raise ReadinessTimeoutError(self._reference.display, self._timeout) from exc

        outcome = PollOutcome(
            reference=self._reference,
            conditions=conditions,
            ticks=self._ticks,
            elapsed_seconds=time.monotonic() - started,
        )
        _log.info(
            "resource has reached Ready state",
            resource=self._reference.display,
            ticks=outcome.ticks,
            elapsed=round(outcome.elapsed_seconds, 3),
        )
        return outcome

    async def _poll(self) -> tuple[Condition, ...]:
        while True:
            await asyncio.sleep(self._interval)
            conditions = await self.tick()
            if conditions is not None:
                return conditions

    async def tick(self) -> tuple[Condition, ...] | None:
        """Run one fetch-evaluate step.

        Returns the condition snapshot when the resource is Ready, else None.
        """
        self._ticks += 1
        try:
            obj = await self._fetch()
        except FetchError as exc:
            _log.warning(
                "error getting resource",
                resource=self._reference.display,
                error=str(exc),
                status=exc.status,
                not_found=exc.not_found,
                tick=self._ticks,
            )
            return None

        conditions = get_conditions(obj)
        if is_ready(conditions):
            return conditions
        _log.info(
            "waiting",
            resource=self._reference.display,
            conditions=[c.summary() for c in conditions],
            tick=self._ticks,
        )
        return None

    async def _fetch(self) -> Any:
        ref = self._reference
        try:
            return await self._api.get_namespaced_custom_object(
                group=ref.api_group,
                version=ref.api_version,
                namespace=ref.namespace,
                plural=ref.plural,
                name=ref.name,
            )
        except ApiException as exc:
            raise FetchError(f"{exc.status} {exc.reason or ''}".strip(), status=exc.status) from exc
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            # transport failures (aiohttp, DNS, TLS) surface with assorted types
            raise FetchError(str(exc) or type(exc).__name__) from exc
