"""Application bootstrap for eswatcher.

Wires the components in dependency order and manages the asyncio lifecycle.
Startup order: logging → K8s client → event tailer (background) → poller.

The poller decides the outcome; the tailer only adds operator visibility and
is cancelled once the poller returns, whatever the result.
"""

from __future__ import annotations

import asyncio
import contextlib
import signal
from typing import TYPE_CHECKING

from eswatcher.collector.event_tailer import EventTailer
from eswatcher.errors import ClientConstructionError, ConfigurationError, ReadinessTimeoutError
from eswatcher.kube.client import KubeClients, connect
from eswatcher.models.config import WatcherConfig
from eswatcher.models.resources import PollOutcome, ResourceReference
from eswatcher.observability.logging import get_logger, setup_logging
from eswatcher.poller.readiness import ReadinessPoller

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

EXIT_READY = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


class WatcherApp:
    """Owns the clients, the tailer task and the poller for one run."""

    def __init__(
        self,
        config: WatcherConfig,
        reference: ResourceReference,
        connect_fn: Callable[[], Awaitable[KubeClients]] = connect,
    ) -> None:
        self.config = config
        self.reference = reference
        self._connect = connect_fn
        self._clients: KubeClients | None = None
        self._tailer: EventTailer | None = None
        self._log = get_logger("app")

    async def run(self) -> int:
        """Run until Ready, timeout or a fatal startup error; return the exit code."""
        try:
            self._clients = await self._connect()
        except ConfigurationError as exc:
            self._log.error("error building kubeconfig", error=str(exc))
            return EXIT_FAILURE
        except ClientConstructionError as exc:
            self._log.error("error creating kubernetes clients", error=str(exc))
            return EXIT_FAILURE

        try:
            await self._start_tailer()
            await self._wait_for_ready()
        except ReadinessTimeoutError as exc:
            self._log.error("readiness wait failed", error=str(exc), resource=exc.resource)
            return EXIT_FAILURE
        finally:
            await self.stop()

        return EXIT_READY

    async def _start_tailer(self) -> None:
        assert self._clients is not None
        self._tailer = EventTailer(
            self._clients.core_v1,
            self.reference,
            retry_delay=self.config.tail.retry_delay_seconds,
        )
        await self._tailer.start()

    async def _wait_for_ready(self) -> PollOutcome:
        assert self._clients is not None
        poller = ReadinessPoller(
            self._clients.custom_objects,
            self.reference,
            interval=self.config.poll.effective_interval,
            timeout=self.config.poll.effective_timeout,
        )
        return await poller.wait_until_ready()

    async def stop(self) -> None:
        """Cancel the tailer and close the API client. Safe to call repeatedly."""
        if self._tailer is not None:
            await self._tailer.stop()
            self._tailer = None
        if self._clients is not None:
            await self._clients.close()
            self._clients = None


# ---------------------------------------------------------------------------
# Async entrypoint
# ---------------------------------------------------------------------------


async def main(config: WatcherConfig, reference: ResourceReference) -> int:
    """Configure logging, register OS signals and run the watcher to completion."""
    setup_logging(config.log.level, config.log.format)
    app = WatcherApp(config, reference)

    loop = asyncio.get_running_loop()
    current = asyncio.current_task()
    interrupted = False

    def _request_shutdown() -> None:
        nonlocal interrupted
        if interrupted or current is None:
            return
        interrupted = True
        current.cancel()

    for sig in (signal.SIGTERM, signal.SIGINT):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, _request_shutdown)

    try:
        return await app.run()
    except asyncio.CancelledError:
        if not interrupted:
            raise
        get_logger("app").warning("interrupted; shutting down", resource=reference.display)
        return EXIT_INTERRUPTED
    finally:
        for sig in (signal.SIGTERM, signal.SIGINT):
            with contextlib.suppress(NotImplementedError):
                loop.remove_signal_handler(sig)
