"""Readiness polling for eswatcher.

Exposes:
    ReadinessPoller -- bounded or unbounded fetch/evaluate loop.
"""

from eswatcher.poller.readiness import ReadinessPoller

__all__ = ["ReadinessPoller"]
