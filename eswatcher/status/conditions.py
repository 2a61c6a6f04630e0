"""Condition extraction and readiness evaluation for custom resources.

The status payload of a custom resource arrives as an untyped dict straight
from the API server. Extraction is best-effort: any part of the payload that
does not have the expected shape is treated as absent, and a single malformed
condition never hides the well-formed ones next to it.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from eswatcher.models.resources import Condition

READY_CONDITION = "Ready"
CONDITION_TRUE = "True"

# Payload key -> Condition attribute.
_CONDITION_FIELDS: dict[str, str] = {
    "type": "type",
    "status": "status",
    "lastTransitionTime": "last_transition_time",
    "reason": "reason",
    "message": "message",
}


class _UndecodableError(Exception):
    """A condition entry has a field of the wrong type."""


def _str_field(raw: Mapping[str, Any], key: str) -> str:
    """Decode one string field; missing and null decode to the empty string."""
    value = raw.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise _UndecodableError(key)
    return value


def _decode_condition(raw: Any) -> Condition | None:
    if not isinstance(raw, Mapping):
        return None
    try:
        fields = {attr: _str_field(raw, key) for key, attr in _CONDITION_FIELDS.items()}
    except _UndecodableError:
        return None
    return Condition(**fields)


def get_conditions(obj: Any) -> tuple[Condition, ...]:
    """Return ``status.conditions`` of *obj* as Condition records, in source order.

    Returns an empty tuple when ``status`` or ``status.conditions`` is missing
    or has the wrong shape. Entries that are not mappings, or that carry a
    non-string value in one of the known fields, are skipped.
    """
    if not isinstance(obj, Mapping):
        return ()
    status = obj.get("status")
    if not isinstance(status, Mapping):
        return ()
    raw_conditions = status.get("conditions")
    if not isinstance(raw_conditions, list):
        return ()

    conditions: list[Condition] = []
    for raw in raw_conditions:
        condition = _decode_condition(raw)
        if condition is not None:
            conditions.append(condition)
    return tuple(conditions)


def is_ready(conditions: Iterable[Condition]) -> bool:
    """True iff any condition is exactly ``Ready`` with status exactly ``"True"``."""
    return any(c.type == READY_CONDITION and c.status == CONDITION_TRUE for c in conditions)
