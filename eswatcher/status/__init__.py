"""Status inspection for the watched resource.

Exposes:
    get_conditions -- tolerant ``status.conditions`` extraction.
    is_ready       -- exact ``Ready=True`` predicate.
"""

from eswatcher.status.conditions import get_conditions, is_ready

__all__ = ["get_conditions", "is_ready"]
