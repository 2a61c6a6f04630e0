"""Event collection for eswatcher.

Submodules
----------
event_tailer -- EventTailer: reconnecting core/v1 Event watch for one resource,
                fixed retry delay, never surfaces failure.
"""

from eswatcher.collector.event_tailer import EventTailer, build_field_selector, convert_event

__all__ = ["EventTailer", "build_field_selector", "convert_event"]
