"""Structured event logging for tabcalc.

Provides the event schema, a filesystem NDJSON sink, and emit helpers that
never raise.
"""

from tabcalc.logging.events import (
    EventLevel,
    EventType,
    SheetEvent,
    configure_sink,
    emit,
    emit_error,
    emit_info,
    get_sink,
)
from tabcalc.logging.sink import EventSink

__all__ = [
    "EventLevel",
    "EventSink",
    "EventType",
    "SheetEvent",
    "configure_sink",
    "emit",
    "emit_error",
    "emit_info",
    "get_sink",
]
