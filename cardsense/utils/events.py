"""Structured event sinks for the parsing and analysis core.

The core emits named events with keyword fields instead of writing log
lines. Callers pick where those events go: nowhere, the ``cardsense``
logger, or an in-memory list.
"""
import logging
from typing import Any, Dict, List, Optional, Protocol, Tuple


class EventSink(Protocol):
    """Anything that accepts structured events."""
    
    def emit(self, event: str, **fields: Any) -> None:
        ...


class NullEventSink:
    """Discards every event."""
    
    def emit(self, event: str, **fields: Any) -> None:
        pass


class LoggingEventSink:
    """Writes events to a logger as ``event key=value ...`` lines."""
    
    # Per-row events are noisy; keep them at DEBUG
    DEBUG_EVENTS = frozenset({"transaction_excluded", "metadata_rejected"})
    
    def __init__(self, logger: Optional[logging.Logger] = None):
        if logger is None:
            from .logger import get_logger
            logger = get_logger()
        self.logger = logger
    
    def emit(self, event: str, **fields: Any) -> None:
        level = logging.DEBUG if event in self.DEBUG_EVENTS else logging.INFO
        details = " ".join(f"{key}={value}" for key, value in fields.items())
        self.logger.log(level, f"{event} {details}".rstrip(), extra={"event": event, "fields": fields})


class RecordingEventSink:
    """Keeps events in memory, in emission order."""
    
    def __init__(self):
        self.events: List[Tuple[str, Dict[str, Any]]] = []
    
    def emit(self, event: str, **fields: Any) -> None:
        self.events.append((event, fields))
    
    def names(self) -> List[str]:
        return [name for name, _ in self.events]
    
    def find(self, event: str) -> List[Dict[str, Any]]:
        return [fields for name, fields in self.events if name == event]


def default_sink() -> EventSink:
    """Sink used when a component is built without one."""
    return LoggingEventSink()
