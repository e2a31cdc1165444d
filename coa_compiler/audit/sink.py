"""
Event Sink Interface

DESIGN DECISION: The compiler itself persists nothing. Applications that
want a durable trail of compilations plug in a sink; the compiler only
appends to it.
"""

from abc import ABC, abstractmethod
from threading import Lock
from typing import Optional
from uuid import UUID

from coa_compiler.models.audit import CompilationEvent, CompilationEventType


class EventSink(ABC):
    """
    Abstract destination for compilation events.

    Sinks are append-only - events are never modified or removed.
    """

    @abstractmethod
    def append_event(self, event: CompilationEvent) -> bool:
        """
        Append an event.

        Returns:
            True if stored successfully
        """
        pass


class InMemoryEventSink(EventSink):
    """Keeps events in a list. Safe to share between threads."""

    def __init__(self):
        self._events: list[CompilationEvent] = []
        self._lock = Lock()

    def append_event(self, event: CompilationEvent) -> bool:
        with self._lock:
            self._events.append(event)
        return True

    @property
    def events(self) -> list[CompilationEvent]:
        with self._lock:
            return list(self._events)

    def events_of_type(
        self,
        event_type: CompilationEventType,
        correlation_id: Optional[UUID] = None,
    ) -> list[CompilationEvent]:
        return [
            event for event in self.events
            if event.event_type == event_type
            and (correlation_id is None or event.correlation_id == correlation_id)
        ]
