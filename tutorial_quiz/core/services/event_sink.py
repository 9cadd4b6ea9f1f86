"""Telemetry collaborator receiving question submission events."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
import logging
from threading import Lock
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class EventSink(Protocol):
    def emit_event(self, session_id: str, event: str, payload: dict[str, Any]) -> None:
        ...


class LoggingEventSink:
    """Writes every event to the log."""

    def emit_event(self, session_id: str, event: str, payload: dict[str, Any]) -> None:
        logger.info("Session %s | %s | %s", session_id, event, payload)


@dataclass(slots=True)
class RecordedEvent:
    session_id: str
    event: str
    payload: dict[str, Any]
    recorded_at: datetime = field(default_factory=datetime.utcnow)


class InMemoryEventSink:
    """Records events so they can be inspected, e.g. for grading reports."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._events: list[RecordedEvent] = []

    def emit_event(self, session_id: str, event: str, payload: dict[str, Any]) -> None:
        with self._lock:
            self._events.append(RecordedEvent(session_id, event, dict(payload)))

    def get_events(self, session_id: str | None = None, event: str | None = None) -> list[RecordedEvent]:
        with self._lock:
            return [
                e
                for e in self._events
                if (session_id is None or e.session_id == session_id)
                and (event is None or e.event == event)
            ]

    def clear(self) -> None:
        with self._lock:
            self._events.clear()
