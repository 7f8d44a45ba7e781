"""
Local Transports.

Transports that keep events inside the process: a null transport, an
in-memory buffer for tests and inspection, and a transport that writes
events to the logging system.
"""

from __future__ import annotations

import json
import logging
from collections import deque
from typing import Deque, List, Optional

from ..event import Event
from ..severity import Severity


class NullTransport:
    """
    Accept every event and deliver nothing.

    Useful when capture should stay enabled but nothing should leave
    the process.
    """

    def send(self, event: Event) -> Optional[str]:
        return event.event_id


class InMemoryTransport:
    """
    Keep sent events in a bounded buffer.

    When the buffer is full, the oldest events are discarded.

    Example:
        transport = InMemoryTransport()
        client = Client(Options(), transport)
        client.capture_message("disk full")
        transport.events[0].message  # "disk full"
    """

    def __init__(self, max_events: int = 1000):
        self._events: Deque[Event] = deque(maxlen=max_events)
        self._closed = False

    def send(self, event: Event) -> Optional[str]:
        if self._closed:
            return None
        self._events.append(event)
        return event.event_id

    @property
    def events(self) -> List[Event]:
        """Get the buffered events, oldest first."""
        return list(self._events)

    def clear(self) -> int:
        """Clear all events and return the count that was cleared."""
        count = len(self._events)
        self._events.clear()
        return count

    def close(self) -> None:
        """Stop accepting events."""
        self._closed = True

    def __len__(self) -> int:
        return len(self._events)


class LoggingTransport:
    """
    Hand each event to a stdlib logger as one record.

    The record level follows the event severity (fatal becomes
    CRITICAL). Records produced while a crumbtrail logging handler is
    capturing are not captured again, so the target logger may sit
    under a handler-equipped root.

    Example:
        transport = LoggingTransport(logger_name="myapp.events")
        client = Client(Options(), transport)
    """

    SEVERITY_TO_LEVEL = {
        Severity.DEBUG: logging.DEBUG,
        Severity.INFO: logging.INFO,
        Severity.WARNING: logging.WARNING,
        Severity.ERROR: logging.ERROR,
        Severity.FATAL: logging.CRITICAL,
    }

    def __init__(
        self,
        logger_name: str = "crumbtrail.events",
        format_json: bool = False,
    ):
        """
        Args:
            logger_name: Logger that receives the event records
            format_json: Log the full event dict as JSON instead of a one-line summary
        """
        self._logger = logging.getLogger(logger_name)
        self._format_json = format_json

    def send(self, event: Event) -> Optional[str]:
        level = self.SEVERITY_TO_LEVEL.get(event.level, logging.ERROR)

        if self._format_json:
            message = json.dumps(event.to_dict(), default=str)
        else:
            message = self._format_event(event)

        self._logger.log(level, message)
        return event.event_id

    def _format_event(self, event: Event) -> str:
        """Summarize an event as "[level] id key=value ..." on one line."""
        fields = [("transaction", event.transaction), ("message", event.message)]
        if event.exception:
            # The captured exception is stored last, after its causes
            captured = event.exception[-1]
            fields.insert(1, ("exception", f"{captured['type']}: {captured['value']}"))

        summary = " ".join(f"{key}={value}" for key, value in fields if value)
        head = f"[{event.level.value}] {event.event_id}"
        return f"{head} {summary}" if summary else head
