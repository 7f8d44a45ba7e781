"""
Transport Protocol.

A transport delivers finished events to the collection service. The
client hands each event over exactly once and does not retry; how and
whether delivery succeeds is the transport's concern.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from ..event import Event


@runtime_checkable
class Transport(Protocol):
    """
    Protocol for event transports.

    Transports must treat the event as immutable.
    """

    def send(self, event: Event) -> Optional[str]:
        """
        Deliver an event.

        Args:
            event: The finished event

        Returns:
            An identifier for the delivered event, or None if it was not accepted
        """
        ...
