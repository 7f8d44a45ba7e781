"""
Middleware Stack.

This module composes enrichment steps into a chain that builds an
event. Each step receives the event, the capture context and a
continuation for the rest of the chain; a step that does not call the
continuation and returns None vetoes the event.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional

from ..event import Event
from ..request import CaptureContext, RequestSnapshot

logger = logging.getLogger(__name__)

NextStep = Callable[[Event], Optional[Event]]
Middleware = Callable[[Event, CaptureContext, NextStep], Optional[Event]]
TerminalStep = Callable[[Event], Optional[Event]]


def _identity(event: Event) -> Event:
    return event


@dataclass(frozen=True)
class MiddlewareEntry:
    """
    A registered step.

    Attributes:
        step: The middleware callable
        priority: Higher priorities run first
        sequence: Registration order, breaks priority ties
    """
    step: Middleware
    priority: int
    sequence: int

    @property
    def sort_key(self):
        return (-self.priority, self.sequence)


class MiddlewareStack:
    """
    Priority-ordered chain of enrichment steps.

    Steps run in descending priority order; steps of equal priority run
    in the order they were added. The terminal step given at
    construction always runs last.

    Example:
        def add_region(event, context, next_step):
            event.tags["region"] = "eu"
            return next_step(event)

        def drop_health_checks(event, context, next_step):
            if event.transaction == "/health":
                return None
            return next_step(event)

        stack = MiddlewareStack()
        stack.add(add_region)
        stack.add(drop_health_checks, priority=100)

        event = stack.execute_stack(Event(transaction="/health"))  # None
    """

    def __init__(self, terminal: Optional[TerminalStep] = None):
        """
        Initialize an empty stack.

        Args:
            terminal: Final step of every chain (identity if None)
        """
        self._terminal: TerminalStep = terminal or _identity
        self._entries: List[MiddlewareEntry] = []
        self._sequence = itertools.count()

    def add(self, step: Middleware, priority: int = 0) -> "MiddlewareStack":
        """
        Register a step.

        Adding the same step twice registers two independent entries.

        Args:
            step: Middleware callable
            priority: Higher priorities run first

        Returns:
            Self for chaining
        """
        self._entries.append(MiddlewareEntry(step, int(priority), next(self._sequence)))
        self._entries.sort(key=lambda entry: entry.sort_key)
        return self

    def remove(self, step: Middleware) -> bool:
        """
        Remove every entry registered for a step.

        Args:
            step: Middleware callable to remove

        Returns:
            True if at least one entry was removed
        """
        remaining = [entry for entry in self._entries if entry.step is not step]
        removed = len(remaining) != len(self._entries)
        self._entries = remaining
        return removed

    def clear(self) -> "MiddlewareStack":
        self._entries.clear()
        return self

    @property
    def entries(self) -> List[MiddlewareEntry]:
        """Get the registered entries in execution order."""
        return self._entries.copy()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, step: Any) -> bool:
        return any(entry.step is step for entry in self._entries)

    def execute_stack(
        self,
        event: Event,
        request: Optional[RequestSnapshot] = None,
        exception: Optional[BaseException] = None,
        payload: Optional[Mapping[str, Any]] = None,
    ) -> Optional[Event]:
        """
        Run an event through the chain.

        Args:
            event: Initial event
            request: Inbound request, if serving one
            exception: Exception being captured, if any
            payload: Raw capture payload

        Returns:
            The resulting event, or None if a step vetoed it
        """
        context = CaptureContext(request=request, exception=exception, payload=payload or {})

        chain: NextStep = self._terminal
        for entry in reversed(self._entries):
            chain = self._link(entry.step, context, chain)

        result = chain(event)
        if result is None:
            logger.debug("Event %s dropped by middleware", event.event_id)
        return result

    @staticmethod
    def _link(step: Middleware, context: CaptureContext, next_step: NextStep) -> NextStep:
        def run(event: Event) -> Optional[Event]:
            return step(event, context, next_step)
        return run
