"""
Transaction Name Stack.

Tracks the name of the operation currently being executed (a route,
a command, a job) so that events captured without an explicit
transaction can still be grouped by it.
"""

from __future__ import annotations

import threading
from typing import Iterator, List, Optional


class TransactionStack:
    """
    LIFO stack of transaction names.

    Peeking or popping an empty stack returns None rather than raising.
    Mutations are guarded by a lock so one client can be shared by the
    threads of a long-lived process.

    Example:
        stack = TransactionStack()
        stack.push("/checkout")
        stack.push("charge_card")
        stack.peek()  # "charge_card"
        stack.pop()   # "charge_card"
        stack.peek()  # "/checkout"
    """

    def __init__(self, *names: str):
        self._names: List[str] = list(names)
        self._lock = threading.Lock()

    def push(self, *names: str) -> None:
        """Push one or more names, the last one ending on top."""
        with self._lock:
            self._names.extend(names)

    def pop(self) -> Optional[str]:
        """Remove and return the top name, or None if empty."""
        with self._lock:
            if not self._names:
                return None
            return self._names.pop()

    def peek(self) -> Optional[str]:
        """Return the top name without removing it, or None if empty."""
        with self._lock:
            if not self._names:
                return None
            return self._names[-1]

    def clear(self) -> None:
        with self._lock:
            self._names.clear()

    def is_empty(self) -> bool:
        return len(self) == 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._names)

    def __iter__(self) -> Iterator[str]:
        # Bottom to top
        with self._lock:
            return iter(list(self._names))
