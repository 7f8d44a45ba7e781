"""
Transport Module

Delivery of finished events.

Key Components:
- base: The Transport protocol consumed by the client
- local: Null, in-memory and logging transports
"""

from .base import Transport
from .local import (
    InMemoryTransport,
    LoggingTransport,
    NullTransport,
)

__all__ = [
    "Transport",
    "InMemoryTransport",
    "LoggingTransport",
    "NullTransport",
]
