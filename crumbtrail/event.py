"""
Event Data Structure.

An Event is the normalized record describing one capture. It is created
empty by the client, filled in by the middleware chain and the scope,
and handed to the transport exactly once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Any, Dict, List, Optional
from uuid import uuid4

from .breadcrumbs import Breadcrumb
from .severity import Severity


@dataclass
class Event:
    """
    Event under construction.

    Attributes:
        event_id: Unique identifier for this event
        timestamp: When the event was created
        level: Severity of the event
        server_name: Host the event originated from
        release: Application release identifier
        environment: Deployment environment name
        transaction: Name of the operation being executed
        logger: Name of the logger that produced the event
        message: Formatted message
        message_params: Parameters the message was formatted with
        exception: Exception chain, innermost cause first
        breadcrumbs: Trail leading up to the event
        tags: Indexed key/value pairs
        user: Information about the affected user
        extra: Arbitrary additional data
        contexts: Runtime/OS/other structured contexts
        request: Snapshot of the inbound request
        fingerprint: Custom grouping fingerprint
        sdk: Name and version of this client
    """

    # Identity
    event_id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    level: Severity = Severity.ERROR

    # Static identity from options
    server_name: Optional[str] = None
    release: Optional[str] = None
    environment: Optional[str] = None

    # Grouping
    transaction: Optional[str] = None
    logger: Optional[str] = None
    fingerprint: List[str] = field(default_factory=list)

    # Enrichment
    message: Optional[str] = None
    message_params: List[Any] = field(default_factory=list)
    exception: List[Dict[str, Any]] = field(default_factory=list)
    breadcrumbs: List[Breadcrumb] = field(default_factory=list)
    tags: Dict[str, str] = field(default_factory=dict)
    user: Dict[str, Any] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)
    contexts: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    request: Dict[str, Any] = field(default_factory=dict)
    sdk: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary for serialization.

        Fields that were never set are left out.

        Returns:
            Dictionary representation of the event
        """
        result: Dict[str, Any] = {
            "event_id": self.event_id,
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.value,
        }

        for name in ("server_name", "release", "environment", "transaction", "logger", "message"):
            value = getattr(self, name)
            if value is not None:
                result[name] = value

        if self.message_params:
            result["message_params"] = list(self.message_params)
        if self.exception:
            result["exception"] = {"values": list(self.exception)}
        if self.breadcrumbs:
            result["breadcrumbs"] = {"values": [b.to_dict() for b in self.breadcrumbs]}

        for name in ("tags", "user", "extra", "contexts", "request", "sdk"):
            value = getattr(self, name)
            if value:
                result[name] = dict(value)

        if self.fingerprint:
            result["fingerprint"] = list(self.fingerprint)

        return result

    def is_error(self) -> bool:
        """Check if this event is at error level or above."""
        return self.level in (Severity.ERROR, Severity.FATAL)
