"""
Logging Integration.

Handlers that feed stdlib logging records into a client: one captures
records as events, the other records them as breadcrumbs on a scope.

Example:
    scope = Scope()
    root = logging.getLogger()
    root.addHandler(BreadcrumbHandler(client, scope, level=logging.INFO))
    root.addHandler(EventHandler(client, scope=scope, level=logging.ERROR))
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, UTC
from typing import Any, Dict, Optional

from ..breadcrumbs import Breadcrumb
from ..client import Client
from ..scope import Scope
from ..severity import Severity

# Records from these loggers are never forwarded, to avoid feedback loops
_INTERNAL_LOGGERS = ("crumbtrail",)

# Set while a handler is capturing; records logged meanwhile (for example by
# a LoggingTransport) are not fed back in
_capturing = threading.local()


def _is_excluded(client: Client, name: str) -> bool:
    if getattr(_capturing, "active", False):
        return True
    for excluded in (*_INTERNAL_LOGGERS, *client.options.excluded_loggers):
        if name == excluded or name.startswith(excluded + "."):
            return True
    return False


def _record_data(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        "pathname": record.pathname,
        "lineno": record.lineno,
        "funcName": record.funcName,
    }


class EventHandler(logging.Handler):
    """
    Capture log records as events.

    Records carrying exception info are captured as exceptions, the
    others as messages. The record's logger name becomes the event's
    logger and its level the event's level.
    """

    def __init__(
        self,
        client: Client,
        scope: Optional[Scope] = None,
        level: int = logging.ERROR,
    ):
        super().__init__(level)
        self.client = client
        self.scope = scope

    def emit(self, record: logging.LogRecord) -> None:
        if _is_excluded(self.client, record.name):
            return

        try:
            payload: Dict[str, Any] = {
                "message": record.getMessage(),
                "level": Severity.from_logging_level(record.levelno),
                "logger": record.name,
                "extra": _record_data(record),
            }
            if record.exc_info and record.exc_info[1] is not None:
                payload["exception"] = record.exc_info[1]

            _capturing.active = True
            try:
                self.client.capture_event(payload, self.scope)
            finally:
                _capturing.active = False
        except Exception:
            self.handleError(record)


class BreadcrumbHandler(logging.Handler):
    """Record log records as breadcrumbs on a scope."""

    def __init__(
        self,
        client: Client,
        scope: Scope,
        level: int = logging.INFO,
    ):
        super().__init__(level)
        self.client = client
        self.scope = scope

    def emit(self, record: logging.LogRecord) -> None:
        if _is_excluded(self.client, record.name):
            return

        try:
            breadcrumb = Breadcrumb(
                category=record.name,
                message=record.getMessage(),
                level=Severity.from_logging_level(record.levelno),
                type="log",
                timestamp=datetime.fromtimestamp(record.created, UTC),
                data=_record_data(record),
            )
            _capturing.active = True
            try:
                self.client.add_breadcrumb(breadcrumb, self.scope)
            finally:
                _capturing.active = False
        except Exception:
            self.handleError(record)
