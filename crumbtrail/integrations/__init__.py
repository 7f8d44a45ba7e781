"""Integrations feeding stdlib logging and warnings into a client."""

from .log_handler import BreadcrumbHandler, EventHandler
from .warning_hook import WarningsIntegration

__all__ = [
    "BreadcrumbHandler",
    "EventHandler",
    "WarningsIntegration",
]
