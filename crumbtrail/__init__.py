"""
crumbtrail

An instrumentation client that turns exceptions, log messages and
explicit events into normalized event records and hands them to a
transport for delivery to an error-collection service.

Key Components:
- client: Event assembly and capture entry points
- middleware: Priority-ordered enrichment chain
- scope: Caller-owned ambient context and breadcrumb trail
- breadcrumbs: Breadcrumb records and admission rules
- severity: Levels and error-code translation
- transaction_stack: Current operation names
- options: Client configuration
- transport: Event delivery
- integrations: Logging and warnings hooks
"""

from .breadcrumbs import Breadcrumb, BreadcrumbRecorder
from .client import Client
from .event import Event
from .middleware import MiddlewareStack
from .options import Options, get_preset, PRESETS
from .request import CaptureContext, RequestSnapshot
from .scope import Scope
from .severity import ErrorCode, Severity, SeverityTranslator
from .transaction_stack import TransactionStack
from .transport import InMemoryTransport, LoggingTransport, NullTransport, Transport

__version__ = Client.VERSION

__all__ = [
    # Client
    "Client",
    "Options",
    "get_preset",
    "PRESETS",
    # Pipeline
    "Event",
    "MiddlewareStack",
    "CaptureContext",
    "RequestSnapshot",
    "TransactionStack",
    # Context
    "Scope",
    "Breadcrumb",
    "BreadcrumbRecorder",
    # Severity
    "ErrorCode",
    "Severity",
    "SeverityTranslator",
    # Transport
    "Transport",
    "InMemoryTransport",
    "LoggingTransport",
    "NullTransport",
]
