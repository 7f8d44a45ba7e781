"""
Middleware Module

Enrichment steps composed into the event-assembly chain.

Key Components:
- stack: Priority-ordered chain with veto support
- builtin: Steps installed on every client by default
"""

from .stack import (
    Middleware,
    MiddlewareEntry,
    MiddlewareStack,
    NextStep,
)
from .builtin import (
    ContextMiddleware,
    ExceptionMiddleware,
    IgnoreExceptionsMiddleware,
    LevelMiddleware,
    MessageMiddleware,
    PayloadContextMiddleware,
    RequestMiddleware,
    SampleRateMiddleware,
    SanitizeDataMiddleware,
    install_default_middlewares,
)

__all__ = [
    # Stack
    "Middleware",
    "MiddlewareEntry",
    "MiddlewareStack",
    "NextStep",
    # Built-in steps
    "ContextMiddleware",
    "ExceptionMiddleware",
    "IgnoreExceptionsMiddleware",
    "LevelMiddleware",
    "MessageMiddleware",
    "PayloadContextMiddleware",
    "RequestMiddleware",
    "SampleRateMiddleware",
    "SanitizeDataMiddleware",
    "install_default_middlewares",
]
