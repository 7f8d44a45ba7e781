"""
Built-in Enrichment Steps.

This module provides the middleware installed on every client by
default: they copy the capture payload onto the event, describe the
exception, attach request and runtime contexts, and scrub sensitive
values before the event leaves the process.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Optional, Set

from ..event import Event
from ..request import CaptureContext
from ..severity import Severity
from .stack import MiddlewareStack, NextStep

if TYPE_CHECKING:
    from ..client import Client


class SampleRateMiddleware:
    """
    Drop a random share of events.

    Runs first so that sampled-out events skip every other step.

    Example:
        # Send roughly one event in four
        stack.add(SampleRateMiddleware(0.25), SampleRateMiddleware.priority)
    """

    name = "sample_rate"
    priority = 255

    def __init__(self, sample_rate: float, random_func: Callable[[], float] = random.random):
        self.sample_rate = max(0.0, min(1.0, sample_rate))
        self._random = random_func

    def __call__(self, event: Event, context: CaptureContext, next_step: NextStep) -> Optional[Event]:
        if self._random() >= self.sample_rate:
            return None
        return next_step(event)


class IgnoreExceptionsMiddleware:
    """
    Drop events for exceptions of the configured types.

    Names may be simple ("KeyError") or qualified
    ("myapp.errors.RetryLater"); subclasses of a listed type are
    dropped too.
    """

    name = "ignore_exceptions"
    priority = 250

    def __init__(self, names: Iterable[str]):
        self.names: Set[str] = set(names)

    def __call__(self, event: Event, context: CaptureContext, next_step: NextStep) -> Optional[Event]:
        if context.exception is not None and self._is_ignored(context.exception):
            return None
        return next_step(event)

    def _is_ignored(self, exception: BaseException) -> bool:
        for cls in type(exception).__mro__:
            if cls.__name__ in self.names or f"{cls.__module__}.{cls.__qualname__}" in self.names:
                return True
        return False


class MessageMiddleware:
    """
    Copy the payload message onto the event.

    ``%``-style parameters from ``payload["message_params"]`` are
    applied; the result is truncated to ``max_length`` characters.
    """

    name = "message"
    priority = 0

    def __init__(self, max_length: int):
        self.max_length = max_length

    def __call__(self, event: Event, context: CaptureContext, next_step: NextStep) -> Optional[Event]:
        message = context.payload.get("message")
        if message is not None:
            params = list(context.payload.get("message_params") or [])
            event.message = self._format(str(message), params)[:self.max_length]
            event.message_params = params
        return next_step(event)

    @staticmethod
    def _format(message: str, params: List[Any]) -> str:
        if not params:
            return message
        try:
            return message % tuple(params)
        except (TypeError, ValueError):
            # Mismatched placeholders: keep the template as-is
            return message


class ExceptionMiddleware:
    """
    Describe the captured exception and its causes.

    The chain follows ``__cause__`` and, unless suppressed,
    ``__context__``; it is stored innermost cause first.
    """

    name = "exception"
    priority = 0

    def __init__(self, client: "Client"):
        self._client = client

    def __call__(self, event: Event, context: CaptureContext, next_step: NextStep) -> Optional[Event]:
        if context.exception is not None:
            event.exception = [self._describe(exc) for exc in reversed(self._walk(context.exception))]
        return next_step(event)

    @staticmethod
    def _walk(exception: BaseException) -> List[BaseException]:
        chain: List[BaseException] = []
        seen: Set[int] = set()
        current: Optional[BaseException] = exception
        while current is not None and id(current) not in seen:
            seen.add(id(current))
            chain.append(current)
            if current.__cause__ is not None:
                current = current.__cause__
            elif not current.__suppress_context__:
                current = current.__context__
            else:
                current = None
        return chain

    def _describe(self, exception: BaseException) -> Dict[str, Any]:
        cls = type(exception)
        description = {
            "type": cls.__name__,
            "value": str(exception),
            "module": cls.__module__,
        }
        if exception.args:
            description["args"] = self._client.representation_serializer.serialize(list(exception.args))
        return description


class LevelMiddleware:
    """Apply ``payload["level"]`` to the event."""

    name = "level"
    priority = 0

    def __call__(self, event: Event, context: CaptureContext, next_step: NextStep) -> Optional[Event]:
        level = context.payload.get("level")
        if level is not None:
            event.level = Severity.coerce(level)
        return next_step(event)


class PayloadContextMiddleware:
    """
    Copy tags, user, extra data and fingerprint onto the event.

    Tags from the options come first, payload tags override them.
    Extra values are run through the client serializer.
    """

    name = "payload_context"
    priority = 0

    def __init__(self, client: "Client"):
        self._client = client

    def __call__(self, event: Event, context: CaptureContext, next_step: NextStep) -> Optional[Event]:
        payload = context.payload

        event.tags.update(self._client.options.tags)
        event.tags.update({key: str(value) for key, value in (payload.get("tags") or {}).items()})
        event.user.update(payload.get("user") or {})

        extra = payload.get("extra") or {}
        if extra:
            event.extra.update(self._client.serializer.serialize(dict(extra)))

        if payload.get("fingerprint"):
            event.fingerprint = list(payload["fingerprint"])

        return next_step(event)


class RequestMiddleware:
    """Attach the inbound request, when the event is captured while serving one."""

    name = "request"
    priority = 0

    def __init__(self, client: "Client"):
        self._client = client

    def __call__(self, event: Event, context: CaptureContext, next_step: NextStep) -> Optional[Event]:
        if context.request is not None:
            event.request = self._client.serializer.serialize(context.request.to_dict())
        return next_step(event)


class ContextMiddleware:
    """Attach the runtime and server OS contexts."""

    name = "contexts"
    priority = 0

    def __init__(self, client: "Client"):
        self._client = client

    def __call__(self, event: Event, context: CaptureContext, next_step: NextStep) -> Optional[Event]:
        event.contexts.setdefault("runtime", self._client.runtime_context.to_dict())
        event.contexts.setdefault("os", self._client.server_os_context.to_dict())
        return next_step(event)


class SanitizeDataMiddleware:
    """
    Redact sensitive values from extra data and the request.

    A key is sensitive when one of its "_" or "-" separated segments
    (or a run of them, e.g. "api_key") is a known sensitive name.

    Runs last among the built-in steps so that it sees everything the
    other steps added.

    Example:
        event.extra = {"password": "hunter2", "user": "bob"}
        # becomes {"password": "********", "user": "bob"}
    """

    SENSITIVE_KEYS = {
        "password", "passwd", "pwd", "secret", "api_key", "apikey",
        "access_token", "refresh_token", "token", "authorization",
        "accesstoken", "auth", "credentials", "session", "sessionid",
        "csrftoken", "cookie",
    }

    name = "sanitize_data"
    priority = -255

    def __init__(self, additional_keys: Optional[Set[str]] = None, mask: str = "********"):
        self._sensitive_keys = self.SENSITIVE_KEYS.copy()
        if additional_keys:
            self._sensitive_keys.update(key.lower() for key in additional_keys)
        self._mask = mask

    def __call__(self, event: Event, context: CaptureContext, next_step: NextStep) -> Optional[Event]:
        if event.extra:
            event.extra = self._redact_dict(event.extra)
        if event.request:
            event.request = self._redact_dict(event.request)
        return next_step(event)

    def _redact_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively redact sensitive keys in a dictionary."""
        result = {}
        for key, value in data.items():
            if self._is_sensitive_key(key):
                result[key] = self._mask
            elif isinstance(value, dict):
                result[key] = self._redact_dict(value)
            elif isinstance(value, list):
                result[key] = [self._redact_dict(item) if isinstance(item, dict) else item for item in value]
            else:
                result[key] = value
        return result

    def _is_sensitive_key(self, key: Any) -> bool:
        # Whole "_"-separated segments only: "author" is not "auth"
        normalized = "_" + str(key).lower().replace("-", "_") + "_"
        return any(f"_{sensitive}_" in normalized for sensitive in self._sensitive_keys)


def install_default_middlewares(stack: MiddlewareStack, client: "Client") -> MiddlewareStack:
    """
    Register the built-in steps on a stack.

    Sampling is only installed when the sample rate is below 1 and the
    exception filter only when exception names are configured.

    Args:
        stack: Stack to register on
        client: Client whose options and serializers the steps use

    Returns:
        The stack, for chaining
    """
    options = client.options

    if options.sample_rate < 1.0:
        stack.add(SampleRateMiddleware(options.sample_rate), SampleRateMiddleware.priority)
    if options.ignore_exceptions:
        stack.add(IgnoreExceptionsMiddleware(options.ignore_exceptions), IgnoreExceptionsMiddleware.priority)

    steps = [
        MessageMiddleware(client.MESSAGE_MAX_LENGTH_LIMIT),
        ExceptionMiddleware(client),
        LevelMiddleware(),
        PayloadContextMiddleware(client),
        RequestMiddleware(client),
        ContextMiddleware(client),
        SanitizeDataMiddleware(),
    ]
    for step in steps:
        stack.add(step, step.priority)

    return stack
