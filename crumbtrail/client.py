"""
Event Assembly Client.

The Client is the entry point of the library. It turns capture calls
into events by running them through the assembly pipeline:

1. A new event is stamped with the static identity from the options
2. The transaction name is resolved from the payload or the stack
3. The middleware chain enriches (or vetoes) the event
4. The caller's scope is merged onto it
5. The finished event is handed to the transport
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Dict, Mapping, Optional

from .breadcrumbs import Breadcrumb, BreadcrumbRecorder
from .contexts import RuntimeContext, ServerOsContext
from .event import Event
from .middleware.builtin import install_default_middlewares
from .middleware.stack import Middleware, MiddlewareStack
from .options import Options
from .request import RequestSnapshot
from .scope import Scope
from .serializer import ReprSerializer, Serializer
from .severity import Severity, SeverityMap, SeverityTranslator
from .transaction_stack import TransactionStack
from .transport.base import Transport
from .transport.local import NullTransport

logger = logging.getLogger(__name__)


class Client:
    """
    Assemble events and hand them to a transport.

    One client is typically created per process. Scopes and request
    snapshots are passed per call and never retained.

    Example:
        client = Client(Options(release="shop@1.4.2"), InMemoryTransport())

        scope = Scope().set_tag("tenant", "acme")
        client.add_breadcrumb(Breadcrumb(category="cart", message="item added"), scope)

        try:
            checkout()
        except Exception as exc:
            client.capture_exception(exc, scope=scope)
    """

    VERSION = "0.1.0"
    PROTOCOL_VERSION = "7"
    SDK_IDENTIFIER = "crumbtrail.python"
    USER_AGENT = f"{SDK_IDENTIFIER}/{VERSION}"

    # Maximum length of a captured message
    MESSAGE_MAX_LENGTH_LIMIT = 1024

    def __init__(
        self,
        options: Optional[Options] = None,
        transport: Optional[Transport] = None,
        request: Optional[RequestSnapshot] = None,
    ):
        """
        Initialize the client.

        Args:
            options: Client configuration (defaults if None)
            transport: Event transport (NullTransport if None)
            request: Request being served while the client is created; only
                its path is read, to seed the transaction stack
        """
        self._options = options if options is not None else Options()
        self._transport: Transport = transport if transport is not None else NullTransport()

        self._transaction_stack = TransactionStack()
        self._severity_translator = SeverityTranslator()
        self._breadcrumb_recorder = BreadcrumbRecorder(self._options)
        self._middleware_stack = MiddlewareStack()

        self._runtime_context = RuntimeContext()
        self._server_os_context = ServerOsContext()
        self._serializer = Serializer(max_string_length=self._options.max_value_length)
        self._representation_serializer = ReprSerializer(max_string_length=self._options.max_value_length)

        if request is not None and request.path_info:
            self._transaction_stack.push(request.path_info)

        if self._options.serialize_all_objects:
            self.set_all_object_serialize(True)

        if self._options.default_middlewares:
            install_default_middlewares(self._middleware_stack, self)

        logger.info(
            "Client %s initialized (transport=%s, middlewares=%d)",
            self.USER_AGENT, type(self._transport).__name__, len(self._middleware_stack),
        )

    @property
    def options(self) -> Options:
        return self._options

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def transaction_stack(self) -> TransactionStack:
        """Get the stack of transaction names."""
        return self._transaction_stack

    @property
    def middleware_stack(self) -> MiddlewareStack:
        return self._middleware_stack

    @property
    def runtime_context(self) -> RuntimeContext:
        return self._runtime_context

    @property
    def server_os_context(self) -> ServerOsContext:
        return self._server_os_context

    @property
    def serializer(self) -> Serializer:
        return self._serializer

    @serializer.setter
    def serializer(self, serializer: Serializer) -> None:
        self._serializer = serializer

    @property
    def representation_serializer(self) -> ReprSerializer:
        return self._representation_serializer

    @representation_serializer.setter
    def representation_serializer(self, serializer: ReprSerializer) -> None:
        self._representation_serializer = serializer

    def set_all_object_serialize(self, value: bool) -> None:
        """Toggle attribute serialization of objects on both serializers."""
        self._serializer.set_all_object_serialize(value)
        self._representation_serializer.set_all_object_serialize(value)

    # Breadcrumbs

    def add_breadcrumb(self, breadcrumb: Breadcrumb, scope: Optional[Scope] = None) -> bool:
        """
        Record a breadcrumb on a scope.

        Does nothing when breadcrumbs are disabled (max_breadcrumbs <= 0),
        when the before_breadcrumb callback drops it, or when no scope
        is given.

        Returns:
            True if the breadcrumb was stored
        """
        return self._breadcrumb_recorder.record(breadcrumb, scope)

    # Middleware

    def add_middleware(self, middleware: Middleware, priority: int = 0) -> None:
        self._middleware_stack.add(middleware, priority)

    def remove_middleware(self, middleware: Middleware) -> bool:
        return self._middleware_stack.remove(middleware)

    # Severity

    def translate_severity(self, code: int) -> Severity:
        """Translate an error code into a level, honoring the override map."""
        return self._severity_translator.translate(code)

    def register_severity_map(self, severity_map: Optional[SeverityMap]) -> None:
        """Replace the severity override map wholesale."""
        self._severity_translator.register_severity_map(severity_map)

    # Assembly

    def prepare_event(
        self,
        payload: Mapping[str, Any],
        scope: Optional[Scope] = None,
        request: Optional[RequestSnapshot] = None,
    ) -> Optional[Event]:
        """
        Assemble an event from a capture payload.

        Args:
            payload: Raw capture data (message, exception, level, transaction,
                logger, tags, user, extra, fingerprint, ...)
            scope: Scope to merge onto the event
            request: Inbound request, only when serving one

        Returns:
            The finished event, or None if the middleware chain dropped it
        """
        event = Event(
            server_name=self._options.server_name,
            release=self._options.release,
            environment=self._options.environment,
            sdk={"name": self.SDK_IDENTIFIER, "version": self.VERSION},
        )

        if payload.get("transaction") is not None:
            event.transaction = payload["transaction"]
        else:
            event.transaction = self._transaction_stack.peek()

        if payload.get("logger") is not None:
            event.logger = payload["logger"]

        event = self._middleware_stack.execute_stack(
            event,
            request,
            payload.get("exception"),
            payload,
        )
        if event is None:
            return None

        if scope is not None:
            event = scope.apply_to_event(event)

        return event

    def capture_message(
        self,
        message: str,
        level: Optional[Severity] = None,
        scope: Optional[Scope] = None,
        request: Optional[RequestSnapshot] = None,
        params: Optional[list] = None,
    ) -> Optional[str]:
        """
        Capture a message.

        Args:
            message: The message, optionally with %-style placeholders
            level: Level of the event (error if None)
            scope: Scope to merge onto the event
            request: Inbound request, only when serving one
            params: Values for the message placeholders

        Returns:
            The transport's event identifier, or None if dropped
        """
        payload: Dict[str, Any] = {"message": message}
        if level is not None:
            payload["level"] = level
        if params:
            payload["message_params"] = list(params)

        return self.capture_event(payload, scope, request)

    def capture_exception(
        self,
        exception: Optional[BaseException] = None,
        scope: Optional[Scope] = None,
        request: Optional[RequestSnapshot] = None,
    ) -> Optional[str]:
        """
        Capture an exception.

        Args:
            exception: The exception; defaults to the one being handled
            scope: Scope to merge onto the event
            request: Inbound request, only when serving one

        Returns:
            The transport's event identifier, or None if dropped
        """
        if exception is None:
            exception = sys.exc_info()[1]
            if exception is None:
                logger.debug("capture_exception called with no exception being handled")
                return None

        return self.capture_event({"exception": exception}, scope, request)

    def capture_event(
        self,
        payload: Mapping[str, Any],
        scope: Optional[Scope] = None,
        request: Optional[RequestSnapshot] = None,
    ) -> Optional[str]:
        """
        Assemble an event from a payload and send it.

        Returns:
            The transport's event identifier, or None if dropped
        """
        event = self.prepare_event(payload, scope, request)
        if event is None:
            return None
        return self.send(event)

    def send(self, event: Event) -> Optional[str]:
        """Hand a finished event to the transport."""
        return self._transport.send(event)
