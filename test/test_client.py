import pytest

from crumbtrail.breadcrumbs import Breadcrumb
from crumbtrail.client import Client
from crumbtrail.options import Options
from crumbtrail.request import RequestSnapshot
from crumbtrail.scope import Scope
from crumbtrail.severity import ErrorCode, Severity
from crumbtrail.transport import InMemoryTransport, NullTransport


class TestPrepareEvent:
    """Test suite for event assembly."""

    def setup_method(self):
        self.options = Options(server_name="web-1", release="shop@1.4.2", environment="staging")
        self.client = Client(self.options, InMemoryTransport())

    def test_stamps_static_identity(self):
        event = self.client.prepare_event({})

        assert event.server_name == "web-1"
        assert event.release == "shop@1.4.2"
        assert event.environment == "staging"
        assert event.sdk == {"name": Client.SDK_IDENTIFIER, "version": Client.VERSION}

    def test_transaction_from_stack(self):
        self.client.transaction_stack.push("/orders")
        self.client.transaction_stack.push("charge_card")

        assert self.client.prepare_event({}).transaction == "charge_card"

    def test_explicit_transaction_wins(self):
        self.client.transaction_stack.push("/orders")

        assert self.client.prepare_event({"transaction": "refund"}).transaction == "refund"

    def test_no_transaction(self):
        assert self.client.prepare_event({}).transaction is None

    def test_logger_copied(self):
        assert self.client.prepare_event({"logger": "billing"}).logger == "billing"
        assert self.client.prepare_event({}).logger is None

    def test_veto_returns_none_and_skips_scope(self):
        scope = Scope().set_tag("a", "1")
        self.client.add_middleware(lambda event, context, next_step: None, priority=1000)

        assert self.client.prepare_event({"message": "x"}, scope) is None

    def test_scope_is_merged_after_middleware(self):
        scope = Scope().set_tag("tenant", "acme")
        seen_tags = []

        def spy(event, context, next_step):
            seen_tags.append(dict(event.tags))
            return next_step(event)

        self.client.add_middleware(spy, priority=-1000)
        event = self.client.prepare_event({}, scope)

        assert seen_tags == [{}]
        assert event.tags["tenant"] == "acme"

    def test_middleware_receives_exception_and_payload(self):
        seen = []

        def spy(event, context, next_step):
            seen.append((context.exception, dict(context.payload)))
            return next_step(event)

        error = ValueError("boom")
        self.client.add_middleware(spy)
        self.client.prepare_event({"exception": error})

        assert seen[0][0] is error
        assert seen[0][1] == {"exception": error}

    def test_middleware_errors_propagate(self):
        def broken(event, context, next_step):
            raise RuntimeError("broken step")

        self.client.add_middleware(broken)

        with pytest.raises(RuntimeError):
            self.client.prepare_event({})

    def test_remove_middleware(self):
        def veto(event, context, next_step):
            return None

        self.client.add_middleware(veto)
        assert self.client.remove_middleware(veto) is True
        assert self.client.remove_middleware(veto) is False

        assert self.client.prepare_event({}) is not None


class TestCapture:
    """Test suite for the capture entry points."""

    def setup_method(self):
        self.transport = InMemoryTransport()
        self.client = Client(Options(), self.transport)

    def test_capture_message_end_to_end(self):
        """'disk full' with no scope and an empty stack has no transaction."""
        event_id = self.client.capture_message("disk full")

        event = self.transport.events[0]
        assert event_id == event.event_id
        assert event.message == "disk full"
        assert event.transaction is None

    def test_capture_message_after_push(self):
        self.client.transaction_stack.push("checkout")

        self.client.capture_message("disk full")

        assert self.transport.events[0].transaction == "checkout"

    def test_capture_message_level_and_params(self):
        self.client.capture_message("disk %s full", level=Severity.WARNING, params=["/var"])

        event = self.transport.events[0]
        assert event.message == "disk /var full"
        assert event.level is Severity.WARNING

    def test_capture_message_with_scope(self):
        scope = Scope().set_user({"id": "42"})
        self.client.add_breadcrumb(Breadcrumb(category="cart", message="item added"), scope)

        self.client.capture_message("disk full", scope=scope)

        event = self.transport.events[0]
        assert event.user == {"id": "42"}
        assert [b.message for b in event.breadcrumbs] == ["item added"]

    def test_capture_exception(self):
        try:
            raise KeyError("sku")
        except KeyError as exc:
            event_id = self.client.capture_exception(exc)

        event = self.transport.events[0]
        assert event_id == event.event_id
        assert event.exception[-1]["type"] == "KeyError"
        assert event.level is Severity.ERROR

    def test_capture_exception_defaults_to_current(self):
        try:
            raise ValueError("current")
        except ValueError:
            self.client.capture_exception()

        assert self.transport.events[0].exception[-1]["value"] == "current"

    def test_capture_exception_without_exception(self):
        assert self.client.capture_exception() is None
        assert len(self.transport) == 0

    def test_capture_event_dropped(self):
        self.client.add_middleware(lambda event, context, next_step: None, priority=1000)

        assert self.client.capture_event({"message": "x"}) is None
        assert len(self.transport) == 0

    def test_capture_event_with_request(self):
        request = RequestSnapshot(method="GET", url="http://shop/orders", path_info="/orders")

        self.client.capture_event({"message": "slow"}, request=request)

        assert self.transport.events[0].request["url"] == "http://shop/orders"

    def test_send_returns_transport_ack(self):
        client = Client(Options(), NullTransport())
        event = client.prepare_event({"message": "x"})

        assert client.send(event) == event.event_id


class TestClientConstruction:

    def test_transaction_seeded_from_request_path(self):
        request = RequestSnapshot(path_info="/checkout")

        client = Client(Options(), InMemoryTransport(), request=request)

        assert client.transaction_stack.peek() == "/checkout"

    def test_transaction_empty_without_request(self):
        assert Client(Options()).transaction_stack.peek() is None

    def test_defaults(self):
        client = Client()

        assert isinstance(client.transport, NullTransport)
        assert client.options.max_breadcrumbs == 100

    def test_serialize_all_objects_option(self):
        client = Client(Options(serialize_all_objects=True))

        assert client.serializer.get_all_object_serialize() is True
        assert client.representation_serializer.get_all_object_serialize() is True

    def test_severity_translation(self):
        client = Client(Options())

        assert client.translate_severity(ErrorCode.NOTICE) is Severity.INFO
        client.register_severity_map({ErrorCode.NOTICE: Severity.FATAL})
        assert client.translate_severity(ErrorCode.NOTICE) is Severity.FATAL

    def test_add_breadcrumb_disabled(self):
        client = Client(Options(max_breadcrumbs=0))
        scope = Scope()

        assert client.add_breadcrumb(Breadcrumb(category="x"), scope) is False
        assert scope.breadcrumbs == []

    def test_user_agent(self):
        assert Client.USER_AGENT == f"{Client.SDK_IDENTIFIER}/{Client.VERSION}"
