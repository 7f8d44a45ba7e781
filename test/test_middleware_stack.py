from crumbtrail.event import Event
from crumbtrail.middleware.stack import MiddlewareStack
from crumbtrail.request import RequestSnapshot


def recording_step(name, calls):
    def step(event, context, next_step):
        calls.append(name)
        return next_step(event)
    return step


class TestMiddlewareStack:
    """Test suite for middleware ordering, veto and context passing."""

    def setup_method(self):
        self.stack = MiddlewareStack()
        self.calls = []

    def test_empty_stack_returns_event_unchanged(self):
        event = Event()

        assert self.stack.execute_stack(event) is event

    def test_descending_priority_order(self):
        self.stack.add(recording_step("low", self.calls), priority=-10)
        self.stack.add(recording_step("high", self.calls), priority=100)
        self.stack.add(recording_step("mid", self.calls), priority=0)

        self.stack.execute_stack(Event())

        assert self.calls == ["high", "mid", "low"]

    def test_equal_priority_keeps_insertion_order(self):
        """Add A then B at priority 5: A runs before B."""
        self.stack.add(recording_step("A", self.calls), priority=5)
        self.stack.add(recording_step("B", self.calls), priority=5)
        self.stack.add(recording_step("C", self.calls), priority=5)

        self.stack.execute_stack(Event())

        assert self.calls == ["A", "B", "C"]

    def test_veto_stops_chain(self):
        """A step that does not continue yields None and later steps never run."""
        spy_calls = []

        def veto(event, context, next_step):
            return None

        self.stack.add(veto, priority=10)
        self.stack.add(recording_step("spy", spy_calls), priority=0)

        assert self.stack.execute_stack(Event()) is None
        assert spy_calls == []

    def test_steps_can_mutate_event(self):
        def tag(event, context, next_step):
            event.tags["region"] = "eu"
            return next_step(event)

        self.stack.add(tag)

        assert self.stack.execute_stack(Event()).tags == {"region": "eu"}

    def test_steps_can_replace_event(self):
        replacement = Event(message="replaced")

        def swap(event, context, next_step):
            return next_step(replacement)

        self.stack.add(swap)

        assert self.stack.execute_stack(Event()) is replacement

    def test_steps_can_post_process(self):
        """Work done after next_step returns sees the result of the rest of the chain."""
        def outer(event, context, next_step):
            result = next_step(event)
            self.calls.append(result.message)
            return result

        def inner(event, context, next_step):
            event.message = "set by inner"
            return next_step(event)

        self.stack.add(outer, priority=10)
        self.stack.add(inner, priority=0)

        self.stack.execute_stack(Event())

        assert self.calls == ["set by inner"]

    def test_context_is_passed_to_steps(self):
        request = RequestSnapshot(method="POST", url="http://shop/cart", path_info="/cart")
        error = ValueError("boom")
        payload = {"message": "hi"}
        seen = []

        def inspect(event, context, next_step):
            seen.append(context)
            return next_step(event)

        self.stack.add(inspect)
        self.stack.execute_stack(Event(), request, error, payload)

        assert seen[0].request is request
        assert seen[0].exception is error
        assert seen[0].payload is payload

    def test_missing_payload_defaults_to_empty(self):
        seen = []

        def inspect(event, context, next_step):
            seen.append(context)
            return next_step(event)

        self.stack.add(inspect)
        self.stack.execute_stack(Event())

        assert seen[0].request is None
        assert seen[0].exception is None
        assert dict(seen[0].payload) == {}

    def test_same_step_twice_runs_twice(self):
        step = recording_step("dup", self.calls)
        self.stack.add(step)
        self.stack.add(step)

        self.stack.execute_stack(Event())

        assert self.calls == ["dup", "dup"]
        assert len(self.stack) == 2

    def test_remove(self):
        step = recording_step("removed", self.calls)
        self.stack.add(step)
        self.stack.add(step, priority=3)

        assert self.stack.remove(step) is True
        assert step not in self.stack

        self.stack.execute_stack(Event())

        assert self.calls == []

    def test_remove_unknown_step_is_noop(self):
        self.stack.add(recording_step("kept", self.calls))

        assert self.stack.remove(recording_step("other", [])) is False
        assert len(self.stack) == 1

    def test_terminal_runs_last(self):
        def terminal(event):
            self.calls.append("terminal")
            return event

        stack = MiddlewareStack(terminal)
        stack.add(recording_step("first", self.calls), priority=-1000)

        stack.execute_stack(Event())

        assert self.calls == ["first", "terminal"]

    def test_entries_in_execution_order(self):
        a = recording_step("a", self.calls)
        b = recording_step("b", self.calls)
        self.stack.add(a, priority=1)
        self.stack.add(b, priority=2)

        assert [entry.step for entry in self.stack.entries] == [b, a]
        assert [entry.priority for entry in self.stack.entries] == [2, 1]
