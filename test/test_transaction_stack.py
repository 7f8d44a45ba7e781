from crumbtrail.transaction_stack import TransactionStack


class TestTransactionStack:
    """Test suite for LIFO transaction naming."""

    def setup_method(self):
        self.stack = TransactionStack()

    def test_empty_stack_returns_none(self):
        assert self.stack.peek() is None
        assert self.stack.pop() is None
        assert self.stack.is_empty()

    def test_peek_after_pushes_and_pops(self):
        """After n pushes and m < n pops, peek returns the (n - m)-th pushed value."""
        names = ["a", "b", "c", "d", "e"]
        for name in names:
            self.stack.push(name)

        for pops in range(len(names)):
            assert self.stack.peek() == names[len(names) - pops - 1]
            self.stack.pop()

        assert self.stack.peek() is None

    def test_pop_returns_top(self):
        self.stack.push("checkout")
        self.stack.push("charge_card")

        assert self.stack.pop() == "charge_card"
        assert self.stack.pop() == "checkout"
        assert self.stack.pop() is None

    def test_push_many(self):
        self.stack.push("a", "b", "c")

        assert len(self.stack) == 3
        assert self.stack.peek() == "c"
        assert list(self.stack) == ["a", "b", "c"]

    def test_initial_names(self):
        stack = TransactionStack("/orders")

        assert stack.peek() == "/orders"

    def test_clear(self):
        self.stack.push("a", "b")
        self.stack.clear()

        assert self.stack.peek() is None
        assert len(self.stack) == 0
