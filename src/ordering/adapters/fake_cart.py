"""Fake cart service — keeps carts in memory for testing."""

from ordering.adapters.cart_port import CartPort


class FakeCart(CartPort):
    def __init__(self):
        self.carts: dict[str, list[dict]] = {}
        self.cleared: list[str] = []
        self.should_succeed = True
        self.failure_reason = "Cart service unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Cart service unavailable"):
        """Configure the fake adapter behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def add(self, user_id: str, product_id: str, quantity: int = 1):
        self.carts.setdefault(user_id, []).append({"product_id": product_id, "quantity": quantity})

    def clear(self, user_id: str) -> None:
        if not self.should_succeed:
            raise ConnectionError(self.failure_reason)
        self.carts.pop(user_id, None)
        self.cleared.append(user_id)

    def reset(self):
        self.carts.clear()
        self.cleared.clear()
        self.should_succeed = True
        self.failure_reason = "Cart service unavailable"
