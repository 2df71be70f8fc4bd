"""Dispatcher edge cases — failing notifiers never raise."""

from types import SimpleNamespace

from ordering.adapters.fake_notifier import FakeNotifier
from ordering.notification.dispatch import NotificationDispatcher


def _order(**overrides):
    data = {
        "id": "ord-001",
        "user_id": "user-001",
        "status": "processing",
        "tracking_number": "TRK-1",
        "estimated_delivery_date": None,
    }
    data.update(overrides)
    return SimpleNamespace(**data)


class ExplodingNotifier(FakeNotifier):
    def send_to_roles(self, roles, title, body, category):
        raise RuntimeError("broker down")


class UntypedNotifier(FakeNotifier):
    def send(self, user_id, title, body, category):
        return "queued"

    def send_to_roles(self, roles, title, body, category):
        return None


class TestDispatcher:
    def setup_method(self):
        self.notifier = FakeNotifier()
        self.dispatcher = NotificationDispatcher(self.notifier)

    def test_status_change_is_sent_to_the_customer(self):
        assert self.dispatcher.order_status_changed(_order(), "pending") is True

        [record] = self.notifier.sent
        assert record["user_id"] == "user-001"
        assert record["category"] == "order_status"
        assert record["body"].endswith("Tracking: TRK-1")

    def test_unsuccessful_delivery_returns_false(self):
        self.notifier.configure(should_succeed=False, failure_reason="mailbox full")
        assert self.dispatcher.payment_confirmed(_order()) is False
        assert self.notifier.sent == []

    def test_raising_notifier_is_swallowed(self):
        self.notifier.configure(raise_on_send=True)
        assert self.dispatcher.order_status_changed(_order()) is False

    def test_role_dispatch_failure_is_swallowed(self):
        dispatcher = NotificationDispatcher(ExplodingNotifier())
        assert dispatcher.order_delivered_to_staff(_order(status="delivered"), "Jane Doe") is False

    def test_unexpected_result_counts_as_not_delivered(self):
        dispatcher = NotificationDispatcher(UntypedNotifier())

        assert dispatcher.payment_confirmed(_order()) is False
        assert dispatcher.order_delivered_to_staff(_order(status="delivered")) is False

    def test_stock_alert_goes_to_admins(self):
        product = SimpleNamespace(id="prod-1", name="Mug", low_stock_threshold=5)

        assert self.dispatcher.stock_alert(product, 2) is True

        [record] = self.notifier.sent
        assert record["roles"] == ["administrator"]
        assert record["category"] == "inventory_low_stock"
