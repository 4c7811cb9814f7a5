"""Application tests for the notification dispatcher and background notifier."""

import pytest
from protean.utils.globals import current_domain

from caviar.config import Settings, get_settings
from caviar.identity.registration import RegisterUser
from caviar.notifications.background import BackgroundNotifier
from caviar.notifications.channel import get_channel
import caviar.notifications.dispatcher as dispatcher_module
from caviar.notifications.dispatcher import (
    NotificationChannel,
    NotificationDispatcher,
    NotificationRequest,
)
from caviar.ordering.order.cart import Cart, CartItem, CustomerInput, DeliveryInput, PriceInput
from caviar.ordering.order.construction import build_order


def _register(telegram_id=None, email=None):
    return current_domain.process(RegisterUser(telegram_id=telegram_id, email=email), asynchronous=False)


def _order():
    return build_order(
        Cart(
            customer=CustomerInput(phone="+380501234567", full_name="Olena Shevchenko"),
            delivery=DeliveryInput(type="courier", country="Ukraine", city="Kyiv", address="Khreshchatyk 1"),
            items=[CartItem(product_id="p", variant_id="v", quantity=1, unit_price=PriceInput(100, "UAH"))],
        )
    )


@pytest.fixture
def chat():
    return get_channel("telegram")


@pytest.fixture
def dispatcher():
    return NotificationDispatcher(enabled_channels=["telegram"], batch_size=2, batch_delay=0)


class TestBatching:
    def test_pauses_between_batches_only(self, monkeypatch, chat):
        pauses = []
        monkeypatch.setattr(dispatcher_module.time, "sleep", pauses.append)
        for telegram_id in (31, 32, 33, 34, 35):
            _register(telegram_id=telegram_id)
        dispatcher = NotificationDispatcher(enabled_channels=["telegram"], batch_size=2, batch_delay=0.25)

        [result] = dispatcher.send(NotificationRequest(title="Hello", message="hi"))

        assert result.success == 5
        assert pauses == [0.25, 0.25]

    def test_single_batch_does_not_pause(self, monkeypatch, chat):
        pauses = []
        monkeypatch.setattr(dispatcher_module.time, "sleep", pauses.append)
        for telegram_id in (41, 42):
            _register(telegram_id=telegram_id)
        dispatcher = NotificationDispatcher(enabled_channels=["telegram"], batch_size=2, batch_delay=0.25)

        dispatcher.send(NotificationRequest(title="Hello", message="hi"))

        assert pauses == []

    def test_defaults_come_from_settings(self):
        assert Settings().notification_batch_size == 30
        assert Settings().notification_batch_delay == 0.1

        dispatcher = NotificationDispatcher(enabled_channels=["telegram"])
        assert dispatcher.batch_size == get_settings().notification_batch_size
        assert dispatcher.batch_delay == get_settings().notification_batch_delay


class TestBroadcast:
    def test_every_linked_user_receives_message(self, dispatcher, chat):
        for telegram_id in (11, 12, 13, 14, 15):
            _register(telegram_id=telegram_id)
        _register(email="no-chat@caviar.example")

        results = dispatcher.send(NotificationRequest(title="Hello", message="hi"))

        assert len(results) == 1
        assert results[0].success == 5
        assert results[0].failed == 0
        assert sorted(m["recipient_id"] for m in chat.sent_messages) == [11, 12, 13, 14, 15]

    def test_one_failure_does_not_stop_the_batch(self, dispatcher, chat):
        for telegram_id in (21, 22, 23):
            _register(telegram_id=telegram_id)
        chat.configure(failing_recipients={22})

        [result] = dispatcher.send(NotificationRequest(title="Hello", message="hi"))

        assert result.success == 2
        assert result.failed == 1
        assert len(result.errors) == 1
        assert not result.ok

    def test_no_recipients(self, dispatcher, chat):
        [result] = dispatcher.send(NotificationRequest(title="Hello", message="hi"))
        assert result.success == 0
        assert result.ok
        assert chat.sent_messages == []

    def test_explicit_user_ids_skip_unknown(self, dispatcher, chat):
        wanted = _register(telegram_id=31)
        _register(telegram_id=32)

        [result] = dispatcher.send(NotificationRequest(title="Hi", message="hi", user_ids=[wanted, "ghost"]))

        assert result.success == 1
        assert [m["recipient_id"] for m in chat.sent_messages] == [31]


class TestChannels:
    def test_disabled_channel_skipped(self, chat):
        _register(telegram_id=41)
        dispatcher = NotificationDispatcher(enabled_channels=["email"], batch_delay=0)

        results = dispatcher.send(
            NotificationRequest(title="Hi", message="hi", channels=[NotificationChannel.TELEGRAM])
        )
        assert results == []
        assert chat.sent_messages == []

    @pytest.mark.parametrize("channel", [NotificationChannel.EMAIL, NotificationChannel.SMS])
    def test_unimplemented_channels_report_errors(self, channel):
        dispatcher = NotificationDispatcher(enabled_channels=["telegram", "email", "sms"], batch_delay=0)

        [result] = dispatcher.send(NotificationRequest(title="Hi", message="hi", channels=[channel]))
        assert result.errors == [f"{channel.value} notifications not implemented"]

    def test_set_enabled_channels(self, dispatcher):
        dispatcher.set_enabled_channels(["sms"])
        assert dispatcher.enabled_channels == {NotificationChannel.SMS}


class TestOrderCreated:
    def test_send_order_created(self, dispatcher, chat):
        _register(telegram_id=51)
        order = _order()

        [result] = dispatcher.send_order_created(order)

        assert result.success == 1
        assert order.order_number in chat.messages_for(51)[0]

    def test_background_notifier(self, dispatcher, chat):
        _register(telegram_id=61)
        notifier = BackgroundNotifier(dispatcher=dispatcher, max_workers=1)
        order = _order()

        try:
            results = notifier.notify_order_created(order).result(timeout=5)
        finally:
            notifier.shutdown()

        assert results[0].success == 1
        assert "New order!" in chat.messages_for(61)[0]

    def test_background_failures_are_swallowed(self):
        class BrokenDispatcher:
            def send_order_created(self, order):
                raise RuntimeError("chat service down")

        notifier = BackgroundNotifier(dispatcher=BrokenDispatcher(), max_workers=1)
        try:
            assert notifier.notify_order_created(_order()).result(timeout=5) == []
        finally:
            notifier.shutdown()
