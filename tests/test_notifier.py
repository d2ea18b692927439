"""Tests for notification sinks and event publishing"""
import json
import logging
from unittest.mock import Mock, patch

from cart_service.notifier import KafkaNotifier, LoggingNotifier
from shared.events import CartItemAddedEvent, NotificationSendEvent
from shared.kafka_client import BaseKafkaProducer
from shared.logging_config import JsonFormatter


def test_kafka_notifier_publishes_notification_event():
    producer = Mock()
    notifier = KafkaNotifier(producer, owner_id="user-123")

    notifier.notify("Failed to add product")

    topic, event = producer.publish.call_args.args
    assert topic == "notification.send"
    assert isinstance(event, NotificationSendEvent)
    assert event.owner_id == "user-123"
    assert event.message == "Failed to add product"
    assert event.notification_type == "cart_error"


def test_kafka_notifier_swallows_delivery_errors(caplog):
    producer = Mock()
    producer.publish.side_effect = RuntimeError("broker down")

    with caplog.at_level(logging.ERROR):
        KafkaNotifier(producer, owner_id="user-123").notify("Failed to add product")

    assert "Could not deliver notification" in caplog.text


def test_logging_notifier_logs_message(caplog):
    with caplog.at_level(logging.WARNING):
        LoggingNotifier().notify("Requested quantity exceeds stock")

    assert "Requested quantity exceeds stock" in caplog.text


@patch("shared.kafka_client.Producer")
def test_producer_serializes_event_as_json(mock_producer_cls):
    producer = BaseKafkaProducer("localhost:9092", client_id="cart-producer")
    event = CartItemAddedEvent(owner_id="default", product_id=42, amount=1, price=100.0)

    producer.publish("cart.item_added", event)

    kwargs = mock_producer_cls.return_value.produce.call_args.kwargs
    assert kwargs["topic"] == "cart.item_added"
    payload = json.loads(kwargs["value"].decode("utf-8"))
    assert payload["event_type"] == "cart.item_added"
    assert payload["product_id"] == 42
    mock_producer_cls.return_value.flush.assert_called_once()


def test_json_formatter_includes_context_fields():
    record = logging.LogRecord("cart_service.cart_store", logging.INFO, "", 0, "add_product succeeded", (), None)
    record.operation = "add_product"
    record.product_id = 42

    data = json.loads(JsonFormatter().format(record))

    assert data["message"] == "add_product succeeded"
    assert data["operation"] == "add_product"
    assert data["product_id"] == 42
    assert data["level"] == "INFO"
