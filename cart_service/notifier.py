"""
Notification sinks: deliver a failure message to the cart owner.

Every sink exposes `notify(message) -> None` and is fire-and-forget: a sink
that cannot deliver logs the problem and returns.
"""

import logging

from shared.events import NotificationSendEvent
from shared.kafka_client import BaseKafkaProducer

logger = logging.getLogger(__name__)


class LoggingNotifier:
    """Writes user notifications to the service log."""

    def notify(self, message: str) -> None:
        logger.warning(f"User notification: {message}", extra={"event_type": "notification.send"})


class KafkaNotifier:
    """Publishes user notifications as `notification.send` events."""

    TOPIC = "notification.send"

    def __init__(self, producer: BaseKafkaProducer, owner_id: str):
        self.producer = producer
        self.owner_id = owner_id

    def notify(self, message: str) -> None:
        event = NotificationSendEvent(
            owner_id=self.owner_id,
            notification_type="cart_error",
            message=message,
        )
        try:
            self.producer.publish(self.TOPIC, event)
        except Exception as e:
            logger.error(f"Could not deliver notification to {self.owner_id}: {e}")
