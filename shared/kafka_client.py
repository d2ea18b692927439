"""
kafka_client.py - Kafka Producer Wrapper

PURPOSE:
    Provides a reusable Kafka producer that publishes pydantic events as JSON
    with delivery acknowledgments.

PRODUCER FEATURES:
    - JSON serialization of BaseEvent objects (and plain dicts)
    - Delivery callbacks for tracking
    - Automatic retries on transient failures (3 attempts)
    - Message compression (snappy)
    - All replicas acknowledgment (acks=all)

USAGE:
    producer = BaseKafkaProducer("localhost:9092", "cart-producer")
    producer.publish("cart.item_added", event)
    producer.close()
"""

import logging
from typing import Optional

from confluent_kafka import Producer
from confluent_kafka.error import KafkaError

from shared.events import BaseEvent

logger = logging.getLogger(__name__)


class BaseKafkaProducer:
    """
    Kafka producer with JSON serialization and delivery callbacks.

    Publishing flushes before returning, so a successful `publish` means the
    broker acknowledged the message.
    """

    def __init__(self, bootstrap_servers: str, client_id: str = "producer"):
        """
        Initialize Kafka producer.

        Args:
            bootstrap_servers: Comma-separated Kafka broker addresses
            client_id: Unique identifier for this producer instance
        """
        self.config = {
            "bootstrap.servers": bootstrap_servers,
            "client.id": client_id,
            "acks": "all",
            "retries": 3,
            "compression.type": "snappy",
        }
        self.producer = Producer(self.config)

    def _delivery_report(self, err: Optional[KafkaError], msg) -> None:
        """Delivery report handler called by producer on message delivery."""
        if err is not None:
            logger.error(f"Message delivery failed: {err}")
        else:
            logger.debug(
                f"Message delivered to topic={msg.topic()}, "
                f"partition={msg.partition()}, offset={msg.offset()}"
            )

    def publish(self, topic: str, event: BaseEvent) -> None:
        """Publish event to Kafka topic."""
        message = event.model_dump_json()
        event_type = event.event_type
        correlation_id = event.correlation_id

        try:
            self.producer.produce(
                topic=topic,
                value=message.encode("utf-8"),
                callback=self._delivery_report,
            )
            self.producer.flush()
        except Exception as e:
            logger.error(f"Error publishing event to {topic}: {e}")
            raise

        logger.info(
            f"Published event to {topic}",
            extra={"event_type": event_type, "correlation_id": correlation_id},
        )

    def flush(self) -> None:
        """Flush any pending messages."""
        self.producer.flush()

    def close(self) -> None:
        """Flush outstanding messages before shutdown."""
        self.flush()
