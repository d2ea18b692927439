"""
topic_initializer.py - Kafka Topic Auto-Creation Utility

PURPOSE:
    Creates the cart service topics on application startup.
    Idempotent: topics that already exist are reported and skipped.

RETRY LOGIC:
    Brokers may not be ready when the service boots, so creation is retried
    (`max_retries` attempts, `retry_delay` seconds apart).
"""

import logging
import time
from typing import Iterable, List, Optional

from confluent_kafka.admin import AdminClient, NewTopic

from shared.events import ALL_TOPICS

logger = logging.getLogger(__name__)


def create_topics(
    bootstrap_servers: str,
    topics: Optional[Iterable[str]] = None,
    num_partitions: int = 3,
    replication_factor: int = 1,
    max_retries: int = 10,
    retry_delay: float = 3,
) -> None:
    """
    Create Kafka topics with the given partitions and replication factor.

    Args:
        bootstrap_servers: Comma-separated Kafka broker addresses
        topics: Topic names to create (default: every cart service topic)
        num_partitions: Number of partitions per topic
        replication_factor: Number of replicas per partition
    """
    admin_client = AdminClient({"bootstrap.servers": bootstrap_servers})

    topics_to_create: List[NewTopic] = [
        NewTopic(topic, num_partitions=num_partitions, replication_factor=replication_factor)
        for topic in (topics if topics is not None else ALL_TOPICS)
    ]

    for attempt in range(max_retries):
        try:
            logger.info(f"Creating topics (attempt {attempt + 1}/{max_retries})...")
            futures = admin_client.create_topics(topics_to_create, validate_only=False)

            for topic, future in futures.items():
                try:
                    future.result(timeout=10)
                    logger.info(f"Topic '{topic}' created successfully")
                except Exception as e:
                    if "already exists" in str(e) or "TOPIC_ALREADY_EXISTS" in str(e):
                        logger.info(f"Topic '{topic}' already exists")
                    else:
                        logger.warning(f"Error creating topic '{topic}': {e}")

            logger.info("All topics processed successfully")
            return
        except Exception as e:
            if attempt < max_retries - 1:
                logger.warning(f"Failed to create topics (attempt {attempt + 1}): {e}. Retrying in {retry_delay}s...")
                time.sleep(retry_delay)
            else:
                logger.error(f"Failed to create topics after {max_retries} attempts: {e}")
                raise
