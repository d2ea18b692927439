# Keeps the cart service on in-memory storage with Kafka off when tests import the app
import os

os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("KAFKA_ENABLED", "false")
