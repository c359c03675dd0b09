# src/authgateway/app/queue/__init__.py
from .client import AmqpQueueClient, ConnectionState
from .helper import QueueHelper
from .service import MessageType, QueueMessage, QueueService

__all__ = [
    "AmqpQueueClient",
    "ConnectionState",
    "MessageType",
    "QueueHelper",
    "QueueMessage",
    "QueueService",
]
