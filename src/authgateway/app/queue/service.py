# src/authgateway/app/queue/service.py

from __future__ import annotations

import enum
import logging
import secrets
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Mapping

from authgateway.app.core.config import QueueNames
from authgateway.app.core.errors import QueueNotInitializedError
from authgateway.app.queue.client import AmqpQueueClient

_log = logging.getLogger("authgateway.queue")


class MessageType(str, enum.Enum):
    USER_SIGNUP = "USER_SIGNUP"
    USER_LOGIN = "USER_LOGIN"


def generate_message_id() -> str:
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}"


@dataclass(frozen=True)
class QueueMessage:
    """Wire envelope: {id, type, payload, timestamp}."""

    type: MessageType
    payload: Any
    id: str = field(default_factory=generate_message_id)
    timestamp: int = field(default_factory=lambda: int(time.time() * 1000))

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("queue message id must not be empty")
        if not self.type:
            raise ValueError("queue message type must not be empty")

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["type"] = MessageType(self.type).value
        return data

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "QueueMessage":
        return QueueMessage(
            id=str(data["id"]),
            type=MessageType(data["type"]),
            payload=data.get("payload"),
            timestamp=int(data["timestamp"]),
        )


class QueueService:
    """Builds lifecycle event envelopes and routes them to their queues."""

    def __init__(self, client: AmqpQueueClient, queues: QueueNames | None = None) -> None:
        self._client = client
        self._queues = queues or QueueNames()

    @property
    def client(self) -> AmqpQueueClient:
        return self._client

    @property
    def queues(self) -> QueueNames:
        return self._queues

    @property
    def connection_status(self) -> bool:
        return self._client.connection_status

    async def initialize(self) -> None:
        if self._client.connection_status:
            _log.info("queue service already initialized")
            return
        try:
            await self._client.connect()
        except Exception:
            _log.error("failed to initialize queue service")
            raise
        _log.info("queue service initialized")

    async def disconnect(self) -> None:
        try:
            await self._client.disconnect()
        except Exception:
            _log.error("failed to disconnect queue service")
            raise
        _log.info("queue service disconnected")

    async def _send(self, queue_name: str, message_type: MessageType, payload: Any) -> QueueMessage:
        if not self.connection_status:
            raise QueueNotInitializedError()

        message = QueueMessage(type=message_type, payload=payload)
        await self._client.send_message(queue_name, message.to_dict())
        _log.info("%s message sent: %s", message_type.value, message.id)
        return message

    async def send_user_signup_message(self, payload: Any) -> QueueMessage:
        return await self._send(self._queues.user_signup, MessageType.USER_SIGNUP, payload)

    async def send_user_login_message(self, payload: Any) -> QueueMessage:
        return await self._send(self._queues.user_login, MessageType.USER_LOGIN, payload)


__all__ = ["MessageType", "QueueMessage", "QueueService", "generate_message_id"]
