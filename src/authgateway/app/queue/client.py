# src/authgateway/app/queue/client.py
"""
AMQP 0-9-1 client for Amazon MQ (RabbitMQ engine).

One connection, one channel, durable queues, persistent JSON messages.
Consumers run with prefetch=1 and manual ack; a failed delivery is nacked
without requeue so the broker drops or dead-letters it.
"""

from __future__ import annotations

import asyncio
import enum
import json
import logging
import secrets
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Mapping, Optional
from urllib.parse import quote

import aio_pika
from aio_pika.abc import AbstractChannel, AbstractConnection, AbstractIncomingMessage
from aio_pika.exceptions import DeliveryError

from authgateway.app.core.config import QueueSettings
from authgateway.app.core.errors import QueueFullError, QueueNotConnectedError

_log = logging.getLogger("authgateway.queue")

MessageCallback = Callable[[Any], Awaitable[None]]


class ConnectionState(str, enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def encode_message(message: Mapping[str, Any]) -> bytes:
    return json.dumps(message, default=_json_default, separators=(",", ":")).encode("utf-8")


def decode_message(body: bytes) -> Any:
    return json.loads(body.decode("utf-8"))


def fallback_message_id() -> str:
    return f"msg-{int(time.time() * 1000)}-{secrets.token_hex(4)}"


def build_connection_url(settings: QueueSettings) -> str:
    vhost = settings.virtual_host or "/"
    if not vhost.startswith("/"):
        vhost = "/" + vhost
    return (
        f"{settings.scheme}://{quote(settings.username, safe='')}:{quote(settings.password, safe='')}"
        f"@{settings.host}:{settings.port}{vhost}?heartbeat={settings.heartbeat}"
    )


class AmqpQueueClient:
    """Owns a single broker connection + channel for the process."""

    def __init__(self, settings: QueueSettings) -> None:
        self._settings = settings
        self._url = build_connection_url(settings)
        self._connection: Optional[AbstractConnection] = None
        self._channel: Optional[AbstractChannel] = None
        self._state = ConnectionState.DISCONNECTED
        self._lock = asyncio.Lock()

        _log.info(
            "queue client initialized host=%s port=%s username=%s vhost=%s",
            settings.host,
            settings.port,
            settings.username,
            settings.virtual_host or "/",
        )

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def connection_status(self) -> bool:
        return (
            self._state is ConnectionState.CONNECTED
            and self._connection is not None
            and self._channel is not None
        )

    # ------------------------
    # Lifecycle
    # ------------------------
    async def connect(self) -> None:
        async with self._lock:
            if self.connection_status:
                _log.info("already connected to Amazon MQ")
                return

            await self._close_stale()
            self._state = ConnectionState.CONNECTING
            _log.info("connecting to Amazon MQ at %s:%s", self._settings.host, self._settings.port)
            try:
                self._connection = await aio_pika.connect(
                    self._url,
                    timeout=self._settings.connect_timeout,
                )
                self._channel = await self._connection.channel()
            except Exception:
                self._state = ConnectionState.DISCONNECTED
                _log.exception("failed to connect to Amazon MQ")
                raise

            self._register_close_callbacks()
            self._state = ConnectionState.CONNECTED
            _log.info("connected to Amazon MQ")

    async def _close_stale(self) -> None:
        # a channel-only close leaves the old connection open
        channel, connection = self._channel, self._connection
        self._channel = None
        self._connection = None
        for name, handle in (("channel", channel), ("connection", connection)):
            if handle is None:
                continue
            try:
                await handle.close()
            except Exception as exc:
                _log.warning("error closing stale Amazon MQ %s: %s", name, exc)

    def _register_close_callbacks(self) -> None:
        if self._connection is not None:
            self._connection.close_callbacks.add(self._on_connection_closed)
        if self._channel is not None:
            self._channel.close_callbacks.add(self._on_channel_closed)

    def _on_connection_closed(self, sender: Any, exc: Optional[BaseException] = None) -> None:
        # events from a connection already replaced by a reconnect
        if sender is not self._connection:
            return
        self._state = ConnectionState.DISCONNECTED
        if exc is not None:
            _log.error("Amazon MQ connection error: %s", exc)
        else:
            _log.warning("Amazon MQ connection closed")

    def _on_channel_closed(self, sender: Any, exc: Optional[BaseException] = None) -> None:
        if sender is not self._channel:
            return
        self._state = ConnectionState.DISCONNECTED
        if exc is not None:
            _log.error("Amazon MQ channel error: %s", exc)
        else:
            _log.warning("Amazon MQ channel closed")

    async def disconnect(self) -> None:
        try:
            if self._channel is not None:
                await self._channel.close()
                self._channel = None
                _log.info("Amazon MQ channel closed")

            if self._connection is not None:
                await self._connection.close()
                self._connection = None
                _log.info("Amazon MQ connection closed")
        except Exception:
            _log.exception("error closing Amazon MQ connection")
            raise
        finally:
            self._state = ConnectionState.DISCONNECTED

    # ------------------------
    # Publish
    # ------------------------
    async def send_message(self, queue_name: str, message: Mapping[str, Any]) -> None:
        if not self.connection_status:
            raise QueueNotConnectedError()

        channel = self._channel
        message_id = message.get("id") or fallback_message_id()
        try:
            await channel.declare_queue(queue_name, durable=True)
            await channel.default_exchange.publish(
                aio_pika.Message(
                    body=encode_message(message),
                    content_type="application/json",
                    delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
                    timestamp=datetime.now(timezone.utc),
                    message_id=message_id,
                ),
                routing_key=queue_name,
            )
        except DeliveryError as exc:
            _log.error("broker rejected message %s on %s: %s", message_id, queue_name, exc)
            raise QueueFullError() from exc
        except Exception:
            _log.exception("error sending message to Amazon MQ queue %s", queue_name)
            raise

        _log.info(
            "message sent to queue %s id=%s type=%s",
            queue_name,
            message_id,
            message.get("type"),
        )

    # ------------------------
    # Consume
    # ------------------------
    async def consume_messages(self, queue_name: str, callback: MessageCallback) -> str:
        if not self.connection_status:
            raise QueueNotConnectedError()

        channel = self._channel
        try:
            queue = await channel.declare_queue(queue_name, durable=True)
            await channel.set_qos(prefetch_count=1)

            async def on_delivery(delivery: Optional[AbstractIncomingMessage]) -> None:
                await self._handle_delivery(queue_name, delivery, callback)

            consumer_tag = await queue.consume(on_delivery, no_ack=False)
        except Exception:
            _log.exception("error setting up consumer for %s", queue_name)
            raise

        _log.info("started consuming messages from queue %s", queue_name)
        return consumer_tag

    async def _handle_delivery(
        self,
        queue_name: str,
        delivery: Optional[AbstractIncomingMessage],
        callback: MessageCallback,
    ) -> None:
        # consumer cancelled by the broker
        if delivery is None:
            return

        try:
            content = decode_message(delivery.body)
            _log.info("processing message from %s id=%s", queue_name, delivery.message_id)
            await callback(content)
        except Exception:
            _log.exception("error processing message from %s id=%s", queue_name, delivery.message_id)
            await delivery.nack(requeue=False)
            return

        await delivery.ack()
        _log.info("message processed from %s id=%s", queue_name, delivery.message_id)


__all__ = [
    "AmqpQueueClient",
    "ConnectionState",
    "build_connection_url",
    "decode_message",
    "encode_message",
    "fallback_message_id",
]
