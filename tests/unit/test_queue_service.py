# tests/unit/test_queue_service.py
import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from authgateway.app.core.errors import QueueNotInitializedError, QueueUnavailableError
from authgateway.app.queue.client import AmqpQueueClient
from authgateway.app.queue.helper import QueueHelper
from authgateway.app.queue.service import MessageType, QueueMessage, QueueService


def _client(connected=True):
    client = Mock(spec=AmqpQueueClient)
    client.connection_status = connected
    client.connect = AsyncMock()
    client.disconnect = AsyncMock()
    client.send_message = AsyncMock()
    return client


def test_queue_message_envelope():
    msg = QueueMessage(type=MessageType.USER_LOGIN, payload={"username": "jdoe"})
    data = msg.to_dict()
    assert data["type"] == "USER_LOGIN"
    assert data["payload"] == {"username": "jdoe"}
    assert data["id"]
    assert isinstance(data["timestamp"], int)
    assert QueueMessage.from_dict(data) == msg


def test_queue_message_rejects_empty_id():
    with pytest.raises(ValueError):
        QueueMessage(type=MessageType.USER_LOGIN, payload={}, id="")


@pytest.mark.asyncio
async def test_signup_message_goes_to_signup_queue():
    client = _client()
    service = QueueService(client)

    msg = await service.send_user_signup_message({"username": "jdoe"})

    queue_name, body = client.send_message.call_args.args
    assert queue_name == "user-signup-queue"
    assert body["type"] == "USER_SIGNUP"
    assert body["id"] == msg.id


@pytest.mark.asyncio
async def test_send_before_initialize_raises():
    service = QueueService(_client(connected=False))
    with pytest.raises(QueueNotInitializedError, match="Call initialize"):
        await service.send_user_login_message({"username": "jdoe"})


@pytest.mark.asyncio
async def test_initialize_skips_connect_when_connected():
    client = _client(connected=True)
    await QueueService(client).initialize()
    client.connect.assert_not_awaited()


@pytest.mark.asyncio
async def test_concurrent_publishes_share_one_connect():
    client = _client(connected=False)
    gate = asyncio.Event()

    async def slow_connect():
        await gate.wait()
        client.connection_status = True

    client.connect.side_effect = slow_connect
    helper = QueueHelper(QueueService(client))

    sends = [
        asyncio.ensure_future(helper.send_user_login_message({"username": f"u{i}"}))
        for i in range(5)
    ]
    await asyncio.sleep(0)
    gate.set()
    await asyncio.gather(*sends)

    assert client.connect.await_count == 1
    assert client.send_message.await_count == 5


@pytest.mark.asyncio
async def test_failed_connect_is_surfaced_and_nothing_is_published():
    client = _client(connected=False)
    client.connect.side_effect = ConnectionError("refused")
    helper = QueueHelper(QueueService(client))

    with pytest.raises(QueueUnavailableError, match="Queue service is not available"):
        await helper.send_user_signup_message({"username": "jdoe"})

    client.send_message.assert_not_awaited()


@pytest.mark.asyncio
async def test_connect_is_retried_after_a_failure():
    client = _client(connected=False)
    client.connect.side_effect = [ConnectionError("refused"), None]
    helper = QueueHelper(QueueService(client))

    with pytest.raises(QueueUnavailableError):
        await helper.ensure_initialized()

    await helper.ensure_initialized()
    assert client.connect.await_count == 2


@pytest.mark.asyncio
async def test_is_connected_reflects_client():
    client = _client(connected=False)
    helper = QueueHelper(QueueService(client))
    assert helper.is_connected is False
    client.connection_status = True
    assert helper.is_connected is True
