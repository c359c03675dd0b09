# src/authgateway/app/queue/helper.py

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from authgateway.app.core.errors import QueueUnavailableError
from authgateway.app.queue.service import QueueMessage, QueueService

_log = logging.getLogger("authgateway.queue")


class QueueHelper:
    """
    Publish facade used by the use cases: connects on demand before sending.

    Connecting is single-flight: while one attempt is running, every other
    caller awaits that same attempt (and sees its failure) instead of
    opening its own.
    """

    def __init__(self, service: QueueService) -> None:
        self._service = service
        self._pending: Optional[asyncio.Task[None]] = None

    @property
    def service(self) -> QueueService:
        return self._service

    @property
    def is_connected(self) -> bool:
        return self._service.connection_status

    async def ensure_initialized(self) -> None:
        if self._service.connection_status:
            return

        if self._pending is None:
            _log.info("queue service not connected, attempting to initialize")
            task = asyncio.ensure_future(self._initialize())
            task.add_done_callback(self._clear_pending)
            self._pending = task

        await asyncio.shield(self._pending)

    def _clear_pending(self, task: "asyncio.Task[None]") -> None:
        if self._pending is task:
            self._pending = None

    async def _initialize(self) -> None:
        try:
            await self._service.initialize()
        except Exception as exc:
            _log.error("failed to initialize queue service: %s", exc)
            raise QueueUnavailableError() from exc

    async def send_user_signup_message(self, payload: Any) -> QueueMessage:
        try:
            await self.ensure_initialized()
            return await self._service.send_user_signup_message(payload)
        except Exception:
            _log.error("failed to send user signup message")
            raise

    async def send_user_login_message(self, payload: Any) -> QueueMessage:
        try:
            await self.ensure_initialized()
            return await self._service.send_user_login_message(payload)
        except Exception:
            _log.error("failed to send user login message")
            raise

    async def disconnect(self) -> None:
        await self._service.disconnect()


__all__ = ["QueueHelper"]
