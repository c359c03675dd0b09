# src/authgateway/app/usecases/confirm_forgot_password.py
from __future__ import annotations

import logging

from authgateway.app.queue.helper import QueueHelper
from authgateway.app.repositories.auth import AuthRepository
from authgateway.app.schemas.auth import (
    ConfirmForgotPasswordRequest,
    ConfirmForgotPasswordResponse,
)
from authgateway.app.services.cognito import CognitoService

_log = logging.getLogger("authgateway.usecases")


class ConfirmForgotPasswordUseCase:
    def __init__(self, identity: CognitoService, repository: AuthRepository, queue: QueueHelper) -> None:
        self._identity = identity
        self._repository = repository
        self._queue = queue

    async def execute(self, request: ConfirmForgotPasswordRequest) -> ConfirmForgotPasswordResponse:
        await self._identity.confirm_forgot_password(request)
        _log.info("password reset confirmed for %s", request.username)

        return ConfirmForgotPasswordResponse(
            success=True,
            message="Password has been reset successfully. You can now login with your new password.",
        )
