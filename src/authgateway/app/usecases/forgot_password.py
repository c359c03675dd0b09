# src/authgateway/app/usecases/forgot_password.py
from __future__ import annotations

import logging

from authgateway.app.queue.helper import QueueHelper
from authgateway.app.repositories.auth import AuthRepository
from authgateway.app.schemas.auth import ForgotPasswordRequest, ForgotPasswordResponse
from authgateway.app.services.cognito import CognitoService, delivery_medium

_log = logging.getLogger("authgateway.usecases")


class ForgotPasswordUseCase:
    def __init__(self, identity: CognitoService, repository: AuthRepository, queue: QueueHelper) -> None:
        self._identity = identity
        self._repository = repository
        self._queue = queue

    async def execute(self, request: ForgotPasswordRequest) -> ForgotPasswordResponse:
        response = await self._identity.forgot_password(request)
        _log.info("password reset initiated for %s", request.username)

        return ForgotPasswordResponse(
            success=True,
            message="Password reset code sent successfully. Please check your email or phone.",
            delivery_method=delivery_medium(response),
        )
