# src/authgateway/app/usecases/login.py
from __future__ import annotations

import logging
from datetime import datetime, timezone

from authgateway.app.core.errors import AppError
from authgateway.app.core.logging import flow_trace
from authgateway.app.queue.helper import QueueHelper
from authgateway.app.repositories.auth import AuthRepository
from authgateway.app.schemas.auth import SignInRequest, SignInResponse
from authgateway.app.services.cognito import CognitoService

_log = logging.getLogger("authgateway.usecases")


class LoginUseCase:
    """provider sign-in -> USER_LOGIN event -> tokens"""

    def __init__(self, identity: CognitoService, repository: AuthRepository, queue: QueueHelper) -> None:
        self._identity = identity
        self._repository = repository
        self._queue = queue

    async def execute(self, request: SignInRequest) -> SignInResponse:
        response = await self._identity.sign_in(request)
        flow_trace("login.provider_ok", username=request.username)

        now = datetime.now(timezone.utc)
        await self._queue.send_user_login_message({
            "username": request.username,
            "createdAt": now,
            "updatedAt": now,
        })
        flow_trace("login.published", username=request.username)

        result = response.get("AuthenticationResult")
        if not result:
            raise AppError("AuthenticationResult is undefined.")

        _log.info("user signed in: %s", request.username)
        return SignInResponse(
            access_token=result["AccessToken"],
            id_token=result["IdToken"],
            refresh_token=result["RefreshToken"],
        )
