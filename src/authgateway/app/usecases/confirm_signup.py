# src/authgateway/app/usecases/confirm_signup.py
from __future__ import annotations

from datetime import datetime, timezone

from authgateway.app.core.errors import AppError
from authgateway.app.core.logging import flow_trace
from authgateway.app.queue.helper import QueueHelper
from authgateway.app.repositories.auth import AuthRepository
from authgateway.app.schemas.auth import ConfirmSignUpRequest, ConfirmSignUpResponse
from authgateway.app.services.cognito import CognitoService


class ConfirmSignUpUseCase:
    """provider confirm -> USER_LOGIN event -> local confirmation flag"""

    def __init__(self, identity: CognitoService, repository: AuthRepository, queue: QueueHelper) -> None:
        self._identity = identity
        self._repository = repository
        self._queue = queue

    async def execute(self, request: ConfirmSignUpRequest) -> ConfirmSignUpResponse:
        confirmed = await self._identity.confirm_sign_up(request)
        if not confirmed:
            raise AppError("Failed to confirm user", 500)
        flow_trace("confirm_signup.provider_ok", username=request.username)

        now = datetime.now(timezone.utc)
        await self._queue.send_user_login_message({
            "username": request.username,
            "createdAt": now,
            "updatedAt": now,
        })

        await self._repository.update_user_confirmation_status(request.username, True)
        flow_trace("confirm_signup.persisted", username=request.username)

        return ConfirmSignUpResponse(success=True, message="User confirmed successfully")
