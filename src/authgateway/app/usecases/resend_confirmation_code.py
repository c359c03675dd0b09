# src/authgateway/app/usecases/resend_confirmation_code.py
from __future__ import annotations

from authgateway.app.queue.helper import QueueHelper
from authgateway.app.repositories.auth import AuthRepository
from authgateway.app.schemas.auth import (
    ResendConfirmationCodeRequest,
    ResendConfirmationCodeResponse,
)
from authgateway.app.services.cognito import CognitoService


class ResendConfirmationCodeUseCase:
    def __init__(self, identity: CognitoService, repository: AuthRepository, queue: QueueHelper) -> None:
        self._identity = identity
        self._repository = repository
        self._queue = queue

    async def execute(self, request: ResendConfirmationCodeRequest) -> ResendConfirmationCodeResponse:
        await self._identity.resend_confirmation_code(request)

        # always reported as EMAIL, whatever medium the provider used
        return ResendConfirmationCodeResponse(
            success=True,
            message="Confirmation code resent successfully. Please check your email.",
            delivery_method="EMAIL",
        )
