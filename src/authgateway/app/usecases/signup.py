# src/authgateway/app/usecases/signup.py
from __future__ import annotations

import logging
from datetime import datetime, timezone

from authgateway.app.core.logging import flow_trace
from authgateway.app.queue.helper import QueueHelper
from authgateway.app.repositories.auth import AuthRepository
from authgateway.app.schemas.auth import SignUpRequest, SignUpResponse
from authgateway.app.services.cognito import CognitoService

_log = logging.getLogger("authgateway.usecases")

SIGNUP_MESSAGE = "User registered successfully. Please check your email for confirmation code."


class SignUpUseCase:
    """provider sign-up -> local user (unconfirmed) -> USER_SIGNUP event"""

    def __init__(self, identity: CognitoService, repository: AuthRepository, queue: QueueHelper) -> None:
        self._identity = identity
        self._repository = repository
        self._queue = queue

    async def execute(self, request: SignUpRequest) -> SignUpResponse:
        response = await self._identity.sign_up(request)
        cognito_sub = response.get("UserSub") or ""
        flow_trace("signup.provider_ok", username=request.username, sub=cognito_sub)

        phone_number = request.phone_number or None
        now = datetime.now(timezone.utc)

        # The provider already holds the user at this point; a failed local
        # write leaves the two stores out of step and is only logged.
        try:
            await self._repository.create({
                "username": request.username,
                "email": str(request.email),
                "phone_number": phone_number,
                "name": request.name,
                "cognito_sub": cognito_sub,
                "user_confirmed": False,
                "created_at": now,
                "updated_at": now,
            })
        except Exception:
            _log.error(
                "local user write failed after provider sign-up username=%s sub=%s",
                request.username,
                cognito_sub,
            )
            raise
        flow_trace("signup.persisted", username=request.username)

        await self._queue.send_user_signup_message({
            "username": request.username,
            "email": str(request.email),
            "phoneNumber": phone_number,
            "name": request.name,
            "cognitoSub": cognito_sub,
            "userConfirmed": False,
            "createdAt": now,
            "updatedAt": now,
        })
        flow_trace("signup.published", username=request.username)

        return SignUpResponse(
            cognito_sub=cognito_sub,
            username=request.username,
            user_confirmed=bool(response.get("UserConfirmed", False)),
            message=SIGNUP_MESSAGE,
        )
