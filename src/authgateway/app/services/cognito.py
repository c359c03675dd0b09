# src/authgateway/app/services/cognito.py
"""
Cognito user pool client wrapper.

boto3 is synchronous, so every provider call is pushed to the default
executor; the event loop keeps serving other requests while it waits.
"""

from __future__ import annotations

import asyncio
import base64
import functools
import hashlib
import hmac
import logging
from typing import Any, Callable, Dict, List, Optional

import boto3
from botocore.config import Config

from authgateway.app.core.config import CognitoSettings
from authgateway.app.core.errors import AppError
from authgateway.app.schemas.auth import (
    ConfirmForgotPasswordRequest,
    ConfirmSignUpRequest,
    ForgotPasswordRequest,
    ResendConfirmationCodeRequest,
    SignInRequest,
    SignUpRequest,
)

_log = logging.getLogger("authgateway.cognito")

ProviderResponse = Dict[str, Any]


class CognitoService:
    """Calls the user pool app client; never stores credentials or tokens."""

    def __init__(self, settings: CognitoSettings, client: Any = None) -> None:
        self._settings = settings
        self._client = client or boto3.client(
            "cognito-idp",
            region_name=settings.region,
            config=Config(
                connect_timeout=settings.connect_timeout,
                read_timeout=settings.read_timeout,
                retries={"max_attempts": 1},
            ),
        )

    # -------------------------
    # Helpers
    # -------------------------
    @property
    def client_id(self) -> str:
        return self._settings.client_id

    def generate_secret_hash(self, username: str) -> str:
        """base64(HMAC-SHA256(client_secret, username + client_id))"""
        secret = self._settings.client_secret
        if not secret:
            raise RuntimeError("CLIENT_SECRET is required but not configured")

        message = (username + self._settings.client_id).encode("utf-8")
        digest = hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()
        return base64.b64encode(digest).decode("ascii")

    def _with_secret_hash(self, params: Dict[str, Any], username: str) -> Dict[str, Any]:
        if self._settings.client_secret:
            params["SecretHash"] = self.generate_secret_hash(username)
        return params

    async def _call(self, operation: str, fn: Callable[..., ProviderResponse], **params: Any) -> ProviderResponse:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, functools.partial(fn, **params))
        except Exception:
            _log.exception("cognito %s failed", operation)
            raise

    # -------------------------
    # Operations
    # -------------------------
    async def sign_in(self, request: SignInRequest) -> ProviderResponse:
        auth_params = {
            "USERNAME": request.username,
            "PASSWORD": request.password,
        }
        if self._settings.client_secret:
            auth_params["SECRET_HASH"] = self.generate_secret_hash(request.username)

        result = await self._call(
            "initiate_auth",
            self._client.initiate_auth,
            ClientId=self.client_id,
            AuthFlow="USER_PASSWORD_AUTH",
            AuthParameters=auth_params,
        )

        if result.get("AuthenticationResult"):
            return result

        # challenge instead of tokens (MFA, NEW_PASSWORD_REQUIRED, ...)
        challenge = result.get("ChallengeName")
        if challenge == "NEW_PASSWORD_REQUIRED":
            _log.info("new password required for %s", request.username)
            raise AppError("New password required", 403)
        raise AppError(f"Authentication failed: {challenge}", 401)

    async def sign_up(self, request: SignUpRequest) -> ProviderResponse:
        attributes: List[Dict[str, str]] = [
            {"Name": "email", "Value": str(request.email)},
            {"Name": "name", "Value": request.name},
        ]
        if request.phone_number:
            attributes.append({"Name": "phone_number", "Value": request.phone_number})

        params = self._with_secret_hash(
            {
                "ClientId": self.client_id,
                "Username": request.username,
                "Password": request.password,
                "UserAttributes": attributes,
            },
            request.username,
        )
        result = await self._call("sign_up", self._client.sign_up, **params)
        _log.info("user signed up: sub=%s", result.get("UserSub"))
        return result

    async def confirm_sign_up(self, request: ConfirmSignUpRequest) -> bool:
        params = self._with_secret_hash(
            {
                "ClientId": self.client_id,
                "Username": request.username,
                "ConfirmationCode": request.confirmation_code,
            },
            request.username,
        )
        await self._call("confirm_sign_up", self._client.confirm_sign_up, **params)
        _log.info("user confirmed: %s", request.username)
        return True

    async def resend_confirmation_code(self, request: ResendConfirmationCodeRequest) -> ProviderResponse:
        params = self._with_secret_hash(
            {"ClientId": self.client_id, "Username": request.username},
            request.username,
        )
        result = await self._call(
            "resend_confirmation_code", self._client.resend_confirmation_code, **params
        )
        _log.info("confirmation code resent to %s", request.username)
        return result

    async def forgot_password(self, request: ForgotPasswordRequest) -> ProviderResponse:
        params = self._with_secret_hash(
            {"ClientId": self.client_id, "Username": request.username},
            request.username,
        )
        result = await self._call("forgot_password", self._client.forgot_password, **params)
        _log.info("password reset code sent to %s", request.username)
        return result

    async def confirm_forgot_password(self, request: ConfirmForgotPasswordRequest) -> bool:
        params = self._with_secret_hash(
            {
                "ClientId": self.client_id,
                "Username": request.username,
                "ConfirmationCode": request.confirmation_code,
                "Password": request.new_password,
            },
            request.username,
        )
        await self._call(
            "confirm_forgot_password", self._client.confirm_forgot_password, **params
        )
        _log.info("password reset completed for %s", request.username)
        return True


def delivery_medium(response: Optional[ProviderResponse], default: str = "EMAIL") -> str:
    details = (response or {}).get("CodeDeliveryDetails") or {}
    return details.get("DeliveryMedium") or default


__all__ = ["CognitoService", "delivery_medium"]
