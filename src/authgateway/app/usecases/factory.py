# src/authgateway/app/usecases/factory.py
from __future__ import annotations

from authgateway.app.queue.helper import QueueHelper
from authgateway.app.repositories.auth import AuthRepository
from authgateway.app.services.cognito import CognitoService

from .confirm_forgot_password import ConfirmForgotPasswordUseCase
from .confirm_signup import ConfirmSignUpUseCase
from .forgot_password import ForgotPasswordUseCase
from .login import LoginUseCase
from .resend_confirmation_code import ResendConfirmationCodeUseCase
from .signup import SignUpUseCase


class UseCaseFactory:
    """Wires the shared collaborators into a fresh use case per request."""

    def __init__(self, identity: CognitoService, repository: AuthRepository, queue: QueueHelper) -> None:
        self.identity = identity
        self.repository = repository
        self.queue = queue

    def _deps(self):
        return self.identity, self.repository, self.queue

    def create_login_use_case(self) -> LoginUseCase:
        return LoginUseCase(*self._deps())

    def create_sign_up_use_case(self) -> SignUpUseCase:
        return SignUpUseCase(*self._deps())

    def create_confirm_sign_up_use_case(self) -> ConfirmSignUpUseCase:
        return ConfirmSignUpUseCase(*self._deps())

    def create_resend_confirmation_code_use_case(self) -> ResendConfirmationCodeUseCase:
        return ResendConfirmationCodeUseCase(*self._deps())

    def create_forgot_password_use_case(self) -> ForgotPasswordUseCase:
        return ForgotPasswordUseCase(*self._deps())

    def create_confirm_forgot_password_use_case(self) -> ConfirmForgotPasswordUseCase:
        return ConfirmForgotPasswordUseCase(*self._deps())
