# src/authgateway/app/usecases/__init__.py
from .confirm_forgot_password import ConfirmForgotPasswordUseCase
from .confirm_signup import ConfirmSignUpUseCase
from .factory import UseCaseFactory
from .forgot_password import ForgotPasswordUseCase
from .login import LoginUseCase
from .resend_confirmation_code import ResendConfirmationCodeUseCase
from .signup import SignUpUseCase

__all__ = [
    "ConfirmForgotPasswordUseCase",
    "ConfirmSignUpUseCase",
    "ForgotPasswordUseCase",
    "LoginUseCase",
    "ResendConfirmationCodeUseCase",
    "SignUpUseCase",
    "UseCaseFactory",
]
