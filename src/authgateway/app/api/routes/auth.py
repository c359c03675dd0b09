# src/authgateway/app/api/routes/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from authgateway.app.schemas.auth import (
    ConfirmForgotPasswordRequest,
    ConfirmForgotPasswordResponse,
    ConfirmSignUpRequest,
    ConfirmSignUpResponse,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LogoutResponse,
    ResendConfirmationCodeRequest,
    ResendConfirmationCodeResponse,
    SignInRequest,
    SignInResponse,
    SignUpRequest,
    SignUpResponse,
)
from authgateway.app.usecases.factory import UseCaseFactory

router = APIRouter(tags=["auth"])


def get_factory(request: Request) -> UseCaseFactory:
    return request.app.state.factory


# ---------- Endpoints ----------

@router.post("/login", response_model=SignInResponse)
async def login(req: SignInRequest, factory: UseCaseFactory = Depends(get_factory)) -> SignInResponse:
    """
    Password sign-in against the user pool. Returns the provider's tokens untouched.
    """
    return await factory.create_login_use_case().execute(req)


@router.post("/signup", response_model=SignUpResponse, status_code=status.HTTP_201_CREATED)
async def signup(req: SignUpRequest, factory: UseCaseFactory = Depends(get_factory)) -> SignUpResponse:
    """
    Register with the provider, mirror the user locally (unconfirmed) and
    publish USER_SIGNUP.
    """
    return await factory.create_sign_up_use_case().execute(req)


@router.post("/confirm-signup", response_model=ConfirmSignUpResponse)
async def confirm_signup(
    req: ConfirmSignUpRequest,
    factory: UseCaseFactory = Depends(get_factory),
) -> ConfirmSignUpResponse:
    return await factory.create_confirm_sign_up_use_case().execute(req)


@router.post("/resend-confirmation-code", response_model=ResendConfirmationCodeResponse)
async def resend_confirmation_code(
    req: ResendConfirmationCodeRequest,
    factory: UseCaseFactory = Depends(get_factory),
) -> ResendConfirmationCodeResponse:
    return await factory.create_resend_confirmation_code_use_case().execute(req)


@router.post("/forgot-password", response_model=ForgotPasswordResponse)
async def forgot_password(
    req: ForgotPasswordRequest,
    factory: UseCaseFactory = Depends(get_factory),
) -> ForgotPasswordResponse:
    return await factory.create_forgot_password_use_case().execute(req)


@router.post("/confirm-forgot-password", response_model=ConfirmForgotPasswordResponse)
async def confirm_forgot_password(
    req: ConfirmForgotPasswordRequest,
    factory: UseCaseFactory = Depends(get_factory),
) -> ConfirmForgotPasswordResponse:
    return await factory.create_confirm_forgot_password_use_case().execute(req)


@router.post("/logout", response_model=LogoutResponse)
async def logout() -> LogoutResponse:
    # Tokens are never stored here; the client discards its own.
    return LogoutResponse(message="User logged out successfully.")
