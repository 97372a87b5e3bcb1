"""
Authentication Routes
Registration, sign-in, verification codes and account settings
"""

from fastapi import APIRouter, Depends, status

from app.auth import get_current_user
from app.schemas.user import (
    RegisterRequest,
    LoginRequest,
    LoginResponse,
    CodeVerificationRequest,
    ResendCodeRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    ChangePasswordRequest,
    PasswordChangeCodeRequest,
    MessageResponse,
    UpdateProfileRequest,
    UserResponse,
    UserStatisticsResponse,
)
from app.services.account_service import account_service
from app.services.user_service import user_service

router = APIRouter()


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def register(data: RegisterRequest):
    """
    Create a student account

    The account starts unconfirmed. A verification code is emailed and the
    returned verification_token must be sent back with it to /verify-email.
    """
    return await account_service.register(data)


@router.post("/login", response_model=LoginResponse)
async def login(credentials: LoginRequest):
    """
    Sign in with email or university ID

    Process:
    1. Look up the account and check it is active
    2. Verify password
    3. Unconfirmed email -> email_verification_required
    4. Two-factor enabled -> two_factor_required
    5. Otherwise issue the access token
    """
    return await account_service.login(credentials.login, credentials.password)


@router.post("/verify-email", response_model=LoginResponse)
async def verify_email(data: CodeVerificationRequest):
    """Confirm the email address and sign in"""
    return await account_service.verify_email(data.verification_token, data.code)


@router.post("/resend-email-code", response_model=MessageResponse)
async def resend_email_code(data: ResendCodeRequest):
    return await account_service.resend_email_code(data.verification_token)


@router.post("/verify-2fa", response_model=LoginResponse)
async def verify_two_factor(data: CodeVerificationRequest):
    """Complete a two-factor sign-in"""
    return await account_service.verify_two_factor(data.verification_token, data.code)


@router.post("/resend-2fa", response_model=MessageResponse)
async def resend_two_factor_code(data: ResendCodeRequest):
    return await account_service.resend_two_factor_code(data.verification_token)


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(data: ForgotPasswordRequest):
    """
    Start a password reset

    The response is the same whether or not the email belongs to an account.
    """
    return await account_service.forgot_password(data.email)


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(data: ResetPasswordRequest):
    return await account_service.reset_password(
        data.verification_token,
        data.code,
        data.new_password,
        data.confirm_password
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(current_user: dict = Depends(get_current_user)):
    """
    Logout endpoint

    Tokens are stateless; the client discards its access token.
    """
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserStatisticsResponse)
async def get_me(current_user: dict = Depends(get_current_user)):
    """Current account with activity counts"""
    return await user_service.get_user_statistics(current_user["user_id"])


@router.put("/me", response_model=UserResponse)
async def update_me(
    data: UpdateProfileRequest,
    current_user: dict = Depends(get_current_user)
):
    return await user_service.update_profile(
        current_user["user_id"],
        data.model_dump(exclude_unset=True, exclude_none=True)
    )


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    data: ChangePasswordRequest,
    current_user: dict = Depends(get_current_user)
):
    """
    Request a password change

    The new password only takes effect after the emailed code is confirmed
    at /change-password/verify.
    """
    return await account_service.request_password_change(
        current_user["user_id"],
        data.current_password,
        data.new_password,
        data.confirm_password
    )


@router.post("/change-password/verify", response_model=MessageResponse)
async def confirm_password_change(
    data: PasswordChangeCodeRequest,
    current_user: dict = Depends(get_current_user)
):
    return await account_service.confirm_password_change(current_user["user_id"], data.code)


@router.post("/change-password/resend", response_model=MessageResponse)
async def resend_password_change_code(current_user: dict = Depends(get_current_user)):
    return await account_service.resend_password_change_code(current_user["user_id"])


@router.post("/2fa/enable", response_model=MessageResponse)
async def enable_two_factor(current_user: dict = Depends(get_current_user)):
    return await account_service.set_two_factor(current_user["user_id"], True)


@router.post("/2fa/disable", response_model=MessageResponse)
async def disable_two_factor(current_user: dict = Depends(get_current_user)):
    return await account_service.set_two_factor(current_user["user_id"], False)
