"""
Account Service
Registration, sign-in and the code-verified account flows
"""

import logging
from uuid import uuid4

from fastapi import HTTPException, status

from app.auth import (
    hash_password,
    verify_password,
    validate_new_password,
    create_access_token,
    create_verification_token,
    decode_verification_token,
)
from app.config import settings
from app.services.cache_service import cache
from app.services.email_service import email_service
from app.services.otp_service import otp_service, OtpPurpose
from app.services.user_service import user_service

logger = logging.getLogger(__name__)

# Verification token purposes
EMAIL_VERIFY = "email_verify"
TWO_FACTOR = "two_factor"
PASSWORD_RESET = "password_reset"

PENDING_PASSWORD_KEY = "PENDING_PASSWORD_{user_id}"

FORGOT_PASSWORD_MESSAGE = "If an account exists for this email, a reset code has been sent"


def _access_response(user: dict) -> dict:
    token = create_access_token({
        "email": user["email"],
        "user_type": user["user_type"],
        "user_id": str(user["id"])
    })
    return {
        "status": "success",
        "message": "Login successful",
        "access_token": token,
        "user_type": user["user_type"],
        "user_id": str(user["id"])
    }


class AccountService:
    """Multi-step account flows backed by emailed one-time codes"""

    @staticmethod
    async def _send_code(user: dict, purpose: OtpPurpose, email_purpose: str) -> None:
        code = otp_service.generate(str(user["id"]), purpose)
        await email_service.send_code_email(user["email"], user["first_name"], code, email_purpose)

    @staticmethod
    async def register(data) -> dict:
        """Create a student account and email the confirmation code"""
        validate_new_password(data.password, data.confirm_password)

        user = await user_service.create_user(
            email=data.email,
            password=data.password,
            first_name=data.first_name,
            last_name=data.last_name,
            university_id=data.university_id,
            phone_number=data.phone_number,
            department=data.department,
            user_type="Student",
            email_confirmed=False
        )

        await AccountService._send_code(user, OtpPurpose.EMAIL_VERIFY, EMAIL_VERIFY)

        return {
            "message": "Account created. Check your email for the verification code.",
            "verification_token": create_verification_token(user["id"], EMAIL_VERIFY)
        }

    @staticmethod
    async def login(login: str, password: str) -> dict:
        """
        Sign in by email or university ID

        Returns a success response with an access token, or a pending step
        (email verification, two-factor) with a verification token.
        """
        user = await user_service.find_by_login(login)

        if not user:
            logger.warning("Login failed: unknown account")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid login or password"
            )

        if not user["is_active"]:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Account is deactivated. Contact an administrator."
            )

        if not verify_password(password, user["password_hash"]):
            logger.warning(f"Login failed: wrong password for user {user['id']}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid login or password"
            )

        if not user["email_confirmed"]:
            await AccountService._send_code(user, OtpPurpose.EMAIL_VERIFY, EMAIL_VERIFY)
            return {
                "status": "email_verification_required",
                "message": "Email not confirmed. A new verification code has been sent.",
                "verification_token": create_verification_token(user["id"], EMAIL_VERIFY)
            }

        if user["two_factor_enabled"]:
            await AccountService._send_code(user, OtpPurpose.TWO_FACTOR, TWO_FACTOR)
            return {
                "status": "two_factor_required",
                "message": "A sign-in code has been sent to your email.",
                "verification_token": create_verification_token(user["id"], TWO_FACTOR)
            }

        await user_service.touch_last_login(user["id"])
        return _access_response(user)

    @staticmethod
    async def verify_email(token: str, code: str) -> dict:
        user_id = decode_verification_token(token, EMAIL_VERIFY)

        if not otp_service.verify(user_id, OtpPurpose.EMAIL_VERIFY, code):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid or expired verification code"
            )

        await user_service.set_flag(user_id, "email_confirmed", True)
        user = await user_service.get_user_row(user_id)
        await user_service.touch_last_login(user_id)
        logger.info(f"Email confirmed for user {user_id}")

        response = _access_response(user)
        response["message"] = "Email confirmed"
        return response

    @staticmethod
    async def resend_email_code(token: str) -> dict:
        user_id = decode_verification_token(token, EMAIL_VERIFY)
        user = await user_service.get_user_row(user_id)

        if user["email_confirmed"]:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email is already confirmed"
            )

        await AccountService._send_code(user, OtpPurpose.EMAIL_VERIFY, EMAIL_VERIFY)
        return {"message": "A new verification code has been sent"}

    @staticmethod
    async def verify_two_factor(token: str, code: str) -> dict:
        user_id = decode_verification_token(token, TWO_FACTOR)

        if not otp_service.verify(user_id, OtpPurpose.TWO_FACTOR, code):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid or expired sign-in code"
            )

        user = await user_service.get_user_row(user_id)
        if not user["is_active"]:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Account is deactivated. Contact an administrator."
            )

        await user_service.touch_last_login(user_id)
        return _access_response(user)

    @staticmethod
    async def resend_two_factor_code(token: str) -> dict:
        user_id = decode_verification_token(token, TWO_FACTOR)
        user = await user_service.get_user_row(user_id)
        await AccountService._send_code(user, OtpPurpose.TWO_FACTOR, TWO_FACTOR)
        return {"message": "A new sign-in code has been sent"}

    @staticmethod
    async def set_two_factor(user_id: str, enabled: bool) -> dict:
        user = await user_service.get_user_row(user_id)

        if enabled and not user["email_confirmed"]:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Confirm your email before enabling two-factor authentication"
            )

        await user_service.set_flag(user_id, "two_factor_enabled", enabled)
        if not enabled:
            otp_service.discard(user_id, OtpPurpose.TWO_FACTOR)

        state = "enabled" if enabled else "disabled"
        logger.info(f"Two-factor authentication {state} for user {user_id}")
        return {"message": f"Two-factor authentication {state}"}

    @staticmethod
    async def request_password_change(user_id: str, current_password: str, new_password: str, confirm_password: str) -> dict:
        """Hold the new password until the emailed code confirms it"""
        validate_new_password(new_password, confirm_password)

        user = await user_service.get_user_row(user_id)
        if not verify_password(current_password, user["password_hash"]):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Current password is incorrect"
            )

        cache.set(
            PENDING_PASSWORD_KEY.format(user_id=user_id),
            hash_password(new_password),
            ttl=settings.OTP_EXPIRY_MINUTES * 60
        )
        await AccountService._send_code(user, OtpPurpose.PASSWORD_CHANGE, "password_change")
        return {"message": "A confirmation code has been sent to your email"}

    @staticmethod
    async def confirm_password_change(user_id: str, code: str) -> dict:
        key = PENDING_PASSWORD_KEY.format(user_id=user_id)
        pending_hash = cache.get(key)

        if not pending_hash:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No password change is pending or it has expired"
            )

        if not otp_service.verify(user_id, OtpPurpose.PASSWORD_CHANGE, code):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid or expired confirmation code"
            )

        await user_service.set_password_hash(user_id, pending_hash)
        cache.delete(key)
        logger.info(f"Password changed for user {user_id}")
        return {"message": "Password changed successfully"}

    @staticmethod
    async def resend_password_change_code(user_id: str) -> dict:
        if not cache.get(PENDING_PASSWORD_KEY.format(user_id=user_id)):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No password change is pending or it has expired"
            )

        user = await user_service.get_user_row(user_id)
        await AccountService._send_code(user, OtpPurpose.PASSWORD_CHANGE, "password_change")
        return {"message": "A new confirmation code has been sent"}

    @staticmethod
    async def forgot_password(email: str) -> dict:
        """Same response whether or not the account exists"""
        user = await user_service.find_by_email(email)

        if not user or not user["is_active"]:
            # Token for an account that does not exist; no code will ever match it
            logger.info("Password reset requested for unknown or inactive account")
            subject_id = str(uuid4())
        else:
            subject_id = str(user["id"])
            await AccountService._send_code(user, OtpPurpose.PASSWORD_RESET, PASSWORD_RESET)

        return {
            "message": FORGOT_PASSWORD_MESSAGE,
            "verification_token": create_verification_token(subject_id, PASSWORD_RESET)
        }

    @staticmethod
    async def reset_password(token: str, code: str, new_password: str, confirm_password: str) -> dict:
        user_id = decode_verification_token(token, PASSWORD_RESET)
        validate_new_password(new_password, confirm_password)

        if not otp_service.verify(user_id, OtpPurpose.PASSWORD_RESET, code):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid or expired reset code"
            )

        await user_service.set_password(user_id, new_password)
        logger.info(f"Password reset for user {user_id}")
        return {"message": "Password has been reset. You can now sign in."}


account_service = AccountService()
