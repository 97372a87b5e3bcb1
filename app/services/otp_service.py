"""
One-Time Code Service
Numeric verification codes for 2FA, email confirmation and password flows
"""

import hmac
import logging
import secrets
from enum import Enum

from app.config import settings
from app.services.cache_service import cache, MemoryCache

logger = logging.getLogger(__name__)


class OtpPurpose(str, Enum):
    TWO_FACTOR = "2FA_OTP"
    EMAIL_VERIFY = "EMAIL_VERIFY"
    PASSWORD_RESET = "PASSWORD_RESET"
    PASSWORD_CHANGE = "PASSWORD_CHANGE_VERIFY"


class OtpService:
    """Issues and checks single-use codes kept in the memory cache"""

    def __init__(self, store: MemoryCache, length: int, expiry_minutes: int):
        self.store = store
        self.length = length
        self.expiry_seconds = expiry_minutes * 60

    @staticmethod
    def _key(user_id: str, purpose: OtpPurpose) -> str:
        return f"{purpose.value}_{user_id}"

    def generate(self, user_id: str, purpose: OtpPurpose) -> str:
        """Create a code for the user, replacing any earlier one for the same purpose"""
        code = "".join(secrets.choice("0123456789") for _ in range(self.length))
        self.store.set(self._key(user_id, purpose), code, ttl=self.expiry_seconds)
        logger.info(f"Generated {purpose.name} code for user {user_id}")
        return code

    def verify(self, user_id: str, purpose: OtpPurpose, code: str) -> bool:
        """Check a submitted code; a matching code is consumed"""
        code = (code or "").strip()
        if not code or len(code) != self.length:
            return False

        key = self._key(user_id, purpose)
        stored = self.store.get(key)
        if not stored:
            logger.warning(f"{purpose.name} verification failed: no code for user {user_id}")
            return False

        if not hmac.compare_digest(stored.encode(), code.encode()):
            logger.warning(f"{purpose.name} verification failed: invalid code for user {user_id}")
            return False

        self.store.delete(key)
        logger.info(f"{purpose.name} code verified for user {user_id}")
        return True

    def discard(self, user_id: str, purpose: OtpPurpose) -> None:
        self.store.delete(self._key(user_id, purpose))


otp_service = OtpService(cache, settings.OTP_LENGTH, settings.OTP_EXPIRY_MINUTES)
