"""
Authentication Module
Password hashing and JWT token management
"""

from app.auth.password import hash_password, verify_password, validate_new_password, generate_random_password
from app.auth.dependencies import (
    create_access_token,
    decode_access_token,
    create_verification_token,
    decode_verification_token,
    get_current_user,
    get_optional_user,
    get_admin_user,
    is_admin
)

__all__ = [
    "hash_password",
    "verify_password",
    "validate_new_password",
    "generate_random_password",
    "create_access_token",
    "decode_access_token",
    "create_verification_token",
    "decode_verification_token",
    "get_current_user",
    "get_optional_user",
    "get_admin_user",
    "is_admin",
]
