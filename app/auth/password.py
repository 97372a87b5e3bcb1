"""
Password Hashing and Verification
bcrypt storage plus the account password rules
"""

from passlib.context import CryptContext
from fastapi import HTTPException, status
import secrets
import string

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

MIN_PASSWORD_LENGTH = 8


def hash_password(password: str) -> str:
    """Hash a plain password"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against a stored hash

    Returns:
        True if password matches, False otherwise (including malformed hashes)
    """
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def validate_new_password(new_password: str, confirm_password: str) -> None:
    """
    Check a new password against the confirmation and the length rule

    Raises:
        HTTPException: 400 when the passwords differ or are too short
    """
    if new_password != confirm_password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="New password and confirmation do not match"
        )

    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )


def generate_random_password(length: int = 12) -> str:
    """Random password for admin-created accounts (letters and digits, at least one digit)"""
    characters = string.ascii_letters + string.digits
    while True:
        password = ''.join(secrets.choice(characters) for _ in range(length))
        if any(c.isdigit() for c in password):
            return password
