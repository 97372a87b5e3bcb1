"""
Authentication Dependencies
JWT token handling and user authentication
"""

from datetime import datetime, timedelta
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from app.config import settings

# Security scheme
security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)

ACCESS_PURPOSE = "access"


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create JWT access token

    Args:
        data: Data to encode in token
        expires_delta: Token expiration time

    Returns:
        Encoded JWT token
    """
    to_encode = data.copy()
    to_encode.setdefault("purpose", ACCESS_PURPOSE)

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(hours=settings.JWT_EXPIRATION_HOURS)

    to_encode.update({"exp": expire})

    encoded_jwt = jwt.encode(
        to_encode,
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM
    )

    return encoded_jwt


def decode_access_token(token: str) -> dict:
    """
    Decode JWT access token

    Args:
        token: JWT token string

    Returns:
        Decoded token payload

    Raises:
        HTTPException: If token is invalid
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
        return payload
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


def create_verification_token(user_id: str, purpose: str) -> str:
    """Short-lived token that carries a user through one verification step"""
    return create_access_token(
        {"user_id": str(user_id), "purpose": purpose},
        expires_delta=timedelta(minutes=settings.VERIFICATION_TOKEN_MINUTES)
    )


def decode_verification_token(token: str, purpose: str) -> str:
    """
    Decode a verification token and return its user ID

    Raises:
        HTTPException: If the token is invalid, expired or meant for another step
    """
    payload = decode_access_token(token)

    if payload.get("purpose") != purpose or not payload.get("user_id"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Verification session is invalid or has expired"
        )

    return payload["user_id"]


def _user_from_payload(payload: dict) -> dict:
    user_email = payload.get("email")

    if user_email is None or payload.get("purpose") != ACCESS_PURPOSE:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials"
        )

    return {
        "email": user_email,
        "user_type": payload.get("user_type"),  # 'Student' or 'Admin'
        "user_id": payload.get("user_id")
    }


async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)) -> dict:
    """
    Get current authenticated user from JWT token

    Args:
        credentials: HTTP Authorization credentials

    Returns:
        User data from token

    Raises:
        HTTPException: If token is invalid or user not found
    """
    payload = decode_access_token(credentials.credentials)
    return _user_from_payload(payload)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security)
) -> Optional[dict]:
    """Current user when a bearer token is sent, otherwise None"""
    if credentials is None:
        return None
    payload = decode_access_token(credentials.credentials)
    return _user_from_payload(payload)


async def get_admin_user(current_user: dict = Depends(get_current_user)) -> dict:
    """
    Require administrator authentication

    Raises:
        HTTPException: If user is not an administrator
    """
    if not is_admin(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized. Admin access required."
        )

    return current_user


def is_admin(current_user: Optional[dict]) -> bool:
    return bool(current_user) and current_user.get("user_type") == "Admin"
