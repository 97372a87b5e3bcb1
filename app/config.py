"""
Application Configuration
Loads settings from environment variables
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    """Application settings loaded from .env file"""

    # Application
    APP_ENV: str = "development"
    APP_NAME: str = "UniEvents"
    APP_URL: str = "http://localhost:8000"
    SECRET_KEY: str = "temp-secret-key-change-later"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    UNIVERSITY_NAME: str = "University"
    CORS_ORIGINS: str = "*"

    # Database
    DATABASE_URL: str = "sqlite:///./unievents.db"

    # JWT
    JWT_SECRET_KEY: str = "temp-jwt-secret-change-later"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_HOURS: int = 24
    VERIFICATION_TOKEN_MINUTES: int = 15  # email verify / 2FA / reset steps

    # Verification codes
    OTP_LENGTH: int = 6
    OTP_EXPIRY_MINUTES: int = 10

    # Attendance window
    EVENT_DURATION_MINUTES: int = 60
    ATTENDANCE_GRACE_MINUTES: int = 30

    # Email
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    EMAIL_FROM: str = "noreply@unievents.local"

    # File Upload
    MAX_UPLOAD_SIZE: int = 5242880  # 5MB
    ALLOWED_IMAGE_TYPES: str = "image/jpeg,image/png,image/jpg,image/gif,image/webp"
    UPLOAD_DIR: str = "uploads"

    # Storage (Supabase), local UPLOAD_DIR is used when unset
    SUPABASE_URL: Optional[str] = None
    SUPABASE_KEY: Optional[str] = None
    STORAGE_BUCKET: str = "unievents"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    @property
    def allowed_image_types(self) -> List[str]:
        return [t.strip() for t in self.ALLOWED_IMAGE_TYPES.split(",") if t.strip()]

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


# Create global settings instance
settings = Settings()
