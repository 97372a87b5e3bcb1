"""
Account Request/Response Models
Registration, sign-in flows, profiles and admin user management
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional, List, Literal
from datetime import datetime
from uuid import UUID


class RegisterRequest(BaseModel):
    """Student self-registration"""
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    confirm_password: str
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    university_id: str = Field(..., min_length=1, max_length=20, description="Student/staff number")
    phone_number: Optional[str] = Field(None, max_length=30)
    department: Optional[str] = Field(None, max_length=100)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "sara@university.edu",
                "password": "Secret123",
                "confirm_password": "Secret123",
                "first_name": "Sara",
                "last_name": "Ali",
                "university_id": "20231234",
                "department": "Computer Science"
            }
        }
    )


class LoginRequest(BaseModel):
    login: str = Field(..., min_length=1, description="Email address or university ID")
    password: str


class LoginResponse(BaseModel):
    """
    Outcome of a sign-in step

    status is one of success, email_verification_required, two_factor_required.
    Pending steps carry a verification_token to pass back with the code.
    """
    status: str
    message: str
    access_token: Optional[str] = None
    verification_token: Optional[str] = None
    token_type: str = "bearer"
    user_type: Optional[str] = None
    user_id: Optional[str] = None


class CodeVerificationRequest(BaseModel):
    verification_token: str
    code: str = Field(..., min_length=1, max_length=12)


class ResendCodeRequest(BaseModel):
    verification_token: str


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    verification_token: str
    code: str
    new_password: str
    confirm_password: str


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str
    confirm_password: str


class PasswordChangeCodeRequest(BaseModel):
    code: str


class MessageResponse(BaseModel):
    message: str
    verification_token: Optional[str] = None


class UpdateProfileRequest(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    phone_number: Optional[str] = Field(None, max_length=30)
    department: Optional[str] = Field(None, max_length=100)


class UserResponse(BaseModel):
    """Account details (never includes the password hash)"""
    id: UUID
    email: str
    first_name: str
    last_name: str
    full_name: str
    university_id: str
    phone_number: Optional[str] = None
    department: Optional[str] = None
    user_type: str
    total_volunteer_hours: int = 0
    email_confirmed: bool
    two_factor_enabled: bool
    is_active: bool
    last_login: Optional[datetime] = None
    join_date: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserStatisticsResponse(UserResponse):
    registration_count: int
    attended_count: int
    certificate_count: int
    club_count: int


class UserListResponse(BaseModel):
    total: int
    skip: int
    limit: int
    users: List[UserResponse]


class AdminCreateUserRequest(BaseModel):
    """Admin-created account; a password is generated when omitted"""
    email: EmailStr
    password: Optional[str] = Field(None, min_length=8, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    university_id: str = Field(..., min_length=1, max_length=20)
    user_type: Literal["Student", "Admin"] = "Student"
    phone_number: Optional[str] = None
    department: Optional[str] = None


class AdminCreateUserResponse(UserResponse):
    generated_password: Optional[str] = None


class AdminUpdateUserRequest(BaseModel):
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    university_id: Optional[str] = Field(None, min_length=1, max_length=20)
    phone_number: Optional[str] = None
    department: Optional[str] = None
    user_type: Optional[Literal["Student", "Admin"]] = None
    is_active: Optional[bool] = None
    email_confirmed: Optional[bool] = None


class ChangeRoleRequest(BaseModel):
    role: Literal["Student", "Admin"]
