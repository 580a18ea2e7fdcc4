"""User DTOs for API layer"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ...domain.entities.user import User
from ...domain.enums import UserType, OtpPurpose


PASSWORD_MIN_LENGTH = 8


class RegisterUserDto(BaseModel):
    """DTO for user registration"""
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)
    full_name: str = Field(min_length=1)
    user_type: Optional[UserType] = None


class LoginUserDto(BaseModel):
    """DTO for user login"""
    email: EmailStr
    password: str = Field(min_length=1)


class VerifyOtpDto(BaseModel):
    """DTO for OTP verification"""
    email: EmailStr
    otp_code: str = Field(min_length=1)
    type: OtpPurpose = OtpPurpose.EMAIL_VERIFICATION


class ResendOtpDto(BaseModel):
    """DTO for OTP resend"""
    email: EmailStr
    type: OtpPurpose = OtpPurpose.EMAIL_VERIFICATION


class ForgotPasswordDto(BaseModel):
    """DTO for forgot password request"""
    email: EmailStr


class ResetPasswordDto(BaseModel):
    """DTO for reset password request"""
    email: EmailStr
    otp_code: str = Field(min_length=1)
    new_password: str = Field(min_length=PASSWORD_MIN_LENGTH)


class GoogleOAuthDto(BaseModel):
    """Verified Google profile claims"""
    email: EmailStr
    full_name: str = Field(min_length=1)
    profile_photo: Optional[str] = None
    google_id: str = Field(min_length=1)


class GoogleIdTokenDto(BaseModel):
    """DTO for Google ID token sign-in"""
    google_token: str


class RefreshTokenDto(BaseModel):
    """DTO for refresh token request"""
    refresh_token: str = Field(min_length=1)


class MessageResponse(BaseModel):
    message: str
    success: bool = True


class UserDto(BaseModel):
    """DTO for user response"""
    id: UUID
    email: str
    full_name: str
    user_type: UserType
    profile_photo: Optional[str] = None
    is_verified: bool
    login_type: str
    created_at: datetime
    last_login: Optional[datetime] = None

    @classmethod
    def from_entity(cls, user: User) -> 'UserDto':
        return cls(
            id=user.id.value,
            email=str(user.email),
            full_name=user.full_name,
            user_type=user.user_type,
            profile_photo=user.profile_photo,
            is_verified=user.is_verified,
            login_type=user.login_type.value,
            created_at=user.created_at,
            last_login=user.last_login
        )


class SessionUserDto(BaseModel):
    """Minimal identity handed to a trusted session layer after OTP verification"""
    id: UUID
    email: str
    name: str
    role: UserType
    login_method: str
    image: Optional[str] = None

    @classmethod
    def from_entity(cls, user: User) -> 'SessionUserDto':
        return cls(
            id=user.id.value,
            email=str(user.email),
            name=user.full_name,
            role=user.user_type,
            login_method=user.login_type.value,
            image=user.profile_photo
        )


class RegisterResponse(BaseModel):
    message: str = "Registration successful. Please verify your email."
    user: UserDto
    requires_verification: bool = True


class AuthResponse(BaseModel):
    """User plus a fresh token pair"""
    user: UserDto
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class PendingVerificationResponse(BaseModel):
    """Login answer for an unverified account"""
    model_config = ConfigDict(extra="forbid")

    user: UserDto
    requires_verification: bool = True
    verification_token: Optional[str] = None


class VerifyOtpResponse(BaseModel):
    success: bool = True
    user: SessionUserDto
