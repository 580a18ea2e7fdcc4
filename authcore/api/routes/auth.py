"""Authentication routes"""

from typing import NoReturn, TypeVar, Union

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ...api.dependencies import get_auth_engine, get_google_identity_service
from ...application.auth_engine import AuthenticationEngine
from ...application.results import Failure, Result
from ...application.use_cases.common import ClientInfo
from ...application.dtos.user_dtos import (
    RegisterUserDto, LoginUserDto, VerifyOtpDto, ResendOtpDto, ForgotPasswordDto,
    ResetPasswordDto, GoogleOAuthDto, GoogleIdTokenDto, RefreshTokenDto,
    RegisterResponse, AuthResponse, PendingVerificationResponse, VerifyOtpResponse, MessageResponse
)
from ...domain.exceptions import AuthErrorCode, DeliveryFailureReason, ErrorCategory
from ...infrastructure.external_services.google_identity_service import (
    GoogleIdentityService, GoogleTokenError
)

router = APIRouter()

T = TypeVar("T")

CATEGORY_STATUS = {
    ErrorCategory.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCategory.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCategory.INVALID: status.HTTP_400_BAD_REQUEST,
}

UNAUTHORIZED_CODES = {
    AuthErrorCode.INVALID_CREDENTIALS,
    AuthErrorCode.INVALID_TOKEN,
    AuthErrorCode.SESSION_EXPIRED,
}

DELIVERY_STATUS = {
    DeliveryFailureReason.RATE_LIMIT: status.HTTP_429_TOO_MANY_REQUESTS,
    DeliveryFailureReason.CONFIGURATION: status.HTTP_503_SERVICE_UNAVAILABLE,
    DeliveryFailureReason.SEND: status.HTTP_502_BAD_GATEWAY,
}


def status_for_failure(failure: Failure) -> int:
    error = failure.error
    if error.category == ErrorCategory.DELIVERY_FAILURE:
        return DELIVERY_STATUS.get(error.delivery_reason, status.HTTP_502_BAD_GATEWAY)
    if error.code in UNAUTHORIZED_CODES:
        return status.HTTP_401_UNAUTHORIZED
    return CATEGORY_STATUS.get(error.category, status.HTTP_400_BAD_REQUEST)


def raise_for_failure(failure: Failure) -> NoReturn:
    detail = {"code": failure.code.value, "message": failure.error.message}
    if failure.error.delivery_reason:
        detail["reason"] = failure.error.delivery_reason.value
    raise HTTPException(status_code=status_for_failure(failure), detail=detail)


def unwrap(result: Result[T]) -> T:
    if isinstance(result, Failure):
        raise_for_failure(result)
    return result.value


def client_info(request: Request) -> ClientInfo:
    return ClientInfo(
        user_agent=request.headers.get("user-agent"),
        ip_address=request.client.host if request.client else None
    )


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    user_data: RegisterUserDto,
    engine: AuthenticationEngine = Depends(get_auth_engine)
):
    """Register a new user"""
    return unwrap(await engine.register(user_data))


@router.post("/login", response_model=Union[AuthResponse, PendingVerificationResponse])
async def login_user(
    login_data: LoginUserDto,
    request: Request,
    engine: AuthenticationEngine = Depends(get_auth_engine)
):
    """Login user"""
    return unwrap(await engine.login(login_data, client_info(request)))


@router.post("/verify-otp", response_model=VerifyOtpResponse)
async def verify_otp(
    otp_data: VerifyOtpDto,
    engine: AuthenticationEngine = Depends(get_auth_engine)
):
    """Verify an OTP code"""
    return unwrap(await engine.verify_otp(otp_data))


@router.post("/resend-otp", response_model=MessageResponse)
async def resend_otp(
    otp_data: ResendOtpDto,
    engine: AuthenticationEngine = Depends(get_auth_engine)
):
    """Send a new OTP code"""
    return unwrap(await engine.resend_otp(otp_data))


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    reset_request: ForgotPasswordDto,
    engine: AuthenticationEngine = Depends(get_auth_engine)
):
    """Handle forgot password request"""
    return unwrap(await engine.request_password_reset(reset_request))


@router.post("/reset-password", response_model=AuthResponse)
async def reset_password(
    reset_data: ResetPasswordDto,
    request: Request,
    engine: AuthenticationEngine = Depends(get_auth_engine)
):
    """Reset password with an OTP code"""
    return unwrap(await engine.reset_password(reset_data, client_info(request)))


@router.post("/google", response_model=AuthResponse)
async def google_oauth(
    profile: GoogleOAuthDto,
    request: Request,
    engine: AuthenticationEngine = Depends(get_auth_engine)
):
    """Sign in with verified Google profile claims"""
    return unwrap(await engine.google_oauth(profile, client_info(request)))


@router.post("/google/token", response_model=AuthResponse)
async def google_oauth_token(
    token_data: GoogleIdTokenDto,
    request: Request,
    engine: AuthenticationEngine = Depends(get_auth_engine),
    google_identity: GoogleIdentityService = Depends(get_google_identity_service)
):
    """Google OAuth authentication with ID token"""
    try:
        profile = google_identity.verify_id_token(token_data.google_token)
    except GoogleTokenError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return unwrap(await engine.google_oauth(profile, client_info(request)))


@router.post("/refresh", response_model=AuthResponse)
async def refresh_token(
    refresh_data: RefreshTokenDto,
    engine: AuthenticationEngine = Depends(get_auth_engine)
):
    """Refresh access token"""
    return unwrap(await engine.refresh_session(refresh_data))
