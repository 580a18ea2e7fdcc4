"""Authentication engine

Single entry point for the sign-in flows. Every operation returns a
``Success`` or a ``Failure``; callers map ``Failure.category`` and
``Failure.code`` onto their own responses.
"""

import logging
from typing import Awaitable, Callable, Optional, TypeVar, Union

from ..core.config import Settings
from ..core.security import PasswordHasher, TokenService, generate_otp_code
from ..domain.exceptions import AuthError, ErrorCategory
from ..domain.repositories.unit_of_work import IUnitOfWork
from ..domain.services.notification_gateway import INotificationGateway
from .dtos.user_dtos import (
    RegisterUserDto, LoginUserDto, VerifyOtpDto, ResendOtpDto, ForgotPasswordDto,
    ResetPasswordDto, GoogleOAuthDto, RefreshTokenDto,
    RegisterResponse, AuthResponse, PendingVerificationResponse, VerifyOtpResponse, MessageResponse
)
from .results import ErrorDetail, Failure, Result, Success
from .use_cases.common import ClientInfo, OtpGenerator
from .use_cases.forgot_password_use_case import ForgotPasswordUseCase
from .use_cases.google_oauth_use_case import GoogleOAuthUseCase
from .use_cases.login_user import LoginUserUseCase
from .use_cases.refresh_session_use_case import RefreshSessionUseCase
from .use_cases.register_user import RegisterUserUseCase
from .use_cases.resend_otp_use_case import ResendOtpUseCase
from .use_cases.reset_password_use_case import ResetPasswordUseCase
from .use_cases.verify_otp_use_case import VerifyOtpUseCase


logger = logging.getLogger(__name__)

T = TypeVar("T")


class AuthenticationEngine:

    def __init__(
        self,
        settings: Settings,
        unit_of_work_factory: Callable[[], IUnitOfWork],
        notification_gateway: INotificationGateway,
        password_hasher: Optional[PasswordHasher] = None,
        token_service: Optional[TokenService] = None,
        otp_generator: OtpGenerator = generate_otp_code
    ):
        self.settings = settings
        self.unit_of_work_factory = unit_of_work_factory
        self.notification_gateway = notification_gateway
        self.password_hasher = password_hasher or PasswordHasher(rounds=settings.PASSWORD_HASH_ROUNDS)
        self.token_service = token_service or TokenService.from_settings(settings)
        self.otp_generator = otp_generator

    async def register(self, request: RegisterUserDto) -> Result[RegisterResponse]:
        use_case = RegisterUserUseCase(
            self.unit_of_work_factory(),
            self.notification_gateway,
            self.password_hasher,
            self.otp_generator,
            self.settings.OTP_EXPIRE_MINUTES
        )
        return await self._run("register", lambda: use_case.execute(request))

    async def login(
        self,
        request: LoginUserDto,
        client: Optional[ClientInfo] = None
    ) -> Result[Union[AuthResponse, PendingVerificationResponse]]:
        use_case = LoginUserUseCase(
            self.unit_of_work_factory(),
            self.notification_gateway,
            self.password_hasher,
            self.token_service,
            self.otp_generator,
            self.settings.OTP_EXPIRE_MINUTES,
            self.settings.RETURN_OTP_ON_UNVERIFIED_LOGIN
        )
        return await self._run("login", lambda: use_case.execute(request, client))

    async def verify_otp(self, request: VerifyOtpDto) -> Result[VerifyOtpResponse]:
        use_case = VerifyOtpUseCase(self.unit_of_work_factory())
        return await self._run("verify_otp", lambda: use_case.execute(request))

    async def resend_otp(self, request: ResendOtpDto) -> Result[MessageResponse]:
        use_case = ResendOtpUseCase(
            self.unit_of_work_factory(),
            self.notification_gateway,
            self.otp_generator,
            self.settings.OTP_EXPIRE_MINUTES
        )
        return await self._run("resend_otp", lambda: use_case.execute(request))

    async def request_password_reset(self, request: ForgotPasswordDto) -> Result[MessageResponse]:
        use_case = ForgotPasswordUseCase(
            self.unit_of_work_factory(),
            self.notification_gateway,
            self.otp_generator,
            self.settings.OTP_EXPIRE_MINUTES
        )
        return await self._run("request_password_reset", lambda: use_case.execute(request))

    async def reset_password(
        self,
        request: ResetPasswordDto,
        client: Optional[ClientInfo] = None
    ) -> Result[AuthResponse]:
        use_case = ResetPasswordUseCase(
            self.unit_of_work_factory(),
            self.password_hasher,
            self.token_service
        )
        return await self._run("reset_password", lambda: use_case.execute(request, client))

    async def google_oauth(
        self,
        request: GoogleOAuthDto,
        client: Optional[ClientInfo] = None
    ) -> Result[AuthResponse]:
        use_case = GoogleOAuthUseCase(self.unit_of_work_factory(), self.token_service)
        return await self._run("google_oauth", lambda: use_case.execute(request, client))

    async def refresh_session(self, request: RefreshTokenDto) -> Result[AuthResponse]:
        use_case = RefreshSessionUseCase(self.unit_of_work_factory(), self.token_service)
        return await self._run("refresh_session", lambda: use_case.execute(request))

    async def _run(self, operation: str, call: Callable[[], Awaitable[T]]) -> Result[T]:
        try:
            return Success(await call())
        except AuthError as e:
            if e.category == ErrorCategory.DELIVERY_FAILURE:
                logger.error("%s: notification delivery failed (%s)", operation, e.reason.value)
            else:
                logger.info("%s rejected: %s", operation, e.code.value)
            return Failure(ErrorDetail.from_exception(e))
