"""Login user use case"""

from typing import Optional, Union

from ...core.security import PasswordHasher, TokenService
from ...domain.enums import OtpPurpose
from ...domain.exceptions import InvalidCredentials, WrongMethod
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.notification_gateway import INotificationGateway
from ...domain.value_objects.email import Email
from ..dtos.user_dtos import LoginUserDto, AuthResponse, PendingVerificationResponse, UserDto
from .common import ClientInfo, OtpGenerator, issue_otp, open_session


class LoginUserUseCase:

    def __init__(
        self,
        unit_of_work: IUnitOfWork,
        notification_gateway: INotificationGateway,
        password_hasher: PasswordHasher,
        token_service: TokenService,
        otp_generator: OtpGenerator,
        otp_expire_minutes: int = 15,
        return_otp_on_unverified: bool = True
    ):
        self.unit_of_work = unit_of_work
        self.notification_gateway = notification_gateway
        self.password_hasher = password_hasher
        self.token_service = token_service
        self.otp_generator = otp_generator
        self.otp_expire_minutes = otp_expire_minutes
        self.return_otp_on_unverified = return_otp_on_unverified

    async def execute(
        self,
        request: LoginUserDto,
        client: Optional[ClientInfo] = None
    ) -> Union[AuthResponse, PendingVerificationResponse]:
        async with self.unit_of_work:
            user = await self.unit_of_work.users.get_by_email(Email(request.email))
            if not user:
                raise InvalidCredentials()

            # Steer Google accounts to the right flow instead of a generic failure
            if user.is_google_account:
                raise WrongMethod()

            if not user.password_hash:
                raise InvalidCredentials("No password is set for this account. Please reset your password.")

            if not self.password_hasher.verify(request.password, user.password_hash):
                raise InvalidCredentials()

            if user.is_verified:
                response = await open_session(self.unit_of_work, self.token_service, user, client)
                await self.unit_of_work.commit()
                return response

            otp = await issue_otp(
                self.unit_of_work, user, OtpPurpose.EMAIL_VERIFICATION,
                self.otp_generator, self.otp_expire_minutes
            )
            await self.unit_of_work.commit()

        await self.notification_gateway.send_otp(
            to_email=str(user.email),
            recipient_name=user.full_name,
            otp_code=otp.code,
            purpose=OtpPurpose.EMAIL_VERIFICATION
        )

        return PendingVerificationResponse(
            user=UserDto.from_entity(user),
            verification_token=otp.code if self.return_otp_on_unverified else None
        )
