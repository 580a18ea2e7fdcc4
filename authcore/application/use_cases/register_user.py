"""Register user use case"""

import logging

from ...domain.entities.user import User
from ...domain.enums import OtpPurpose, UserType
from ...domain.exceptions import EmailAlreadyRegistered
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.notification_gateway import INotificationGateway
from ...domain.value_objects.email import Email
from ...core.security import PasswordHasher
from ..dtos.user_dtos import RegisterUserDto, RegisterResponse, UserDto
from .common import OtpGenerator, issue_otp


logger = logging.getLogger(__name__)


class RegisterUserUseCase:

    def __init__(
        self,
        unit_of_work: IUnitOfWork,
        notification_gateway: INotificationGateway,
        password_hasher: PasswordHasher,
        otp_generator: OtpGenerator,
        otp_expire_minutes: int = 15
    ):
        self.unit_of_work = unit_of_work
        self.notification_gateway = notification_gateway
        self.password_hasher = password_hasher
        self.otp_generator = otp_generator
        self.otp_expire_minutes = otp_expire_minutes

    async def execute(self, request: RegisterUserDto) -> RegisterResponse:
        async with self.unit_of_work:
            email = Email(request.email)

            existing_user = await self.unit_of_work.users.get_by_email(email)
            if existing_user:
                if existing_user.is_google_account:
                    raise EmailAlreadyRegistered(
                        "Email is already registered with Google. Please sign in with Google."
                    )
                raise EmailAlreadyRegistered()

            user = User.register(
                email=email,
                password_hash=self.password_hasher.hash(request.password),
                full_name=request.full_name,
                user_type=request.user_type or UserType.MEMBER
            )
            user = await self.unit_of_work.users.add(user)

            otp = await issue_otp(
                self.unit_of_work, user, OtpPurpose.EMAIL_VERIFICATION,
                self.otp_generator, self.otp_expire_minutes
            )
            await self.unit_of_work.commit()

        logger.info("Registered user %s, awaiting email verification", user.id)

        # Stored before sending: a delivery failure leaves a valid code behind
        await self.notification_gateway.send_otp(
            to_email=str(user.email),
            recipient_name=user.full_name,
            otp_code=otp.code,
            purpose=OtpPurpose.EMAIL_VERIFICATION
        )

        return RegisterResponse(user=UserDto.from_entity(user))
