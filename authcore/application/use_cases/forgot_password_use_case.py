"""Forgot password use case"""

from ..dtos.user_dtos import ForgotPasswordDto, MessageResponse
from ...domain.enums import OtpPurpose
from ...domain.exceptions import GoogleAccountOnly
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.notification_gateway import INotificationGateway
from ...domain.value_objects.email import Email
from .common import OtpGenerator, issue_otp


RESET_REQUESTED_MESSAGE = "If an account with that email exists, a password reset code has been sent."


class ForgotPasswordUseCase:
    """Use case for handling forgot password requests"""

    def __init__(
        self,
        unit_of_work: IUnitOfWork,
        notification_gateway: INotificationGateway,
        otp_generator: OtpGenerator,
        otp_expire_minutes: int = 15
    ):
        self.unit_of_work = unit_of_work
        self.notification_gateway = notification_gateway
        self.otp_generator = otp_generator
        self.otp_expire_minutes = otp_expire_minutes

    async def execute(self, request: ForgotPasswordDto) -> MessageResponse:
        async with self.unit_of_work:
            user = await self.unit_of_work.users.get_by_email(Email(request.email))

            if not user:
                # Don't reveal whether the email is registered
                return MessageResponse(message=RESET_REQUESTED_MESSAGE)

            if user.is_google_account:
                raise GoogleAccountOnly()

            otp = await issue_otp(
                self.unit_of_work, user, OtpPurpose.PASSWORD_RESET,
                self.otp_generator, self.otp_expire_minutes
            )
            await self.unit_of_work.commit()

        await self.notification_gateway.send_otp(
            to_email=str(user.email),
            recipient_name=user.full_name,
            otp_code=otp.code,
            purpose=OtpPurpose.PASSWORD_RESET
        )

        return MessageResponse(message=RESET_REQUESTED_MESSAGE)
