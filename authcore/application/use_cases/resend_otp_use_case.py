"""Resend OTP use case"""

from ...domain.exceptions import UserNotFound
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.notification_gateway import INotificationGateway
from ...domain.value_objects.email import Email
from ..dtos.user_dtos import ResendOtpDto, MessageResponse
from .common import OtpGenerator, issue_otp


class ResendOtpUseCase:

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

    async def execute(self, request: ResendOtpDto) -> MessageResponse:
        # Earlier codes are left alone and stay valid until they expire
        async with self.unit_of_work:
            user = await self.unit_of_work.users.get_by_email(Email(request.email))
            if not user:
                raise UserNotFound()

            otp = await issue_otp(
                self.unit_of_work, user, request.type,
                self.otp_generator, self.otp_expire_minutes
            )
            await self.unit_of_work.commit()

        await self.notification_gateway.send_otp(
            to_email=str(user.email),
            recipient_name=user.full_name,
            otp_code=otp.code,
            purpose=request.type
        )

        return MessageResponse(message="OTP has been resent.")
