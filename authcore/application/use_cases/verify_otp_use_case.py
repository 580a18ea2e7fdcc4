"""OTP verification use case"""

import logging

from ...domain.enums import OtpPurpose
from ...domain.exceptions import InvalidOrExpiredOtp, UserNotFound
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.email import Email
from ..dtos.user_dtos import VerifyOtpDto, VerifyOtpResponse, SessionUserDto


logger = logging.getLogger(__name__)


class VerifyOtpUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, request: VerifyOtpDto) -> VerifyOtpResponse:
        """Consume a code and, for email verification, mark the account verified.

        No tokens are issued; the caller's session layer logs the returned
        identity in on its own.
        """
        async with self.unit_of_work:
            user = await self.unit_of_work.users.get_by_email(Email(request.email))
            if not user:
                raise UserNotFound()

            otp = await self.unit_of_work.otp_codes.find_valid(user.id, request.otp_code, request.type)
            if not otp:
                raise InvalidOrExpiredOtp()

            if not await self.unit_of_work.otp_codes.mark_used(otp.id):
                logger.warning("OTP %s for user %s was consumed concurrently", otp.id.value, user.id)
                raise InvalidOrExpiredOtp()

            if request.type == OtpPurpose.EMAIL_VERIFICATION:
                user.verify_email()
                await self.unit_of_work.users.update(user)

            await self.unit_of_work.commit()

        return VerifyOtpResponse(success=True, user=SessionUserDto.from_entity(user))
