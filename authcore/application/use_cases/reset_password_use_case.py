"""Reset password use case"""

from typing import Optional

from ...core.security import PasswordHasher, TokenService
from ...domain.enums import OtpPurpose
from ...domain.exceptions import GoogleAccountOnly, InvalidOrExpiredOtp, UserNotFound
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.email import Email
from ..dtos.user_dtos import ResetPasswordDto, AuthResponse
from .common import ClientInfo, open_session


class ResetPasswordUseCase:
    """Use case for resetting a password with an OTP. Doubles as a login."""

    def __init__(
        self,
        unit_of_work: IUnitOfWork,
        password_hasher: PasswordHasher,
        token_service: TokenService
    ):
        self.unit_of_work = unit_of_work
        self.password_hasher = password_hasher
        self.token_service = token_service

    async def execute(self, request: ResetPasswordDto, client: Optional[ClientInfo] = None) -> AuthResponse:
        async with self.unit_of_work:
            user = await self.unit_of_work.users.get_by_email(Email(request.email))
            if not user:
                raise UserNotFound()

            # Checked before the code is consumed so a Google account keeps it
            if user.is_google_account:
                raise GoogleAccountOnly()

            otp = await self.unit_of_work.otp_codes.find_valid(
                user.id, request.otp_code, OtpPurpose.PASSWORD_RESET
            )
            if not otp or not await self.unit_of_work.otp_codes.mark_used(otp.id):
                raise InvalidOrExpiredOtp()

            user.change_password(self.password_hasher.hash(request.new_password))

            response = await open_session(
                self.unit_of_work, self.token_service, user, client, record_login=False
            )
            await self.unit_of_work.commit()

        return response
