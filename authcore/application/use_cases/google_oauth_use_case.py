"""Google OAuth authentication use case"""

import logging
from typing import Optional

from ...core.security import TokenService
from ...domain.entities.user import User
from ...domain.exceptions import CredentialAccountExists, GoogleIdInUse
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.email import Email
from ..dtos.user_dtos import GoogleOAuthDto, AuthResponse
from .common import ClientInfo, open_session


logger = logging.getLogger(__name__)


class GoogleOAuthUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, token_service: TokenService):
        self.unit_of_work = unit_of_work
        self.token_service = token_service

    async def execute(self, request: GoogleOAuthDto, client: Optional[ClientInfo] = None) -> AuthResponse:
        """Sign in with already-verified Google profile claims"""
        async with self.unit_of_work:
            email = Email(request.email)
            user = await self.unit_of_work.users.get_by_email(email)

            if user:
                # A password account is never silently converted
                if not user.is_google_account:
                    raise CredentialAccountExists()

                if not user.google_id:
                    await self._ensure_google_id_free(request.google_id)

                if user.link_google(request.google_id, request.profile_photo):
                    logger.info("Updated Google profile for user %s", user.id)
            else:
                await self._ensure_google_id_free(request.google_id)

                user = User.from_google(
                    email=email,
                    full_name=request.full_name,
                    google_id=request.google_id,
                    profile_photo=request.profile_photo
                )
                user = await self.unit_of_work.users.add(user)
                logger.info("Created Google user %s", user.id)

            response = await open_session(self.unit_of_work, self.token_service, user, client)
            await self.unit_of_work.commit()

        return response

    async def _ensure_google_id_free(self, google_id: str) -> None:
        owner = await self.unit_of_work.users.get_by_google_id(google_id)
        if owner:
            logger.info("Google id already linked to user %s", owner.id)
            raise GoogleIdInUse()
