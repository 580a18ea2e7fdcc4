"""Refresh session use case"""

from ...core.security import TokenService
from ...domain.exceptions import InvalidToken, SessionExpired, UserNotFound
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import UserId
from ..dtos.user_dtos import RefreshTokenDto, AuthResponse, UserDto


class RefreshSessionUseCase:
    """Exchange a refresh token for a new pair, rotating the stored session in place"""

    def __init__(self, unit_of_work: IUnitOfWork, token_service: TokenService):
        self.unit_of_work = unit_of_work
        self.token_service = token_service

    async def execute(self, request: RefreshTokenDto) -> AuthResponse:
        payload = self.token_service.verify_refresh_token(request.refresh_token)
        if not payload:
            raise InvalidToken()

        try:
            user_id = UserId.from_str(payload["sub"])
        except (ValueError, TypeError):
            raise InvalidToken()

        async with self.unit_of_work:
            session = await self.unit_of_work.sessions.get_by_refresh_token(request.refresh_token)
            if not session or session.user_id != user_id:
                raise InvalidToken()

            if session.is_expired():
                raise SessionExpired()

            user = await self.unit_of_work.users.get_by_id(user_id)
            if not user:
                raise UserNotFound()

            tokens = self.token_service.create_token_pair(
                subject=str(user.id),
                email=str(user.email),
                role=user.user_type.value
            )

            rotated = await self.unit_of_work.sessions.rotate(
                session.id,
                current_token=request.refresh_token,
                new_token=tokens.refresh_token,
                new_expires_at=tokens.refresh_expires_at
            )
            if not rotated:
                # Lost a race with another refresh of the same token
                raise InvalidToken()

            await self.unit_of_work.commit()

        return AuthResponse(
            user=UserDto.from_entity(user),
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            expires_in=tokens.expires_in
        )
