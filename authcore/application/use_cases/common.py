"""Steps shared by several authentication use cases"""

from dataclasses import dataclass
from typing import Callable, Optional

from ...core.security import TokenService
from ...domain.entities.otp_code import OtpCode
from ...domain.entities.session import Session
from ...domain.entities.user import User
from ...domain.enums import OtpPurpose
from ...domain.repositories.unit_of_work import IUnitOfWork
from ..dtos.user_dtos import AuthResponse, UserDto


OtpGenerator = Callable[[], str]


@dataclass(frozen=True)
class ClientInfo:
    """Optional request metadata stored on a session"""
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None


async def issue_otp(
    unit_of_work: IUnitOfWork,
    user: User,
    purpose: OtpPurpose,
    otp_generator: OtpGenerator,
    expires_in_minutes: int
) -> OtpCode:
    otp = OtpCode.issue(
        user_id=user.id,
        email=user.email,
        code=otp_generator(),
        purpose=purpose,
        expires_in_minutes=expires_in_minutes
    )
    return await unit_of_work.otp_codes.add(otp)


async def open_session(
    unit_of_work: IUnitOfWork,
    token_service: TokenService,
    user: User,
    client: Optional[ClientInfo] = None,
    record_login: bool = True
) -> AuthResponse:
    """Mint a token pair, persist its session and return the auth payload"""
    client = client or ClientInfo()
    tokens = token_service.create_token_pair(
        subject=str(user.id),
        email=str(user.email),
        role=user.user_type.value
    )

    # Session expiry mirrors the refresh token's own exp claim
    await unit_of_work.sessions.add(Session.open(
        user_id=user.id,
        refresh_token=tokens.refresh_token,
        expires_at=tokens.refresh_expires_at,
        user_agent=client.user_agent,
        ip_address=client.ip_address
    ))

    if record_login:
        user.record_login()
    await unit_of_work.users.update(user)

    return AuthResponse(
        user=UserDto.from_entity(user),
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        expires_in=tokens.expires_in
    )
