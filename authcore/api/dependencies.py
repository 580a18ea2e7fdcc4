"""API dependencies"""

from typing import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from ..core.config import Settings, get_settings
from ..core.security import TokenService
from ..db.database import get_session_factory
from ..domain.repositories.unit_of_work import IUnitOfWork
from ..domain.services.notification_gateway import INotificationGateway
from ..domain.value_objects.entity_ids import UserId
from ..application.auth_engine import AuthenticationEngine
from ..application.dtos.user_dtos import UserDto
from ..application.use_cases.get_user_profile import GetUserProfileUseCase
from ..infrastructure.repositories.unit_of_work_impl import UnitOfWorkImpl
from ..infrastructure.external_services.email_service import EmailService
from ..infrastructure.external_services.google_identity_service import GoogleIdentityService


security = HTTPBearer()


def get_app_settings() -> Settings:
    """Get settings"""
    return get_settings()


def get_unit_of_work_factory() -> Callable[[], IUnitOfWork]:
    """Get a factory that opens one unit of work per engine call"""
    session_factory = get_session_factory()
    return lambda: UnitOfWorkImpl(session_factory(), close_on_exit=True)


def get_notification_gateway(settings: Settings = Depends(get_app_settings)) -> INotificationGateway:
    """Get email service"""
    return EmailService(settings)


def get_auth_engine(
    settings: Settings = Depends(get_app_settings),
    unit_of_work_factory: Callable[[], IUnitOfWork] = Depends(get_unit_of_work_factory),
    notification_gateway: INotificationGateway = Depends(get_notification_gateway)
) -> AuthenticationEngine:
    """Get authentication engine"""
    return AuthenticationEngine(settings, unit_of_work_factory, notification_gateway)


def get_google_identity_service(settings: Settings = Depends(get_app_settings)) -> GoogleIdentityService:
    """Get Google ID token verifier"""
    return GoogleIdentityService(settings.GOOGLE_CLIENT_ID)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    settings: Settings = Depends(get_app_settings),
    unit_of_work_factory: Callable[[], IUnitOfWork] = Depends(get_unit_of_work_factory)
) -> UserDto:
    """Get current authenticated user"""
    payload = TokenService.from_settings(settings).verify_token(credentials.credentials)

    if not payload or payload.get("type") != TokenService.ACCESS:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )

    try:
        user_id = UserId.from_str(payload.get("sub", ""))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )

    user = await GetUserProfileUseCase(unit_of_work_factory()).execute(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    return user
