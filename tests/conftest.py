import asyncio

import pytest

from authcore.application.auth_engine import AuthenticationEngine
from authcore.application.dtos.user_dtos import RegisterUserDto, VerifyOtpDto
from authcore.core.config import Settings
from authcore.core.security import PasswordHasher, TokenService
from authcore.db.database import build_engine, build_session_factory
from authcore.db.models import Base
from authcore.domain.exceptions import DeliveryFailure
from authcore.domain.services.notification_gateway import INotificationGateway
from authcore.infrastructure.repositories.unit_of_work_impl import UnitOfWorkImpl
import authcore.infrastructure.orm  # noqa: F401


def run(coro):
    return asyncio.run(coro)


class FakeNotificationGateway(INotificationGateway):
    """Records every message; optionally fails after recording it."""

    def __init__(self):
        self.sent = []
        self.fail_with = None

    async def send_otp(self, to_email, recipient_name, otp_code, purpose):
        self.sent.append({
            "to_email": to_email,
            "recipient_name": recipient_name,
            "otp_code": otp_code,
            "purpose": purpose,
        })
        if self.fail_with:
            raise DeliveryFailure(self.fail_with)

    def last_code(self, to_email=None):
        messages = [m for m in self.sent if to_email is None or m["to_email"] == to_email]
        return messages[-1]["otp_code"]


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        SECRET_KEY="test-secret-key",
        DATABASE_URL="sqlite:///:memory:",
        TESTING=True,
        PASSWORD_HASH_ROUNDS=4,
    )


@pytest.fixture
def db_engine():
    engine = build_engine("sqlite:///:memory:", testing=True)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return build_session_factory(db_engine)


@pytest.fixture
def uow_factory(session_factory):
    return lambda: UnitOfWorkImpl(session_factory(), close_on_exit=True)


@pytest.fixture
def gateway():
    return FakeNotificationGateway()


@pytest.fixture
def token_service(settings):
    return TokenService.from_settings(settings)


@pytest.fixture
def auth_engine(settings, uow_factory, gateway, token_service):
    return AuthenticationEngine(
        settings,
        uow_factory,
        gateway,
        password_hasher=PasswordHasher(rounds=settings.PASSWORD_HASH_ROUNDS),
        token_service=token_service,
    )


@pytest.fixture
def verified_user(auth_engine, gateway):
    """Registers and verifies a credential account, returns (email, password)"""
    email, password = "verified@example.com", "correct-horse"
    result = run(auth_engine.register(RegisterUserDto(email=email, password=password, full_name="Vera Fied")))
    assert result.ok
    verified = run(auth_engine.verify_otp(VerifyOtpDto(email=email, otp_code=gateway.last_code(email))))
    assert verified.ok
    return email, password
