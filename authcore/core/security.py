"""Security utilities"""

import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from jose import jwt, JWTError
from passlib.context import CryptContext

from .config import Settings


OTP_MIN = 100000
OTP_MAX = 999999


def generate_otp_code() -> str:
    """Generate a 6-digit numeric OTP without a leading zero."""
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


class PasswordHasher:
    """bcrypt hashing through passlib"""

    def __init__(self, rounds: int = 12):
        self.pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        """Hash password"""
        return self.pwd_context.hash(password)

    def verify(self, plain_password: str, hashed_password: Optional[str]) -> bool:
        """Verify password"""
        if not hashed_password:
            return False
        try:
            return self.pwd_context.verify(plain_password, hashed_password)
        except ValueError:
            # Not a recognizable bcrypt digest
            return False


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_at: datetime


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    refresh_expires_at: datetime
    expires_in: int


class TokenService:
    """Mints and verifies signed access and refresh tokens."""

    ACCESS = "access"
    REFRESH = "refresh"

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 15,
        refresh_token_expire_days: int = 7,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.access_token_ttl = timedelta(minutes=access_token_expire_minutes)
        self.refresh_token_ttl = timedelta(days=refresh_token_expire_days)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret_key=settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
            access_token_expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
            refresh_token_expire_days=settings.REFRESH_TOKEN_EXPIRE_DAYS,
        )

    @property
    def access_expires_in(self) -> int:
        return int(self.access_token_ttl.total_seconds())

    def create_access_token(self, subject: str, email: str, role: str) -> IssuedToken:
        """Create access token"""
        expire = datetime.utcnow() + self.access_token_ttl
        to_encode = {
            "exp": expire,
            "sub": subject,
            "email": email,
            "role": role,
            "type": self.ACCESS,
        }
        return IssuedToken(self._encode(to_encode), expire)

    def create_refresh_token(self, subject: str) -> IssuedToken:
        """Create refresh token"""
        expire = datetime.utcnow() + self.refresh_token_ttl
        to_encode = {
            "exp": expire,
            "sub": subject,
            "type": self.REFRESH,
            "jti": uuid.uuid4().hex,
        }
        return IssuedToken(self._encode(to_encode), expire)

    def create_token_pair(self, subject: str, email: str, role: str) -> TokenPair:
        access = self.create_access_token(subject, email, role)
        refresh = self.create_refresh_token(subject)
        return TokenPair(
            access_token=access.token,
            refresh_token=refresh.token,
            refresh_expires_at=refresh.expires_at,
            expires_in=self.access_expires_in,
        )

    def verify_token(self, token: str) -> Optional[Dict[str, Any]]:
        """Verify token and return its claims, or None when it is not acceptable"""
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except (JWTError, AttributeError, TypeError):
            return None

    def verify_refresh_token(self, token: str) -> Optional[Dict[str, Any]]:
        payload = self.verify_token(token)
        if not payload or payload.get("type") != self.REFRESH or not payload.get("sub"):
            return None
        return payload

    def _encode(self, claims: Dict[str, Any]) -> str:
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)
