"""User entity with business logic"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union

from ..value_objects.email import Email
from ..value_objects.entity_ids import UserId
from ..enums import LoginType, UserType


@dataclass(frozen=True)
class CredentialLogin:
    """Email/password account. The hash can be missing on imported rows."""
    password_hash: Optional[str]

    login_type = LoginType.CREDENTIAL


@dataclass(frozen=True)
class GoogleLogin:
    """Google account, keyed by the Google subject id once known."""
    google_id: Optional[str] = None

    login_type = LoginType.GOOGLE


LoginMethod = Union[CredentialLogin, GoogleLogin]


@dataclass
class User:
    id: UserId
    email: Email
    full_name: str
    login: LoginMethod
    username: Optional[str] = None
    user_type: UserType = UserType.MEMBER
    profile_photo: Optional[str] = None
    is_verified: bool = False
    is_active: bool = True
    last_login: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def register(
        cls,
        email: Email,
        password_hash: str,
        full_name: str,
        user_type: UserType = UserType.MEMBER
    ) -> 'User':
        """Factory method for a new, unverified credential account"""
        now = datetime.utcnow()
        return cls(
            id=UserId.generate(),
            email=email,
            full_name=full_name,
            login=CredentialLogin(password_hash=password_hash),
            user_type=user_type,
            is_verified=False,
            created_at=now,
            updated_at=now
        )

    @classmethod
    def from_google(
        cls,
        email: Email,
        full_name: str,
        google_id: str,
        profile_photo: Optional[str] = None
    ) -> 'User':
        """Factory method for a first Google sign-in. Google identities arrive verified."""
        now = datetime.utcnow()
        return cls(
            id=UserId.generate(),
            email=email,
            full_name=full_name,
            login=GoogleLogin(google_id=google_id),
            user_type=UserType.MEMBER,
            profile_photo=profile_photo,
            is_verified=True,
            created_at=now,
            updated_at=now
        )

    @property
    def login_type(self) -> LoginType:
        return self.login.login_type

    @property
    def is_google_account(self) -> bool:
        return isinstance(self.login, GoogleLogin)

    @property
    def password_hash(self) -> Optional[str]:
        if isinstance(self.login, CredentialLogin):
            return self.login.password_hash
        return None

    @property
    def google_id(self) -> Optional[str]:
        if isinstance(self.login, GoogleLogin):
            return self.login.google_id
        return None

    def verify_email(self) -> None:
        """Business logic: mark email verified. Verification is never undone."""
        if self.is_verified:
            return
        self.is_verified = True
        self.updated_at = datetime.utcnow()

    def change_password(self, password_hash: str) -> None:
        """Business logic: replace the password of a credential account"""
        if not isinstance(self.login, CredentialLogin):
            raise ValueError("Google accounts have no password")
        self.login = CredentialLogin(password_hash=password_hash)
        self.updated_at = datetime.utcnow()

    def link_google(self, google_id: str, profile_photo: Optional[str] = None) -> bool:
        """Business logic: apply a Google sign-in to this account. Returns True when something changed.

        The Google id is only backfilled when unset; a supplied photo replaces the stored one.
        """
        if not isinstance(self.login, GoogleLogin):
            raise ValueError("Credential accounts cannot be linked to Google")
        changed = False
        if not self.login.google_id:
            self.login = GoogleLogin(google_id=google_id)
            changed = True
        if profile_photo and profile_photo != self.profile_photo:
            self.profile_photo = profile_photo
            changed = True
        if changed:
            self.updated_at = datetime.utcnow()
        return changed

    def record_login(self) -> None:
        """Record user login"""
        self.last_login = datetime.utcnow()
