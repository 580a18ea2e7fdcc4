"""User repository implementation"""

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...domain.repositories.user_repository import IUserRepository
from ...domain.entities.user import User, CredentialLogin, GoogleLogin
from ...domain.value_objects.email import Email
from ...domain.value_objects.entity_ids import UserId
from ...domain.enums import UserType, LoginType
from ...domain.exceptions import EmailAlreadyRegistered, GoogleIdInUse
from ..orm.user_model import UserModel


class UserRepositoryImpl(IUserRepository):
    """Repository implementation for User aggregate"""

    def __init__(self, session: Session):
        self.session = session

    async def get_by_id(self, user_id: UserId) -> Optional[User]:
        """Get user by ID"""
        model = self.session.get(UserModel, user_id.value)
        return self._map_to_entity(model) if model else None

    async def get_by_email(self, email: Email) -> Optional[User]:
        """Get user by email"""
        model = self.session.query(UserModel).filter(UserModel.email == str(email)).first()
        return self._map_to_entity(model) if model else None

    async def get_by_google_id(self, google_id: str) -> Optional[User]:
        """Get user by Google subject id"""
        model = self.session.query(UserModel).filter(UserModel.google_id == google_id).first()
        return self._map_to_entity(model) if model else None

    async def add(self, user: User) -> User:
        """Add a new user"""
        model = UserModel(id=user.id.value)
        self._update_model_from_entity(model, user)
        model.created_at = user.created_at
        self.session.add(model)
        self._flush()
        return user

    async def update(self, user: User) -> User:
        """Update an existing user"""
        existing = self.session.get(UserModel, user.id.value)
        if existing:
            self._update_model_from_entity(existing, user)
            self._flush()
        return user

    def _flush(self) -> None:
        """Flush pending writes, turning unique-key clashes into domain conflicts"""
        try:
            self.session.flush()
        except IntegrityError as e:
            # Another writer got the same email or Google id in first
            if "google_id" in str(e.orig):
                raise GoogleIdInUse() from e
            raise EmailAlreadyRegistered() from e

    def _update_model_from_entity(self, model: UserModel, user: User) -> None:
        """Update ORM model from domain entity"""
        model.email = str(user.email)
        model.username = user.username
        model.full_name = user.full_name
        model.password = user.password_hash
        model.login_type = user.login_type
        model.google_id = user.google_id
        model.user_type = user.user_type
        model.profile_photo = user.profile_photo
        model.is_active = user.is_active
        model.is_verified = user.is_verified
        model.last_login = user.last_login
        model.updated_at = user.updated_at

    def _map_to_entity(self, model: UserModel) -> User:
        """Map ORM model to domain entity"""
        login_type = LoginType(model.login_type)
        if login_type == LoginType.GOOGLE:
            login = GoogleLogin(google_id=model.google_id)
        else:
            login = CredentialLogin(password_hash=model.password)

        return User(
            id=UserId(model.id),
            email=Email(model.email),
            full_name=model.full_name,
            login=login,
            username=model.username,
            user_type=UserType(model.user_type),
            profile_photo=model.profile_photo,
            is_verified=model.is_verified,
            is_active=model.is_active,
            last_login=model.last_login,
            created_at=model.created_at,
            updated_at=model.updated_at
        )
