"""User ORM Model"""

import uuid

from sqlalchemy import Column, String, Text, DateTime, Boolean, Uuid, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ...db.models import Base
from ...domain.enums import UserType, LoginType


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class UserModel(Base):
    __tablename__ = 'users'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(50), unique=True, nullable=True)
    full_name = Column(String(255), nullable=False)
    # Null for Google accounts
    password = Column(Text, nullable=True)
    user_type = Column(
        SQLEnum(UserType, name='user_type', values_callable=_enum_values),
        default=UserType.MEMBER,
        nullable=False
    )
    profile_photo = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)
    last_login = Column(DateTime, nullable=True)
    login_type = Column(
        SQLEnum(LoginType, name='login_type', values_callable=_enum_values),
        default=LoginType.CREDENTIAL,
        nullable=False
    )
    google_id = Column(String(255), unique=True, nullable=True)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    sessions = relationship('SessionModel', back_populates='user', cascade='all, delete-orphan', passive_deletes=True)
    otp_codes = relationship('OtpCodeModel', back_populates='user', cascade='all, delete-orphan', passive_deletes=True)
