"""OTP code ORM model"""

import uuid

from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ...db.models import Base


class OtpCodeModel(Base):
    """OTP codes for email verification and password reset"""

    __tablename__ = "otp_codes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    email = Column(String(255), nullable=False)
    otp_code = Column(String(6), nullable=False)
    type = Column(String(50), nullable=False)
    is_used = Column(Boolean, default=False, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    user = relationship("UserModel", back_populates="otp_codes")

    def __repr__(self):
        return f"<OtpCodeModel(id={self.id}, user_id={self.user_id}, type={self.type}, expires_at={self.expires_at})>"
