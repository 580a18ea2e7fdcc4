"""OTP code repository implementation"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...domain.repositories.otp_repository import IOtpRepository
from ...domain.entities.otp_code import OtpCode
from ...domain.enums import OtpPurpose
from ...domain.value_objects.email import Email
from ...domain.value_objects.entity_ids import OtpCodeId, UserId
from ..orm.otp_code_model import OtpCodeModel


class OtpRepositoryImpl(IOtpRepository):

    def __init__(self, session: Session):
        self.session = session

    async def add(self, otp: OtpCode) -> OtpCode:
        model = OtpCodeModel(
            id=otp.id.value,
            user_id=otp.user_id.value,
            email=str(otp.email),
            otp_code=otp.code,
            type=otp.purpose.value,
            is_used=otp.is_used,
            expires_at=otp.expires_at,
            created_at=otp.created_at
        )
        self.session.add(model)
        self.session.flush()
        return otp

    async def find_valid(
        self,
        user_id: UserId,
        code: str,
        purpose: OtpPurpose,
        now: Optional[datetime] = None
    ) -> Optional[OtpCode]:
        model = self.session.query(OtpCodeModel).filter(
            OtpCodeModel.user_id == user_id.value,
            OtpCodeModel.otp_code == code,
            OtpCodeModel.type == purpose.value,
            OtpCodeModel.is_used == False,  # noqa: E712
            OtpCodeModel.expires_at > (now or datetime.utcnow())
        ).first()
        return self._map_to_entity(model) if model else None

    async def mark_used(self, otp_id: OtpCodeId) -> bool:
        updated = self.session.query(OtpCodeModel).filter(
            OtpCodeModel.id == otp_id.value,
            OtpCodeModel.is_used == False  # noqa: E712
        ).update({OtpCodeModel.is_used: True}, synchronize_session=False)
        return updated == 1

    def _map_to_entity(self, model: OtpCodeModel) -> OtpCode:
        return OtpCode(
            id=OtpCodeId(model.id),
            user_id=UserId(model.user_id),
            email=Email(model.email),
            code=model.otp_code,
            purpose=OtpPurpose(model.type),
            expires_at=model.expires_at,
            is_used=model.is_used,
            created_at=model.created_at
        )
