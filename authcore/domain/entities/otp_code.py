"""One-time password entity"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from ..value_objects.email import Email
from ..value_objects.entity_ids import OtpCodeId, UserId
from ..enums import OtpPurpose


@dataclass
class OtpCode:
    id: OtpCodeId
    user_id: UserId
    email: Email
    code: str
    purpose: OtpPurpose
    expires_at: datetime
    is_used: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def issue(
        cls,
        user_id: UserId,
        email: Email,
        code: str,
        purpose: OtpPurpose,
        expires_in_minutes: int = 15
    ) -> 'OtpCode':
        """Factory method for a fresh, unused code"""
        now = datetime.utcnow()
        return cls(
            id=OtpCodeId.generate(),
            user_id=user_id,
            email=email,
            code=code,
            purpose=purpose,
            expires_at=now + timedelta(minutes=expires_in_minutes),
            is_used=False,
            created_at=now
        )
