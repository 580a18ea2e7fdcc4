"""OTP code repository interface"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from ..entities.otp_code import OtpCode
from ..enums import OtpPurpose
from ..value_objects.entity_ids import OtpCodeId, UserId


class IOtpRepository(ABC):

    @abstractmethod
    async def add(self, otp: OtpCode) -> OtpCode:
        pass

    @abstractmethod
    async def find_valid(
        self,
        user_id: UserId,
        code: str,
        purpose: OtpPurpose,
        now: Optional[datetime] = None
    ) -> Optional[OtpCode]:
        """Unused, unexpired code of this purpose belonging to the user"""
        pass

    @abstractmethod
    async def mark_used(self, otp_id: OtpCodeId) -> bool:
        """Flip is_used only if still unused. False means another caller consumed it first."""
        pass
