"""Session repository interface"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from ..entities.session import Session
from ..value_objects.entity_ids import SessionId


class ISessionRepository(ABC):

    @abstractmethod
    async def add(self, session: Session) -> Session:
        pass

    @abstractmethod
    async def get_by_refresh_token(self, refresh_token: str) -> Optional[Session]:
        pass

    @abstractmethod
    async def rotate(
        self,
        session_id: SessionId,
        current_token: str,
        new_token: str,
        new_expires_at: datetime
    ) -> bool:
        """Swap the token in one conditional write. False when current_token no longer matches."""
        pass
