"""Session repository implementation"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session as DbSession

from ...domain.repositories.session_repository import ISessionRepository
from ...domain.entities.session import Session
from ...domain.value_objects.entity_ids import SessionId, UserId
from ..orm.session_model import SessionModel


class SessionRepositoryImpl(ISessionRepository):

    def __init__(self, session: DbSession):
        self.session = session

    async def add(self, session: Session) -> Session:
        model = SessionModel(
            id=session.id.value,
            user_id=session.user_id.value,
            refresh_token=session.refresh_token,
            expires_at=session.expires_at,
            created_at=session.created_at,
            user_agent=session.user_agent,
            ip_address=session.ip_address
        )
        self.session.add(model)
        self.session.flush()
        return session

    async def get_by_refresh_token(self, refresh_token: str) -> Optional[Session]:
        model = self.session.query(SessionModel).filter(
            SessionModel.refresh_token == refresh_token
        ).first()
        return self._map_to_entity(model) if model else None

    async def rotate(
        self,
        session_id: SessionId,
        current_token: str,
        new_token: str,
        new_expires_at: datetime
    ) -> bool:
        updated = self.session.query(SessionModel).filter(
            SessionModel.id == session_id.value,
            SessionModel.refresh_token == current_token
        ).update(
            {SessionModel.refresh_token: new_token, SessionModel.expires_at: new_expires_at},
            synchronize_session=False
        )
        return updated == 1

    def _map_to_entity(self, model: SessionModel) -> Session:
        return Session(
            id=SessionId(model.id),
            user_id=UserId(model.user_id),
            refresh_token=model.refresh_token,
            expires_at=model.expires_at,
            created_at=model.created_at,
            user_agent=model.user_agent,
            ip_address=model.ip_address
        )
