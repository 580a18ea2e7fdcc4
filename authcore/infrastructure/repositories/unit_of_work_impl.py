"""Unit of Work implementation with async support"""

from sqlalchemy.orm import Session

from ...domain.repositories.unit_of_work import IUnitOfWork
from .user_repository_impl import UserRepositoryImpl
from .otp_repository_impl import OtpRepositoryImpl
from .session_repository_impl import SessionRepositoryImpl


class UnitOfWorkImpl(IUnitOfWork):

    def __init__(self, session: Session, close_on_exit: bool = False):
        self.session = session
        self.users = UserRepositoryImpl(session)
        self.otp_codes = OtpRepositoryImpl(session)
        self.sessions = SessionRepositoryImpl(session)
        self.close_on_exit = close_on_exit
        self._committed = False

    async def __aenter__(self):
        self._committed = False
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type:
                await self.rollback()
            elif not self._committed:
                await self.commit()
        finally:
            if self.close_on_exit:
                self.session.close()

    async def commit(self) -> None:
        """Commit transaction"""
        try:
            self.session.commit()
            self._committed = True
        except Exception:
            self.rollback_sync()
            raise

    async def rollback(self) -> None:
        """Rollback transaction"""
        self.rollback_sync()

    def rollback_sync(self) -> None:
        """Synchronous rollback helper"""
        self.session.rollback()
