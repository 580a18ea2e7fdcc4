from functools import lru_cache

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ..core.config import get_settings


def build_engine(database_url: str, testing: bool = False) -> Engine:
    """Create database engine"""
    if testing or database_url == "sqlite:///:memory:":
        # Use in-memory SQLite for testing
        engine = create_engine(
            "sqlite:///:memory:",
            connect_args={
                "check_same_thread": False,
            },
            poolclass=StaticPool,
        )
    elif database_url.startswith("sqlite"):
        engine = create_engine(database_url, connect_args={"check_same_thread": False})
    else:
        # Use PostgreSQL for production/development
        engine = create_engine(
            database_url,
            pool_pre_ping=True,
            pool_recycle=300,
            pool_size=10,
            max_overflow=20,
            echo=False,
        )

    if engine.dialect.name == "sqlite":
        # SQLite ignores ON DELETE CASCADE unless asked
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    """Create session factory"""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@lru_cache
def get_engine() -> Engine:
    settings = get_settings()
    return build_engine(settings.DATABASE_URL, testing=settings.TESTING)


@lru_cache
def get_session_factory() -> sessionmaker:
    return build_session_factory(get_engine())
