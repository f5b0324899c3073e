"""Create the database engine and pick the match registry from the settings"""

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import sessionmaker

from src.core.config import Settings
from src.db.memory_repository import InMemoryMatchRepository
from src.db.repository import MatchRepository
from src.db.schema import Base
from src.db.sql_repository import SQLMatchRepository


def create_db_engine(settings: Settings) -> Engine:
    """Engine for the configured database. Ensures all tables are created."""
    if settings.database_url is None:
        raise ValueError("No database URL configured.")
    connect_args = (
        {"check_same_thread": False}
        if settings.database_url.startswith("sqlite")
        else {}
    )
    engine = create_engine(
        settings.database_url, echo=settings.sql_echo, connect_args=connect_args
    )
    Base.metadata.create_all(bind=engine)
    return engine


def build_repository(settings: Settings) -> MatchRepository:
    """SQL backed registry when a database URL is configured, in-memory registry otherwise."""
    if settings.database_url is None:
        return InMemoryMatchRepository()
    session_factory = sessionmaker(bind=create_db_engine(settings))
    return SQLMatchRepository(session_factory())
