"""
Database connection management.

Provides the :class:`Database` handle that owns the SQLAlchemy engine and
session factory. One handle is created on startup and passed to every component
that needs persistence.
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from doccy.database.entities.chat_message import Base


class Database:
    """Engine plus session factory for the chat history store.

    Args:
        url: SQLAlchemy database URL (e.g. ``sqlite:///doccy.db``).
        echo: Log emitted SQL statements.
    """

    def __init__(self, url: str, echo: bool = False):
        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        self.engine = create_engine(url, echo=echo, pool_pre_ping=True, connect_args=connect_args)
        self.session_factory = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    def create_all(self) -> None:
        """Create missing tables."""
        Base.metadata.create_all(self.engine)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Yield a session that commits on success and rolls back on error."""
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        self.engine.dispose()
