"""Database session management utilities."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from functools import cache

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from supplychain_backend.settings import BackendSettings, get_settings


class DatabaseService:
    """Wraps SQLAlchemy engine and session factory."""

    def __init__(
        self,
        url: str | None = None,
        *,
        settings: BackendSettings | None = None,
    ) -> None:
        if url is None:
            url = (settings or get_settings()).database_url
        self._engine = create_engine(url)
        self._session_factory = sessionmaker(
            bind=self._engine,
            autoflush=False,
            expire_on_commit=False,
            class_=Session,
        )
        self._active: ContextVar[Session | None] = ContextVar(
            f"supplychain_session_{id(self)}", default=None
        )

    @property
    def engine(self) -> Engine:
        """Expose the SQLAlchemy engine."""
        return self._engine

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Provide a transactional session scope.

        A nested call joins the enclosing scope, so everything inside the
        outermost ``session()`` commits or rolls back together.
        """
        active = self._active.get()
        if active is not None:
            yield active
            return
        session = self._session_factory()
        token = self._active.set(session)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            self._active.reset(token)
            session.close()


@cache
def build_database_service(database_url: str) -> DatabaseService:
    """Return the process-wide :class:`DatabaseService` for *database_url*."""
    return DatabaseService(database_url)


__all__ = ["DatabaseService", "build_database_service"]
