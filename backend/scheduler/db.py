from __future__ import annotations

from sqlmodel import SQLModel, create_engine

from scheduler.core.config import settings


def _build_engine():
    connect_args = {}
    if settings.DATABASE_URL.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
    return create_engine(settings.DATABASE_URL, connect_args=connect_args)


engine = _build_engine()


def init_db() -> None:
    """Create database tables in environments without migrations."""
    import scheduler.models  # noqa: F401  registers the tables

    SQLModel.metadata.create_all(bind=engine)
