from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.core.config import get_settings


def _build_engine(url: str):
    # An in-memory SQLite database only lives as long as its connection
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, pool_pre_ping=True)


engine = _build_engine(get_settings().DATABASE_URL)


def create_db_and_tables():
    """
    Create every table registered on `SQLModel.metadata`.

    Production schemas are managed by Alembic; this is used for local
    SQLite runs and tests.
    """
    import app.models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session():
    """
    Provide a context-managed SQLModel session.

    Returns:
        session (Session): A session bound to the module-level engine, closed
        when the generator exits.
    """
    with Session(engine) as session:
        yield session


def new_session() -> Session:
    """Open a standalone session for background work outside a request."""
    return Session(engine)
