"""Shared fixtures for benchmark tests."""

import pytest
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

import app.models  # noqa: F401
from app.models.enums import StructureType
from tests.factories import build_partner, persist


@pytest.fixture(name="session")
def session_fixture():
    """
    Yield a Session bound to a fresh in-memory SQLite database.

    Benchmarks do not go through the app, so they get their own engine.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture(name="bench_partner")
def bench_partner_fixture(session: Session):
    return persist(
        session,
        build_partner("bench@ong.org", [StructureType.SOCIETE_CIVILE]),
    )
