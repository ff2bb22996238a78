import os

# Must be set before any app module reads the settings
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-min-32-chars"
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.pop("OTEL_EXPORTER_OTLP_ENDPOINT", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

from app import models  # noqa: E402,F401
from app.core.security import create_access_token  # noqa: E402
from app.database.database import engine, get_session  # noqa: E402
from app.main import app  # noqa: E402
from app.models.admin import Admin  # noqa: E402
from app.models.candidature import Candidature  # noqa: E402
from app.models.enums import StructureType  # noqa: E402
from app.models.partner import Partner  # noqa: E402
from app.models.project import Project  # noqa: E402
from app.models.volunteer import Volunteer  # noqa: E402
from tests.factories import (  # noqa: E402
    build_candidature,
    build_partner,
    build_project,
    persist,
)

ADMIN_USERNAME = "root_admin"
HOST_EMAIL = "contact@ong-sahel.org"
PTF_EMAIL = "contact@fonds-dev.org"


@pytest.fixture(name="session")
def session_fixture():
    """
    Yield a session on the application engine (in-memory SQLite, StaticPool).

    Tables are created for each test and dropped afterwards, so background
    sessions opened by the app see the same data as the test.
    """
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """TestClient running the lifespan, with `get_session` bound to the test session."""

    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="admin")
def admin_fixture(session: Session) -> Admin:
    return persist(
        session,
        Admin(
            first_name="Root",
            last_name="Admin",
            email="admin@example.org",
            username=ADMIN_USERNAME,
        ),
    )


@pytest.fixture(name="host_partner")
def host_partner_fixture(session: Session) -> Partner:
    """Active civil society partner: can create projects and manage volunteers."""
    return persist(session, build_partner(HOST_EMAIL, [StructureType.SOCIETE_CIVILE]))


@pytest.fixture(name="ptf_partner")
def ptf_partner_fixture(session: Session) -> Partner:
    """Active technical and financial partner: statistics and reports only."""
    return persist(session, build_partner(PTF_EMAIL, [StructureType.PTF]))


@pytest.fixture(name="active_project")
def active_project_fixture(session: Session, host_partner: Partner) -> Project:
    return persist(session, build_project(host_partner.id_partner))


@pytest.fixture(name="volunteer")
def volunteer_fixture(session: Session) -> Volunteer:
    return persist(
        session,
        Volunteer(
            first_name="Issa",
            last_name="Traoré",
            email="issa.traore@example.org",
            phone="+226 76 11 22 33",
        ),
    )


@pytest.fixture(name="candidature")
def candidature_fixture(
    session: Session, active_project: Project, volunteer: Volunteer
) -> Candidature:
    return persist(
        session, build_candidature(active_project.id_project, volunteer.id_volunteer)
    )


@pytest.fixture(name="admin_headers")
def admin_headers_fixture(admin: Admin) -> dict[str, str]:
    token = create_access_token(admin.username, "admin")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(name="partner_headers")
def partner_headers_fixture(host_partner: Partner) -> dict[str, str]:
    token = create_access_token(host_partner.email, "partner")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(name="ptf_headers")
def ptf_headers_fixture(ptf_partner: Partner) -> dict[str, str]:
    token = create_access_token(ptf_partner.email, "partner")
    return {"Authorization": f"Bearer {token}"}
