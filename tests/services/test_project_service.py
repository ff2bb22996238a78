"""Tests for the project service."""

from datetime import date, timedelta

import pytest
from sqlmodel import Session

from app.exceptions import (
    IllegalTransitionError,
    InsufficientPermissionsError,
    NotFoundError,
    ValidationError,
)
from app.models.enums import ProjectStatus, StructureType
from app.models.partner import Partner
from app.models.project import Project, ProjectCreate, ProjectUpdate
from app.services import project as project_service
from tests.factories import build_partner, build_project, persist

TODAY = date.today()


@pytest.fixture(name="project_in")
def project_in_fixture() -> ProjectCreate:
    return ProjectCreate(
        title="Reboisement",
        short_description="Plantation d'arbres",
        long_description="Campagne de reboisement communautaire.",
        activity_domain="Environnement",
        region="Nord",
        city="Ouahigouya",
        required_volunteers=5,
        date_start=TODAY + timedelta(days=5),
        date_end=TODAY + timedelta(days=60),
        application_deadline=TODAY + timedelta(days=3),
    )


class TestSubmitProject:
    def test_starts_pending_and_empty(
        self, session: Session, host_partner: Partner, project_in: ProjectCreate
    ):
        project = project_service.submit_project(session, host_partner, project_in)

        assert project.id_project is not None
        assert project.status == ProjectStatus.PENDING
        assert project.current_volunteers == 0
        assert project.id_partner == host_partner.id_partner

    def test_ptf_cannot_submit(
        self, session: Session, ptf_partner: Partner, project_in: ProjectCreate
    ):
        with pytest.raises(InsufficientPermissionsError):
            project_service.submit_project(session, ptf_partner, project_in)

    def test_inactive_partner_cannot_submit(
        self, session: Session, project_in: ProjectCreate
    ):
        partner = persist(
            session,
            build_partner("new@x.org", [StructureType.SOCIETE_CIVILE], is_active=False),
        )
        with pytest.raises(InsufficientPermissionsError):
            project_service.submit_project(session, partner, project_in)

    def test_no_quota(
        self, session: Session, host_partner: Partner, project_in: ProjectCreate
    ):
        for _ in range(5):
            project_service.submit_project(session, host_partner, project_in)
        assert len(project_service.list_partner_projects(session, host_partner.id_partner)) == 5

    def test_dates_out_of_order_rejected(self):
        with pytest.raises(ValueError):
            ProjectCreate(
                title="T",
                short_description="S",
                long_description="L",
                activity_domain="D",
                region="R",
                city="C",
                required_volunteers=1,
                date_start=TODAY + timedelta(days=10),
                date_end=TODAY,
                application_deadline=TODAY,
            )


class TestListPublicProjects:
    def test_only_active_projects(self, session: Session, host_partner: Partner):
        persist(session, build_project(host_partner.id_partner, title="Active"))
        persist(
            session,
            build_project(host_partner.id_partner, title="Pending", status=ProjectStatus.PENDING),
        )
        persist(
            session,
            build_project(host_partner.id_partner, title="Closed", status=ProjectStatus.CLOSED),
        )

        projects = project_service.list_public_projects(session)

        assert [p.title for p in projects] == ["Active"]

    def test_hide_full_projects(self, session: Session, host_partner: Partner):
        persist(
            session,
            build_project(host_partner.id_partner, title="Full", current_volunteers=2),
        )
        persist(session, build_project(host_partner.id_partner, title="Open"))

        projects = project_service.list_public_projects(session, show_full=False)

        assert [p.title for p in projects] == ["Open"]

    def test_search(self, session: Session, active_project: Project):
        assert project_service.list_public_projects(session, search="alphab")
        assert project_service.list_public_projects(session, search="nothing") == []


class TestUpdateProject:
    def test_owner_updates(self, session: Session, active_project: Project):
        updated = project_service.update_project(
            session,
            active_project.id_project,
            ProjectUpdate(title="Nouveau titre"),
            partner_id=active_project.id_partner,
        )
        assert updated.title == "Nouveau titre"

    def test_other_partner_rejected(
        self, session: Session, active_project: Project, ptf_partner: Partner
    ):
        with pytest.raises(InsufficientPermissionsError):
            project_service.update_project(
                session,
                active_project.id_project,
                ProjectUpdate(title="X"),
                partner_id=ptf_partner.id_partner,
            )

    def test_closed_project_is_read_only(self, session: Session, active_project: Project):
        project_service.close_project(session, active_project.id_project)
        with pytest.raises(ValidationError):
            project_service.update_project(
                session, active_project.id_project, ProjectUpdate(title="X")
            )

    def test_merged_dates_validated(self, session: Session, active_project: Project):
        with pytest.raises(ValidationError) as exc_info:
            project_service.update_project(
                session,
                active_project.id_project,
                ProjectUpdate(date_end=active_project.date_start - timedelta(days=1)),
            )
        assert exc_info.value.field == "date_start"

    def test_capacity_cannot_drop_below_assigned(
        self, session: Session, active_project: Project
    ):
        active_project.current_volunteers = 2
        persist(session, active_project)
        with pytest.raises(ValidationError):
            project_service.update_project(
                session, active_project.id_project, ProjectUpdate(required_volunteers=1)
            )


class TestLifecycle:
    def test_validate_publishes(self, session: Session, host_partner: Partner):
        project = persist(
            session, build_project(host_partner.id_partner, status=ProjectStatus.PENDING)
        )
        validated = project_service.validate_project(session, project.id_project)
        assert validated.status == ProjectStatus.ACTIVE
        assert validated.published_at is not None

    def test_validate_active_project_is_noop(
        self, session: Session, active_project: Project
    ):
        published_at = active_project.published_at
        validated = project_service.validate_project(session, active_project.id_project)
        assert validated.status == ProjectStatus.ACTIVE
        assert validated.published_at == published_at

    def test_validate_closed_project_fails(
        self, session: Session, host_partner: Partner
    ):
        project = persist(
            session, build_project(host_partner.id_partner, status=ProjectStatus.CLOSED)
        )
        with pytest.raises(IllegalTransitionError):
            project_service.validate_project(session, project.id_project)

    def test_close_again_is_noop(self, session: Session, active_project: Project):
        closed = project_service.close_project(
            session, active_project.id_project, partner_id=active_project.id_partner
        )
        assert closed.status == ProjectStatus.CLOSED
        closed_at = closed.closed_at
        assert closed_at is not None

        again = project_service.close_project(session, active_project.id_project)
        assert again.status == ProjectStatus.CLOSED
        assert again.closed_at == closed_at

    def test_unknown_project(self, session: Session):
        with pytest.raises(NotFoundError):
            project_service.get_project(session, 12345)


class TestDeadlineStats:
    def test_counts(self, session: Session, host_partner: Partner):
        today = date(2026, 6, 15)
        for offset in (-2, -1, 0, 3, 10):
            end = today + timedelta(days=offset)
            persist(
                session,
                build_project(
                    host_partner.id_partner,
                    date_start=end - timedelta(days=20),
                    date_end=end,
                    application_deadline=end - timedelta(days=25),
                ),
            )

        stats = project_service.get_deadline_stats(session, today)

        assert stats.overdue == 2
        assert stats.due_soon == 2
        assert stats.total == 4


class TestToProjectPublic:
    def test_slots(self, active_project: Project):
        public = project_service.to_project_public(active_project)
        assert public.available_slots == 2
        assert public.is_full is False
