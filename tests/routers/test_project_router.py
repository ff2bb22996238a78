"""Tests for project router endpoints."""

from datetime import date, timedelta

from fastapi.testclient import TestClient
from sqlmodel import Session

from app.models.enums import ProjectStatus
from app.models.partner import Partner
from app.models.project import Project
from app.services import assignment as assignment_service
from tests.factories import build_candidature, build_project, persist

TODAY = date.today()
PROJECT_PAYLOAD = {
    "title": "Cantine scolaire",
    "short_description": "Appui aux cantines",
    "long_description": "Distribution de repas dans les écoles primaires.",
    "activity_domain": "Nutrition",
    "region": "Est",
    "city": "Fada N'Gourma",
    "required_volunteers": 3,
    "date_start": str(TODAY + timedelta(days=7)),
    "date_end": str(TODAY + timedelta(days=90)),
    "application_deadline": str(TODAY + timedelta(days=5)),
}


class TestSubmitProject:
    def test_partner_submits(self, client: TestClient, partner_headers):
        response = client.post("/projects/", json=PROJECT_PAYLOAD, headers=partner_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["current_volunteers"] == 0
        assert data["available_slots"] == 3

    def test_ptf_forbidden(self, client: TestClient, ptf_headers):
        response = client.post("/projects/", json=PROJECT_PAYLOAD, headers=ptf_headers)

        assert response.status_code == 403
        assert response.json()["action"] == "submit-project"

    def test_requires_token(self, client: TestClient):
        response = client.post("/projects/", json=PROJECT_PAYLOAD)
        assert response.status_code == 401

    def test_admin_token_is_not_a_partner(self, client: TestClient, admin_headers):
        response = client.post("/projects/", json=PROJECT_PAYLOAD, headers=admin_headers)
        assert response.status_code == 401

    def test_date_order_validated(self, client: TestClient, partner_headers):
        payload = {**PROJECT_PAYLOAD, "date_end": str(TODAY)}
        response = client.post("/projects/", json=payload, headers=partner_headers)
        assert response.status_code == 422


class TestPublicProjects:
    def test_list_and_detail(
        self, client: TestClient, session: Session, active_project: Project
    ):
        persist(
            session,
            build_project(active_project.id_partner, title="Hidden", status=ProjectStatus.PENDING),
        )

        listing = client.get("/projects/")
        assert listing.status_code == 200
        assert [p["title"] for p in listing.json()] == [active_project.title]

        detail = client.get(f"/projects/{active_project.id_project}")
        assert detail.status_code == 200
        assert detail.json()["is_full"] is False

    def test_unknown_project(self, client: TestClient):
        assert client.get("/projects/999").status_code == 404


class TestOwnerOperations:
    def test_update(self, client: TestClient, active_project: Project, partner_headers):
        response = client.patch(
            f"/projects/{active_project.id_project}",
            json={"city": "Tenkodogo"},
            headers=partner_headers,
        )
        assert response.status_code == 200
        assert response.json()["city"] == "Tenkodogo"

    def test_non_owner_cannot_update(
        self, client: TestClient, active_project: Project, ptf_headers
    ):
        response = client.patch(
            f"/projects/{active_project.id_project}",
            json={"city": "X"},
            headers=ptf_headers,
        )
        assert response.status_code == 403

    def test_close_then_edit(
        self, client: TestClient, active_project: Project, partner_headers
    ):
        closed = client.post(
            f"/projects/{active_project.id_project}/close", headers=partner_headers
        )
        assert closed.status_code == 200
        assert closed.json()["status"] == "closed"

        again = client.post(
            f"/projects/{active_project.id_project}/close", headers=partner_headers
        )
        assert again.status_code == 200
        assert again.json()["closed_at"] == closed.json()["closed_at"]

        edit = client.patch(
            f"/projects/{active_project.id_project}",
            json={"city": "X"},
            headers=partner_headers,
        )
        assert edit.status_code == 422

    def test_inactive_partner_cannot_edit(
        self,
        client: TestClient,
        session: Session,
        host_partner: Partner,
        active_project: Project,
        partner_headers,
    ):
        host_partner.is_active = False
        persist(session, host_partner)

        response = client.patch(
            f"/projects/{active_project.id_project}",
            json={"city": "X"},
            headers=partner_headers,
        )

        assert response.status_code == 403
        session.refresh(active_project)
        assert active_project.city != "X"

    def test_inactive_partner_cannot_close(
        self,
        client: TestClient,
        session: Session,
        host_partner: Partner,
        active_project: Project,
        partner_headers,
    ):
        host_partner.is_active = False
        persist(session, host_partner)

        response = client.post(
            f"/projects/{active_project.id_project}/close", headers=partner_headers
        )

        assert response.status_code == 403
        session.refresh(active_project)
        assert active_project.status == ProjectStatus.ACTIVE

    def test_my_projects(
        self, client: TestClient, active_project: Project, partner_headers
    ):
        response = client.get("/projects/mine", headers=partner_headers)
        assert response.status_code == 200
        assert [p["id_project"] for p in response.json()] == [active_project.id_project]


class TestProjectAssignments:
    def _assign(self, session: Session, project: Project):
        candidature = persist(session, build_candidature(project.id_project, 77))
        return assignment_service.accept_and_assign(session, candidature.id_candidature)

    def test_list_and_stats(
        self,
        client: TestClient,
        session: Session,
        active_project: Project,
        partner_headers,
    ):
        self._assign(session, active_project)

        listing = client.get(
            f"/projects/{active_project.id_project}/assignments?status=active",
            headers=partner_headers,
        )
        stats = client.get(
            f"/projects/{active_project.id_project}/stats", headers=partner_headers
        )

        assert listing.status_code == 200
        assert len(listing.json()) == 1
        assert stats.json() == {
            "total": 1,
            "active": 1,
            "finished": 0,
            "cancelled": 0,
            "inactive": 0,
        }

    def test_owner_unassigns(
        self,
        client: TestClient,
        session: Session,
        active_project: Project,
        partner_headers,
    ):
        outcome = self._assign(session, active_project)

        response = client.delete(
            f"/projects/{active_project.id_project}/assignments/"
            f"{outcome.assignment.id_assignment}",
            headers=partner_headers,
        )

        assert response.status_code == 200
        assert response.json()["current_volunteers"] == 0

    def test_admin_unassigns(
        self,
        client: TestClient,
        session: Session,
        active_project: Project,
        admin_headers,
    ):
        outcome = self._assign(session, active_project)

        response = client.delete(
            f"/projects/{active_project.id_project}/assignments/"
            f"{outcome.assignment.id_assignment}",
            headers=admin_headers,
        )

        assert response.status_code == 200

    def test_ptf_cannot_manage(
        self,
        client: TestClient,
        session: Session,
        active_project: Project,
        ptf_partner: Partner,
        ptf_headers,
    ):
        response = client.get(
            f"/projects/{active_project.id_project}/stats", headers=ptf_headers
        )
        assert response.status_code == 403
