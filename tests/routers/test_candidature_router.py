"""Tests for candidature router endpoints."""

from datetime import date, timedelta

from fastapi.testclient import TestClient
from sqlmodel import Session

from app.models.candidature import Candidature
from app.models.enums import ProjectStatus, StructureType
from app.models.project import Project
from app.core.security import create_access_token
from tests.factories import build_candidature, build_partner, build_project, persist

APPLICATION = {
    "id_volunteer": 12,
    "first_name": "Rasmané",
    "last_name": "Kiemdé",
    "email": "rasmane@example.org",
    "document_number": "B0000001",
    "requested_role": "Formateur",
    "skills": ["Informatique", " Bureautique "],
}


class TestSubmitApplication:
    def test_public_submission(self, client: TestClient, active_project: Project):
        response = client.post(
            "/candidatures/",
            json={**APPLICATION, "id_project": active_project.id_project},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["skills"] == "Informatique, Bureautique"
        assert data["document_type"] == "CNIB"

    def test_project_not_active(
        self, client: TestClient, session: Session, active_project: Project
    ):
        project = persist(
            session,
            build_project(active_project.id_partner, status=ProjectStatus.CLOSED),
        )
        response = client.post(
            "/candidatures/", json={**APPLICATION, "id_project": project.id_project}
        )
        assert response.status_code == 422


class TestAcceptApplication:
    def test_owner_accepts(
        self, client: TestClient, candidature: Candidature, partner_headers
    ):
        response = client.post(
            f"/candidatures/{candidature.id_candidature}/accept", headers=partner_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["already_assigned"] is False
        assert data["assignment"]["status"] == "active"
        assert data["current_volunteers"] == 1

    def test_second_accept_reports_already_assigned(
        self, client: TestClient, candidature: Candidature, admin_headers
    ):
        url = f"/candidatures/{candidature.id_candidature}/accept"
        client.post(url, headers=admin_headers)
        response = client.post(url, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["already_assigned"] is True
        assert response.json()["assignment"] is None

    def test_full_project(
        self,
        client: TestClient,
        session: Session,
        candidature: Candidature,
        active_project: Project,
        admin_headers,
    ):
        active_project.current_volunteers = active_project.required_volunteers
        persist(session, active_project)

        response = client.post(
            f"/candidatures/{candidature.id_candidature}/accept", headers=admin_headers
        )

        assert response.status_code == 409
        body = response.json()
        assert body["kind"] == "CapacityExceeded"
        assert body["candidature_status"] == "accepted"
        assert body["id_candidature"] == candidature.id_candidature

    def test_missing_link(
        self, client: TestClient, session: Session, active_project: Project, admin_headers
    ):
        orphan = persist(session, build_candidature(active_project.id_project, None))

        response = client.post(
            f"/candidatures/{orphan.id_candidature}/accept", headers=admin_headers
        )

        assert response.status_code == 422
        assert response.json()["missing"] == ["id_volunteer"]

    def test_other_partner_cannot_accept(
        self, client: TestClient, session: Session, candidature: Candidature
    ):
        other = persist(
            session, build_partner("other@x.org", [StructureType.SECTEUR_PRIVE])
        )
        headers = {
            "Authorization": f"Bearer {create_access_token(other.email, 'partner')}"
        }

        response = client.post(
            f"/candidatures/{candidature.id_candidature}/accept", headers=headers
        )

        assert response.status_code == 403

    def test_unknown_candidature(self, client: TestClient, admin_headers):
        response = client.post("/candidatures/999/accept", headers=admin_headers)
        assert response.status_code == 404


class TestReview:
    def test_reject(self, client: TestClient, candidature: Candidature, partner_headers):
        response = client.post(
            f"/candidatures/{candidature.id_candidature}/reject",
            json={"reason": "Disponibilité insuffisante"},
            headers=partner_headers,
        )
        assert response.status_code == 200
        assert response.json()["status"] == "rejected"

    def test_interview(
        self, client: TestClient, candidature: Candidature, admin_headers
    ):
        when = (date.today() + timedelta(days=2)).isoformat() + "T10:00:00"
        response = client.post(
            f"/candidatures/{candidature.id_candidature}/interview",
            json={"interview_date": when},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["status"] == "interview"
