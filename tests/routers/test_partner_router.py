"""Tests for partner router endpoints."""

from fastapi.testclient import TestClient
from sqlmodel import Session

from app.models.enums import StructureType
from app.models.partner import Partner
from tests.factories import build_partner, persist

REGISTRATION = {
    "structure_name": "Mairie de Réo",
    "email": "mairie@reo.bf",
    "phone": "+226 25 44 00 00",
    "address": "Réo",
    "contact_name": "Jean Bado",
    "contact_email": "jean.bado@reo.bf",
    "contact_phone": "+226 25 44 00 01",
    "contact_role": "Secrétaire général",
    "activity_domain": "Administration",
    "structure_types": ["Public-Collectivite"],
}


class TestRegistration:
    def test_register(self, client: TestClient):
        response = client.post("/partners/", json=REGISTRATION)

        assert response.status_code == 201
        assert response.json()["is_active"] is False
        assert response.json()["structure_types"] == ["Public-Collectivite"]

    def test_duplicate_email(self, client: TestClient):
        client.post("/partners/", json=REGISTRATION)
        response = client.post("/partners/", json=REGISTRATION)
        assert response.status_code == 409

    def test_unknown_type_rejected(self, client: TestClient):
        response = client.post(
            "/partners/", json={**REGISTRATION, "structure_types": ["Banque"]}
        )
        assert response.status_code == 422


class TestPermissions:
    def test_multi_role_partner(self, client: TestClient, session: Session):
        partner = persist(
            session,
            build_partner("multi@x.org", [StructureType.SOCIETE_CIVILE, StructureType.PTF]),
        )

        response = client.get(f"/partners/{partner.id_partner}/permissions")

        assert response.status_code == 200
        data = response.json()
        assert data["roles"] == {
            "is_financial_partner": True,
            "is_host_structure": True,
            "has_multiple_roles": True,
        }
        assert data["permissions"]["can_view_reports"] is True
        assert data["permissions"]["can_create_projects"] is True
        assert set(data["permissions"]["by_type"]) == {"SocieteCivile", "PTF"}

    def test_my_permissions(
        self, client: TestClient, host_partner: Partner, partner_headers
    ):
        response = client.get("/partners/me/permissions", headers=partner_headers)

        assert response.status_code == 200
        decisions = {d["action"]: d for d in response.json()["actions"]}
        assert decisions["submit-project"]["authorized"] is True
        assert decisions["view-reports"]["authorized"] is False
        assert decisions["view-reports"]["reason"]

    def test_unknown_partner(self, client: TestClient):
        assert client.get("/partners/404/permissions").status_code == 404

    def test_update_profile(self, client: TestClient, partner_headers):
        response = client.patch(
            "/partners/me", json={"description": "ONG locale"}, headers=partner_headers
        )
        assert response.status_code == 200
        assert response.json()["description"] == "ONG locale"
