"""Tests for partner registration and administration."""

import pytest
from sqlmodel import Session

from app.exceptions import AlreadyExistsError, NotFoundError
from app.models.enums import ActionKind, StructureType
from app.models.partner import Partner, PartnerCreate, PartnerUpdate
from app.services import partner as partner_service
from app.services.permission import validate_access


def _partner_in(**overrides) -> PartnerCreate:
    values = {
        "structure_name": "Association Lumière",
        "email": "lumiere@example.org",
        "phone": "+226 70 12 34 56",
        "address": "Bobo-Dioulasso",
        "contact_name": "Paul Zongo",
        "contact_email": "paul@example.org",
        "contact_phone": "+226 70 12 34 57",
        "contact_role": "Président",
        "activity_domain": "Santé",
        "structure_types": [StructureType.SOCIETE_CIVILE, StructureType.SOCIETE_CIVILE],
    }
    values.update(overrides)
    return PartnerCreate(**values)


class TestRegisterPartner:
    def test_registered_inactive(self, session: Session):
        partner = partner_service.register_partner(session, _partner_in())

        assert partner.is_active is False
        assert partner.structure_types == ["SocieteCivile"]
        assert not validate_access(partner, ActionKind.SUBMIT_PROJECT).authorized

    def test_duplicate_email(self, session: Session):
        partner_service.register_partner(session, _partner_in())
        with pytest.raises(AlreadyExistsError):
            partner_service.register_partner(session, _partner_in())

    def test_at_least_one_type(self):
        with pytest.raises(ValueError):
            _partner_in(structure_types=[])


class TestPartnerAdministration:
    def test_activation_grants_access(self, session: Session):
        partner = partner_service.register_partner(session, _partner_in())

        activated = partner_service.activate_partner(session, partner.id_partner)

        assert activated.is_active is True
        assert activated.activated_at is not None
        assert validate_access(activated, ActionKind.SUBMIT_PROJECT).authorized

    def test_deactivation(self, session: Session, host_partner: Partner):
        partner = partner_service.deactivate_partner(session, host_partner.id_partner)
        assert partner.is_active is False

    def test_type_update_changes_permissions(
        self, session: Session, host_partner: Partner
    ):
        assert validate_access(host_partner, ActionKind.SUBMIT_PROJECT).authorized

        updated = partner_service.update_structure_types(
            session, host_partner.id_partner, [StructureType.PTF]
        )

        assert updated.structure_types == ["PTF"]
        assert not validate_access(updated, ActionKind.SUBMIT_PROJECT).authorized
        assert validate_access(updated, ActionKind.VIEW_REPORTS).authorized

    def test_profile_update(self, session: Session, host_partner: Partner):
        updated = partner_service.update_partner(
            session, host_partner.id_partner, PartnerUpdate(website="https://ong.example.org")
        )
        assert updated.website == "https://ong.example.org"
        assert updated.structure_types == ["SocieteCivile"]

    def test_unknown_partner(self, session: Session):
        with pytest.raises(NotFoundError):
            partner_service.activate_partner(session, 404)
