"""Partner registration and administration."""

from datetime import datetime

from sqlmodel import Session, select

from app.exceptions import AlreadyExistsError, NotFoundError
from app.models.partner import Partner, PartnerCreate, PartnerPublic, PartnerUpdate
from app.models.enums import StructureType
from app.utils.logger import logger
from app.utils.validation import mask_email


def get_partner(session: Session, partner_id: int) -> Partner:
    partner = session.get(Partner, partner_id)
    if partner is None:
        raise NotFoundError("Partner", partner_id)
    return partner


def register_partner(session: Session, partner_in: PartnerCreate) -> Partner:
    """
    Register a partner structure. It stays inactive until an administrator activates it.

    Raises:
        AlreadyExistsError: If the email is already registered.
    """
    existing = session.exec(
        select(Partner).where(Partner.email == partner_in.email)
    ).first()
    if existing is not None:
        raise AlreadyExistsError("Partner", "email", partner_in.email)

    partner = Partner.model_validate(
        partner_in,
        update={
            "structure_types": _dedupe(partner_in.structure_types),
            "is_active": False,
        },
    )
    session.add(partner)
    session.commit()
    session.refresh(partner)
    logger.info(
        f"Partner {partner.id_partner} registered ({mask_email(partner.email)})"
    )
    return partner


def update_partner(
    session: Session, partner_id: int, partner_update: PartnerUpdate
) -> Partner:
    partner = get_partner(session, partner_id)
    for key, value in partner_update.model_dump(exclude_unset=True).items():
        setattr(partner, key, value)
    session.add(partner)
    session.commit()
    session.refresh(partner)
    return partner


def update_structure_types(
    session: Session, partner_id: int, structure_types: list[StructureType]
) -> Partner:
    """
    Replace the declared structure types of a partner.

    Derived permissions follow on the very next check since nothing is cached.
    """
    partner = get_partner(session, partner_id)
    partner.structure_types = _dedupe(structure_types)
    session.add(partner)
    session.commit()
    session.refresh(partner)
    logger.info(f"Partner {partner_id} structure types set to {partner.structure_types}")
    return partner


def activate_partner(session: Session, partner_id: int) -> Partner:
    partner = get_partner(session, partner_id)
    if not partner.is_active:
        partner.is_active = True
        partner.activated_at = datetime.now()
        session.add(partner)
        session.commit()
        session.refresh(partner)
    return partner


def deactivate_partner(session: Session, partner_id: int) -> Partner:
    partner = get_partner(session, partner_id)
    partner.is_active = False
    session.add(partner)
    session.commit()
    session.refresh(partner)
    return partner


def to_partner_public(partner: Partner) -> PartnerPublic:
    return PartnerPublic.model_validate(partner)


def _dedupe(structure_types: list[StructureType]) -> list[str]:
    # JSON column: keep plain values, first occurrence order
    return list(dict.fromkeys(StructureType(t).value for t in structure_types))
