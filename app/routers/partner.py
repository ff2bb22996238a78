"""Partner router: registration and permission introspection."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.dependencies import get_current_partner
from app.database.database import get_session
from app.models.partner import Partner, PartnerCreate, PartnerPublic, PartnerUpdate
from app.models.permission import PartnerCapabilities
from app.services import partner as partner_service
from app.services import permission as permission_service
from app.utils.validation import ensure_id

router = APIRouter(prefix="/partners", tags=["partners"])


@router.post("/", response_model=PartnerPublic, status_code=status.HTTP_201_CREATED)
def register_partner(
    partner_in: PartnerCreate,
    session: Annotated[Session, Depends(get_session)],
):
    """
    Register a partner structure with one or more structure types.

    The account is inactive until an administrator activates it; inactive
    partners are denied every action.
    """
    partner = partner_service.register_partner(session, partner_in)
    return partner_service.to_partner_public(partner)


@router.get("/me", response_model=PartnerPublic)
def read_current_partner(
    partner: Annotated[Partner, Depends(get_current_partner)],
):
    return partner_service.to_partner_public(partner)


@router.patch("/me", response_model=PartnerPublic)
def update_current_partner(
    partner_update: PartnerUpdate,
    session: Annotated[Session, Depends(get_session)],
    partner: Annotated[Partner, Depends(get_current_partner)],
):
    """Edit profile fields. Structure types are changed by administrators only."""
    updated = partner_service.update_partner(
        session, ensure_id(partner.id_partner, "Partner"), partner_update
    )
    return partner_service.to_partner_public(updated)


@router.get("/me/permissions", response_model=PartnerCapabilities)
def read_my_permissions(
    partner: Annotated[Partner, Depends(get_current_partner)],
) -> PartnerCapabilities:
    return permission_service.build_capabilities(partner)


@router.get("/{partner_id}/permissions", response_model=PartnerCapabilities)
def read_partner_permissions(
    partner_id: int,
    session: Annotated[Session, Depends(get_session)],
) -> PartnerCapabilities:
    """
    Roles, effective permissions (with per-type breakdown) and one access
    decision per action for a partner.
    """
    return permission_service.get_partner_capabilities(session, partner_id)
