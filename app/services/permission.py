"""
Permission validation for partner actions.

Permissions are never stored on the partner: they are recomputed from the
declared structure types every time, so editing the types takes effect on the
next check.
"""

from collections.abc import Iterable

from sqlmodel import Session

from app.exceptions import InsufficientPermissionsError, NotFoundError
from app.models.enums import ActionKind, StructureType
from app.models.partner import Partner
from app.models.permission import (
    AccessDecision,
    PartnerCapabilities,
    PartnerPermissions,
    TypePolicy,
)
from app.services.roles import resolve_roles
from app.utils.logger import logger

_HOST_POLICY = TypePolicy(
    can_create_projects=True,
    can_manage_volunteers=True,
    can_view_statistics=True,
    can_view_reports=False,
    has_financial_zone_access=False,
)

STRUCTURE_TYPE_POLICIES: dict[StructureType, TypePolicy] = {
    StructureType.PUBLIC_ADMINISTRATION: _HOST_POLICY,
    StructureType.PUBLIC_COLLECTIVITE: _HOST_POLICY,
    StructureType.SOCIETE_CIVILE: _HOST_POLICY,
    StructureType.SECTEUR_PRIVE: _HOST_POLICY,
    StructureType.INSTITUTION_ACADEMIQUE: _HOST_POLICY,
    StructureType.PTF: TypePolicy(
        can_create_projects=False,
        can_manage_volunteers=False,
        can_view_statistics=True,
        can_view_reports=True,
        has_financial_zone_access=True,
    ),
}

POLICY_FLAGS = (
    "can_create_projects",
    "can_manage_volunteers",
    "can_view_statistics",
    "can_view_reports",
    "has_financial_zone_access",
)

# Actions backed by a policy flag; the two dashboards depend on roles instead
_ACTION_FLAGS: dict[ActionKind, str] = {
    ActionKind.SUBMIT_PROJECT: "can_create_projects",
    ActionKind.MANAGE_CANDIDATES: "can_manage_volunteers",
    ActionKind.VIEW_STATISTICS: "can_view_statistics",
    ActionKind.VIEW_REPORTS: "can_view_reports",
    ActionKind.ACCESS_FINANCIAL_ZONE: "has_financial_zone_access",
}

_DENIAL_REASONS: dict[ActionKind, str] = {
    ActionKind.SUBMIT_PROJECT: "Your structure type does not allow submitting projects",
    ActionKind.MANAGE_CANDIDATES: "Your structure type does not allow managing volunteers",
    ActionKind.VIEW_STATISTICS: "Your structure type does not allow viewing statistics",
    ActionKind.VIEW_REPORTS: "Reports are reserved to technical and financial partners",
    ActionKind.ACCESS_FINANCIAL_ZONE: "The financial zone is reserved to technical and financial partners",
    ActionKind.FINANCIAL_DASHBOARD: "The financial dashboard requires the PTF structure type",
    ActionKind.HOST_DASHBOARD: "The host dashboard requires a host structure type",
}


def compute_permissions(
    structure_types: Iterable[StructureType | str] | None,
) -> PartnerPermissions:
    """
    OR-reduce the policies of every held type.

    Returns:
        PartnerPermissions: Global flags plus the per-type breakdown.
    """
    types = [StructureType(value) for value in structure_types or ()]
    by_type = {t: STRUCTURE_TYPE_POLICIES[t] for t in types}
    flags = {
        flag: any(getattr(policy, flag) for policy in by_type.values())
        for flag in POLICY_FLAGS
    }
    return PartnerPermissions(**flags, by_type=by_type)


def validate_access(partner: Partner, action: ActionKind) -> AccessDecision:
    """
    Decide whether a partner may perform an action.

    An inactive partner is denied everything. Project submission has no quota.

    Args:
        partner: The acting partner.
        action: The requested action.

    Returns:
        AccessDecision: `authorized` plus a human-readable `reason` on denial.
    """
    if not partner.is_active:
        return AccessDecision(
            action=action,
            authorized=False,
            reason="Your partner account is not active yet",
        )

    if action == ActionKind.FINANCIAL_DASHBOARD:
        authorized = resolve_roles(partner.structure_types).is_financial_partner
    elif action == ActionKind.HOST_DASHBOARD:
        authorized = resolve_roles(partner.structure_types).is_host_structure
    else:
        permissions = compute_permissions(partner.structure_types)
        authorized = getattr(permissions, _ACTION_FLAGS[action])

    return AccessDecision(
        action=action,
        authorized=authorized,
        reason=None if authorized else _DENIAL_REASONS[action],
    )


def require_access(partner: Partner, action: ActionKind) -> None:
    """
    Raise when `validate_access` denies the action.

    Raises:
        InsufficientPermissionsError: With the denial reason and the action.
    """
    decision = validate_access(partner, action)
    if not decision.authorized:
        logger.info(
            f"Partner {partner.id_partner} denied {action.value}: {decision.reason}"
        )
        raise InsufficientPermissionsError(
            decision.reason or "Action not allowed", action=action.value
        )


def get_partner_capabilities(session: Session, partner_id: int) -> PartnerCapabilities:
    """
    Resolve everything a partner can do: roles, permissions and one decision per action.

    Raises:
        NotFoundError: If the partner does not exist.
    """
    partner = session.get(Partner, partner_id)
    if partner is None:
        raise NotFoundError("Partner", partner_id)
    return build_capabilities(partner)


def build_capabilities(partner: Partner) -> PartnerCapabilities:
    types = [StructureType(value) for value in partner.structure_types]
    return PartnerCapabilities(
        id_partner=partner.id_partner,  # type: ignore[arg-type]
        is_active=partner.is_active,
        structure_types=types,
        roles=resolve_roles(types),
        permissions=compute_permissions(types),
        actions=[validate_access(partner, action) for action in ActionKind],
    )
