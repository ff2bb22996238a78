"""Read models for resolved partner capabilities (never persisted)."""

from sqlmodel import SQLModel
from .enums import ActionKind, StructureType


class TypePolicy(SQLModel):
    """Static capability record attached to one structure type."""

    can_create_projects: bool
    can_manage_volunteers: bool
    can_view_statistics: bool
    can_view_reports: bool
    has_financial_zone_access: bool


class PartnerRoles(SQLModel):
    is_financial_partner: bool = False
    is_host_structure: bool = False
    has_multiple_roles: bool = False


class PartnerPermissions(SQLModel):
    """Effective permissions: OR-reduction of every held type's policy."""

    can_create_projects: bool = False
    can_manage_volunteers: bool = False
    can_view_statistics: bool = False
    can_view_reports: bool = False
    has_financial_zone_access: bool = False
    by_type: dict[StructureType, TypePolicy] = {}


class AccessDecision(SQLModel):
    action: ActionKind
    authorized: bool
    reason: str | None = None


class PartnerCapabilities(SQLModel):
    """Full answer of the getPartnerPermissions operation."""

    id_partner: int
    is_active: bool
    structure_types: list[StructureType]
    roles: PartnerRoles
    permissions: PartnerPermissions
    actions: list[AccessDecision]
