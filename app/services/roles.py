"""Partner role resolution from declared structure types."""

from collections.abc import Iterable

from app.models.enums import StructureType
from app.models.permission import PartnerRoles

FINANCIAL_TYPES = frozenset({StructureType.PTF})


def resolve_roles(structure_types: Iterable[StructureType | str] | None) -> PartnerRoles:
    """
    Derive the dashboard roles a partner holds.

    A PTF (technical and financial partner) is a financial partner; every
    other structure type hosts volunteers. A partner holding both kinds of
    types has both roles at once.

    Args:
        structure_types: Declared types, as enum members or raw values. None or
            empty yields no role.

    Returns:
        PartnerRoles: The resolved role flags.
    """
    types = {StructureType(value) for value in structure_types or ()}
    is_financial = bool(types & FINANCIAL_TYPES)
    is_host = bool(types - FINANCIAL_TYPES)
    return PartnerRoles(
        is_financial_partner=is_financial,
        is_host_structure=is_host,
        has_multiple_roles=is_financial and is_host,
    )
