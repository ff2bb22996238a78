"""Response models of the accept-and-assign transaction."""

from sqlmodel import SQLModel
from .assignment import AssignmentPublic
from .candidature import CandidaturePublic
from .enums import ReconciliationAction
from .volunteer import VolunteerPublic


class AssignmentOutcome(SQLModel):
    candidature: CandidaturePublic
    volunteer: VolunteerPublic
    assignment: AssignmentPublic | None = None
    already_assigned: bool = False
    volunteer_created: bool = False
    current_volunteers: int
    required_volunteers: int
    message: str


class ReconcileRequest(SQLModel):
    action: ReconciliationAction
