from datetime import datetime
from typing import TYPE_CHECKING
from pydantic import field_validator
from sqlmodel import SQLModel, Field, Relationship
from .enums import CandidatureStatus, DocumentType, ExperienceLevel

if TYPE_CHECKING:
    from app.models.project import Project


def normalize_skills(value: str | list[str] | None) -> str:
    """Collapse a skills list or comma-separated string to a clean comma-separated string."""
    if value is None:
        return ""
    items = value if isinstance(value, list) else value.split(",")
    return ", ".join(item.strip() for item in items if item and item.strip())


class CandidatureBase(SQLModel):
    first_name: str = Field(max_length=50)
    last_name: str = Field(max_length=50)
    email: str = Field(index=True)
    phone: str | None = Field(default=None, max_length=50)
    document_type: DocumentType = Field(default=DocumentType.CNIB)
    document_number: str = Field(max_length=50)
    requested_role: str = Field(max_length=100)
    motivation_letter: str | None = Field(default=None, max_length=5000)
    skills: str = Field(default="", max_length=500)
    availability: str | None = Field(default=None, max_length=50)
    experience_level: ExperienceLevel | None = None


class Candidature(CandidatureBase, table=True):
    id_candidature: int | None = Field(default=None, primary_key=True)
    # No FK: a candidature may reference a volunteer that is not onboarded yet
    id_volunteer: int | None = Field(default=None, index=True)
    id_project: int | None = Field(
        default=None, foreign_key="project.id_project", index=True
    )
    status: CandidatureStatus = Field(default=CandidatureStatus.PENDING, index=True)
    internal_notes: str | None = None
    interview_date: datetime | None = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    project: "Project" = Relationship(back_populates="candidatures")


class CandidatureCreate(CandidatureBase):
    id_volunteer: int
    id_project: int
    skills: str | list[str] = ""

    @field_validator("skills", mode="before")
    @classmethod
    def clean_skills(cls, value):
        return normalize_skills(value)


class CandidaturePublic(CandidatureBase):
    id_candidature: int
    id_volunteer: int | None
    id_project: int | None
    status: CandidatureStatus
    internal_notes: str | None = None
    interview_date: datetime | None = None
    created_at: datetime
    updated_at: datetime


class RejectCandidatureRequest(SQLModel):
    reason: str | None = Field(default=None, max_length=1000)


class InterviewRequest(SQLModel):
    interview_date: datetime
    notes: str | None = Field(default=None, max_length=1000)
