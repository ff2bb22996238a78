from datetime import datetime
from typing import TYPE_CHECKING
from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field, Relationship
from .enums import StructureType

if TYPE_CHECKING:
    from app.models.project import Project


class PartnerBase(SQLModel):
    structure_name: str = Field(index=True, max_length=150)
    email: str = Field(unique=True, index=True)
    phone: str = Field(max_length=50)
    address: str
    contact_name: str = Field(max_length=100)
    contact_email: str
    contact_phone: str = Field(max_length=50)
    contact_role: str = Field(max_length=100)
    activity_domain: str = Field(max_length=100)
    description: str = Field(default="", max_length=3000)
    website: str | None = None


class Partner(PartnerBase, table=True):
    id_partner: int | None = Field(default=None, primary_key=True)
    # Stored as the raw enum values; permissions are always derived from it
    structure_types: list[str] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    is_active: bool = Field(default=False)
    created_at: datetime = Field(default_factory=datetime.now)
    activated_at: datetime | None = None
    projects: list["Project"] = Relationship(back_populates="partner")


class PartnerCreate(PartnerBase):
    structure_types: list[StructureType] = Field(min_length=1)


class PartnerPublic(PartnerBase):
    id_partner: int
    structure_types: list[StructureType]
    is_active: bool
    created_at: datetime
    activated_at: datetime | None = None


class PartnerUpdate(SQLModel):
    structure_name: str | None = Field(default=None, max_length=150)
    phone: str | None = Field(default=None, max_length=50)
    address: str | None = None
    contact_name: str | None = Field(default=None, max_length=100)
    contact_email: str | None = None
    contact_phone: str | None = Field(default=None, max_length=50)
    contact_role: str | None = Field(default=None, max_length=100)
    activity_domain: str | None = Field(default=None, max_length=100)
    description: str | None = Field(default=None, max_length=3000)
    website: str | None = None


class PartnerTypesUpdate(SQLModel):
    structure_types: list[StructureType] = Field(min_length=1)
