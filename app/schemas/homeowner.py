"""Pydantic schemas for builder groups and homeowners."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class BuilderGroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr | None = None
    primary_contact: str | None = Field(None, max_length=255)


class BuilderGroupRead(BaseModel):
    id: UUID
    name: str
    email: str | None
    primary_contact: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class HomeownerCreate(BaseModel):
    """
    Homeowner enrollment.

    Name and address must match what claims are submitted with, character
    for character, for those claims to be attributed to this homeowner.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    address: str = Field(..., min_length=1, max_length=1000)
    builder_group_id: UUID | None = None
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    job_name: str | None = Field(None, max_length=255)
    closing_date: date | None = None


class HomeownerRead(BaseModel):
    id: UUID
    name: str
    address: str
    builder_group_id: UUID | None
    email: str | None
    phone: str | None
    job_name: str | None
    closing_date: date | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
