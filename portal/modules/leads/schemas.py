"""Pydantic schemas for lead intake, review and conversion."""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from portal.models.enums import LeadRelationship, LeadStatus
from portal.modules.leads.scoring import parse_amount


class _LeadFields(BaseModel):
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=50)
    company: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=50)
    county: str | None = Field(None, max_length=100)
    acreage: float | None = None
    asking_price: float | None = None
    relationship: LeadRelationship | None = None
    current_use: str | None = Field(None, max_length=100)
    source: str | None = Field(None, max_length=100)
    notes: str | None = None

    @field_validator("acreage", "asking_price", mode="before")
    @classmethod
    def parse_amounts(cls, v: Any) -> float | None:
        amount = parse_amount(v)
        if amount is not None and amount < 0:
            raise ValueError("must not be negative")
        return amount

    @field_validator("relationship", mode="before")
    @classmethod
    def normalise_relationship(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower() or None
        return v


def _check_email(v: str) -> str:
    v = v.strip().lower()
    local, _, domain = v.partition("@")
    if not local or "." not in domain:
        raise ValueError("invalid email address")
    return v


class LeadCreate(_LeadFields):
    email: str = Field(..., max_length=255)

    @field_validator("email")
    @classmethod
    def valid_email(cls, v: str) -> str:
        return _check_email(v)


class LeadUpdate(_LeadFields):
    email: str | None = Field(None, max_length=255)
    status: LeadStatus | None = None

    @field_validator("email")
    @classmethod
    def valid_email(cls, v: str | None) -> str | None:
        return _check_email(v) if v is not None else None


class LeadResponse(BaseModel):
    id: uuid.UUID
    first_name: str | None
    last_name: str | None
    email: str
    phone: str | None
    company: str | None
    city: str | None
    state: str | None
    county: str | None
    acreage: float | None
    asking_price: float | None
    relationship: LeadRelationship | None
    current_use: str | None
    source: str | None
    notes: str | None
    status: LeadStatus
    score: int
    converted_site_id: uuid.UUID | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class LeadStats(BaseModel):
    total: int
    by_status: dict[str, int]


class LeadConvertResponse(BaseModel):
    lead: LeadResponse
    site_id: uuid.UUID
