"""Pydantic schemas for site records and the pipeline view."""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from portal.models.enums import SiteStatus
from portal.modules.evaluation.schemas import EvaluationResult


class SiteCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    address: str | None = Field(None, max_length=500)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=50)
    county: str | None = Field(None, max_length=100)
    acreage: float | None = Field(None, ge=0)
    asking_price: float | None = Field(None, ge=0)
    stage: int = Field(1, ge=1, le=7)
    status: SiteStatus = SiteStatus.ACTIVE
    notes: str | None = None
    inputs: dict[str, Any] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name cannot be blank")
        return v.strip()


class SiteUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    address: str | None = Field(None, max_length=500)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=50)
    county: str | None = Field(None, max_length=100)
    acreage: float | None = Field(None, ge=0)
    asking_price: float | None = Field(None, ge=0)
    stage: int | None = Field(None, ge=1, le=7)
    status: SiteStatus | None = None
    notes: str | None = None


class SiteResponse(BaseModel):
    id: uuid.UUID
    name: str
    address: str | None
    city: str | None
    state: str | None
    county: str | None
    acreage: float | None
    asking_price: float | None
    stage: int
    status: SiteStatus
    notes: str | None
    inputs: dict[str, Any]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SiteWithEvaluation(BaseModel):
    site: SiteResponse
    evaluation: EvaluationResult


class ChecklistProgress(BaseModel):
    completed: int
    total: int


class SiteSummary(BaseModel):
    """One row of the pipeline view."""

    model_config = ConfigDict(populate_by_name=True)

    id: uuid.UUID
    name: str
    city: str | None
    state: str | None
    stage: int
    stage_label: str
    status: SiteStatus
    progress: ChecklistProgress
    estimated_mw: int = Field(alias="estimatedMW")
    risk_level: str = Field(alias="riskLevel")
    updated_at: datetime


class StageHistoryEntry(BaseModel):
    stage: int
    label: str
    entered_at: datetime | None = None
