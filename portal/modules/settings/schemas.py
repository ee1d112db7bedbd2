"""Pydantic schemas for fund settings and pipeline stage labels."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class FundSettingsResponse(BaseModel):
    id: uuid.UUID | None = None
    fund_size: float
    pref_return: float
    lp_split: float
    gp_split: float
    management_fee: float
    commitment_fee_per_m: float
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class FundSettingsUpdate(BaseModel):
    """Partial update; omitted fields keep their current value.

    Only simple range checks apply. LP and GP splits are not required to
    sum to one.
    """

    fund_size: float | None = Field(None, ge=0)
    pref_return: float | None = Field(None, ge=0, le=1)
    lp_split: float | None = Field(None, ge=0, le=1)
    gp_split: float | None = Field(None, ge=0, le=1)
    management_fee: float | None = Field(None, ge=0, le=1)
    commitment_fee_per_m: float | None = Field(None, ge=0)


class StageLabel(BaseModel):
    stage: int
    label: str


class StageLabelsUpdate(BaseModel):
    labels: list[str] = Field(..., min_length=7, max_length=7)

    @field_validator("labels")
    @classmethod
    def labels_not_blank(cls, v: list[str]) -> list[str]:
        cleaned = [label.strip() for label in v]
        if any(not label for label in cleaned):
            raise ValueError("stage labels cannot be blank")
        return cleaned
