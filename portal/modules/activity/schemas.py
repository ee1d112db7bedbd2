"""Pydantic schemas for the site activity log."""

import datetime
import uuid

from pydantic import BaseModel, Field


class ActivityCreate(BaseModel):
    date: datetime.date | None = None  # defaults to today
    action: str = Field(..., min_length=1, max_length=500)
    notes: str | None = Field(None, max_length=5000)
    cost: float = Field(0.0, ge=0)
    stage: int | None = Field(None, ge=1, le=7)  # defaults to the site's stage


class ActivityResponse(BaseModel):
    id: uuid.UUID
    site_id: uuid.UUID
    date: datetime.date
    action: str
    notes: str | None
    cost: float
    stage: int
    created_at: datetime.datetime


class ActivityListResponse(BaseModel):
    items: list[ActivityResponse]
    total_cost: float


class RecentActivity(ActivityResponse):
    site_name: str
