"""Pydantic schemas for budget-vs-actual de-risking spend."""

from pydantic import BaseModel, Field


class ActualLine(BaseModel):
    key: str
    label: str
    estimated: float
    actual: float
    variance: float  # actual - estimated; positive means over budget
    notes: str | None = None


class ActualsTotals(BaseModel):
    estimated: float
    actual: float
    variance: float
    burn_pct: float


class ActualsResponse(BaseModel):
    categories: list[ActualLine]
    totals: ActualsTotals


class ActualUpdate(BaseModel):
    actual: float = Field(..., ge=0)
    notes: str | None = Field(None, max_length=2000)
