"""Pydantic schemas for the site evaluation engine.

Field names are snake_case in Python and camelCase on the wire, matching
the attribute bag stored on each site.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

DEFAULT_EXIT_PRICE_PER_MW = 0.3


def to_number(value: Any, default: float = 0.0) -> float:
    """Lenient numeric parse: "$1,200,000" -> 1200000.0, garbage -> default."""
    if isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip().replace("$", "").replace(",", "")
        if not value:
            return default
    elif not isinstance(value, (int, float, Decimal)):
        return default
    try:
        number = float(value)
    except (OverflowError, ValueError):
        # Integers past the float range, signalling NaN, non-numeric text
        return default
    return number if math.isfinite(number) else default


def to_category(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    cleaned = value.strip().lower()
    return cleaned or None


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class SiteInputs(_CamelModel):
    """Raw evaluation attributes of a site.

    Every field is optional. Numbers arrive as numbers or numeric strings and
    anything unparseable reads as 0. Categorical values are lowercased.
    """

    # Physical
    acreage: float = 0.0
    asking_price: float = 0.0
    existing_structures: str | None = None
    structure_value: float = 0.0
    demo_cost: float = 0.0

    # Gas
    pipeline_distance: float = 0.0
    pipeline_diameter: float = 0.0
    terrain: str | None = None
    gas_volume: float = 0.0
    gas_pressure: float = 0.0

    # Environmental / regulatory
    water_source: str | None = None
    phase_i_status: str | None = None
    air_quality_zone: str | None = None
    air_permit_pathway: str | None = None
    permit_type: str | None = None

    # Political / market
    political_climate: str | None = None
    zoning: str | None = None
    community_opposition: str | None = None
    flood_zone: str | None = None
    fiber_type: str | None = None
    title_complexity: str | None = None
    adjacent_conflict: str | None = None
    eminent_domain_risk: str | None = None
    competing_sites: str | None = None
    grid_queue: str | None = None
    labor_market: str | None = None

    # Exit assumption, US$ millions per MW
    exit_price_per_mw: float = Field(DEFAULT_EXIT_PRICE_PER_MW, alias="exitPricePerMW")

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, data: Any) -> dict[str, Any]:
        if isinstance(data, BaseModel):
            data = data.model_dump()
        if not isinstance(data, dict):
            return {}

        coerced: dict[str, Any] = {}
        for name, field in cls.model_fields.items():
            if field.alias in data:
                raw = data[field.alias]
            elif name in data:
                raw = data[name]
            else:
                continue
            if field.annotation is float:
                coerced[name] = to_number(raw, default=field.default)
            else:
                coerced[name] = to_category(raw)
        return coerced


class FundSettings(BaseModel):
    """Fund-level configuration passed into every evaluation.

    With no terms at all the house defaults apply. Once any term is given,
    every missing or non-numeric term reads as 0.
    """

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    fund_size: float = 10_000_000.0
    pref_return: float = 0.16
    lp_split: float = 0.6
    gp_split: float = 0.4
    management_fee: float = 0.02
    commitment_fee_per_m: float = 0.0

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, data: Any) -> Any:
        if not isinstance(data, dict) or not data:
            return data
        return {name: to_number(data.get(name)) for name in cls.model_fields}


# ── Results ──────────────────────────────────────────────────────────────────


class DeRiskingCosts(_CamelModel):
    site_control: float
    gas_studies: float
    enviro: float
    air_permit: float
    fiber: float
    political: float
    engineering: float
    demo: float
    exit_costs: float
    total: float


class Timeline(_CamelModel):
    """Project timeline band in months."""

    low: int
    high: int
    base: int


class FundReturns(_CamelModel):
    gross_exit: float
    lp_preferred: float
    lp_first: float
    remaining: float
    lp_share: float
    gp_share: float
    total_lp: float = Field(alias="totalLP")
    lp_multiple: float


class EvaluationResult(_CamelModel):
    estimated_mw: int = Field(alias="estimatedMW")
    tap_cost: float
    lateral_cost: float
    meter_cost: float
    total_gas_cost: float
    de_risking_costs: DeRiskingCosts
    risk_score: int
    risk_level: Literal["Low", "Medium", "High"]
    timeline: Timeline
    fund_returns: FundReturns


class EvaluationPreviewRequest(BaseModel):
    """Evaluate an unsaved attribute bag, optionally against ad-hoc fund terms."""

    inputs: dict[str, Any] = Field(default_factory=dict)
    fund: FundSettings | None = None
