"""Site evaluation engine: pure, deterministic formulas. No DB, no I/O.

evaluate() maps a site's raw attributes and the active fund terms to MW
capacity, gas infrastructure cost, de-risking budget, risk score,
timeline band and the LP/GP exit waterfall. It is total: any input,
however incomplete, yields a complete result.
"""

from __future__ import annotations

import math
from typing import Any

from portal.modules.evaluation.schemas import (
    DeRiskingCosts,
    EvaluationResult,
    FundReturns,
    FundSettings,
    SiteInputs,
    Timeline,
)

# ── Constants ────────────────────────────────────────────────────────────────

MCFD_PER_MW = 192
FALLBACK_MW = 75

METER_COST = 150_000.0
# (minimum diameter in inches, tap cost)
TAP_COST_STEPS: list[tuple[float, float]] = [
    (36, 650_000.0),
    (24, 500_000.0),
    (16, 350_000.0),
    (12, 200_000.0),
]
TAP_COST_MIN = 100_000.0
LATERAL_COST_PER_MILE = {
    "easy": 1_500_000.0,
    "moderate": 2_500_000.0,
    "difficult": 4_000_000.0,
}

# (field, value, points)
RISK_WEIGHTS: list[tuple[str, str, int]] = [
    ("phase_i_status", "flagged", 3),
    ("water_source", "contested", 2),
    ("water_source", "none", 3),
    ("air_quality_zone", "non-attainment", 3),
    ("air_quality_zone", "marginal", 1),
    ("air_permit_pathway", "not_identified", 2),
    ("air_permit_pathway", "denied", 4),
    ("political_climate", "hostile", 4),
    ("political_climate", "unknown", 1),
    ("zoning", "rezoning_needed", 3),
    ("zoning", "variance_needed", 2),
    ("flood_zone", "yes", 2),
    ("community_opposition", "organized", 2),
    ("community_opposition", "some", 1),
    ("fiber_type", "none", 2),
    ("title_complexity", "complex", 3),
    ("adjacent_conflict", "yes", 2),
    ("eminent_domain_risk", "yes", 3),
    ("competing_sites", "many", 2),
    ("grid_queue", "congested", 2),
    ("labor_market", "tight", 1),
]
RISK_LOW_MAX = 5
RISK_MEDIUM_MAX = 12

TIMELINE_BASE_MONTHS = 8
TIMELINE_MIN_MONTHS = 6
TIMELINE_MAX_MONTHS = 30
# (field, value, months)
TIMELINE_DELAYS: list[tuple[str, str, int]] = [
    ("phase_i_status", "flagged", 3),
    ("water_source", "contested", 2),
    ("air_quality_zone", "non-attainment", 3),
    ("air_permit_pathway", "not_identified", 2),
    ("permit_type", "psd", 4),
    ("permit_type", "major", 2),
    ("political_climate", "unknown", 1),
    ("political_climate", "hostile", 4),
    ("zoning", "variance_needed", 2),
    ("zoning", "rezoning_needed", 4),
]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _money(value: float) -> float:
    return round(value, 2)


# ── Capacity & gas ───────────────────────────────────────────────────────────


def estimate_mw(gas_volume: float, gas_pressure: float) -> int:
    """MW deliverable from a gas supply: volume/192, scaled up at higher pressure."""
    if gas_volume <= 0:
        return 0
    if gas_pressure > 500:
        multiplier = 10 / 7
    elif gas_pressure > 300:
        multiplier = 10 / 8.5
    else:
        multiplier = 1.0
    return round_half_up(gas_volume / MCFD_PER_MW * multiplier)


def tap_cost(pipeline_diameter: float) -> float:
    for min_diameter, cost in TAP_COST_STEPS:
        if pipeline_diameter >= min_diameter:
            return cost
    return TAP_COST_MIN


def lateral_cost(pipeline_distance: float, terrain: str | None) -> float:
    # Unknown or missing terrain is costed as easy ground
    per_mile = LATERAL_COST_PER_MILE.get(terrain or "easy", LATERAL_COST_PER_MILE["easy"])
    return pipeline_distance * per_mile


# ── De-risking budget ────────────────────────────────────────────────────────


def de_risking_costs(inputs: SiteInputs, total_gas_cost: float) -> DeRiskingCosts:
    if inputs.permit_type == "psd":
        air_permit = 75_000.0
    elif inputs.permit_type == "major":
        air_permit = 50_000.0
    else:
        air_permit = 25_000.0

    if inputs.political_climate == "hostile":
        political = 25_000.0
    elif inputs.community_opposition == "organized":
        political = 20_000.0
    else:
        political = 10_000.0

    categories = {
        "site_control": inputs.asking_price * 0.05 + 10_000,
        "gas_studies": 75_000.0 if total_gas_cost > 0 else 30_000.0,
        "enviro": 120_000.0 if inputs.phase_i_status == "flagged" else 50_000.0,
        "air_permit": air_permit,
        # Fiber route distance is not captured yet; flat study fee only
        "fiber": 2_000.0,
        "political": political,
        "engineering": 50_000.0,
        "demo": inputs.demo_cost if inputs.existing_structures == "demolish" else 0.0,
        "exit_costs": 50_000.0,
    }
    categories = {key: _money(value) for key, value in categories.items()}
    return DeRiskingCosts(**categories, total=_money(sum(categories.values())))


# ── Risk & timeline ──────────────────────────────────────────────────────────


def risk_score(inputs: SiteInputs) -> int:
    score = 0
    if inputs.pipeline_distance > 5:
        score += 2
    elif inputs.pipeline_distance > 3:
        score += 1
    for field, value, points in RISK_WEIGHTS:
        if getattr(inputs, field) == value:
            score += points
    return score


def risk_level(score: int) -> str:
    if score <= RISK_LOW_MAX:
        return "Low"
    if score <= RISK_MEDIUM_MAX:
        return "Medium"
    return "High"


def timeline(inputs: SiteInputs) -> Timeline:
    """Months to a de-risked, marketable site.

    Delays accumulate on the 8-month base; the band runs two months under
    the base and is capped at 30.
    """
    months = TIMELINE_BASE_MONTHS
    if inputs.pipeline_distance > 3:
        months += 2
    for field, value, delay in TIMELINE_DELAYS:
        if getattr(inputs, field) == value:
            months += delay
    base = min(TIMELINE_MAX_MONTHS, max(TIMELINE_MIN_MONTHS, months))
    return Timeline(
        low=max(TIMELINE_MIN_MONTHS, base - 2),
        high=min(TIMELINE_MAX_MONTHS, base),
        base=base,
    )


# ── Fund waterfall ───────────────────────────────────────────────────────────


def fund_returns(
    mw: int,
    inputs: SiteInputs,
    fund: FundSettings,
    timeline_high: int,
) -> FundReturns:
    """Exit proceeds split between LPs and GP under a simple preferred return."""
    basis_mw = mw or FALLBACK_MW
    gross_exit = basis_mw * inputs.exit_price_per_mw * 1_000_000
    if inputs.existing_structures == "usable":
        gross_exit += inputs.structure_value

    timeline_years = timeline_high / 12
    lp_preferred = fund.fund_size * fund.pref_return * timeline_years
    lp_first = fund.fund_size + lp_preferred
    remaining = max(0.0, gross_exit - lp_first)
    lp_share = remaining * fund.lp_split
    gp_share = remaining * fund.gp_split
    total_lp = lp_first + lp_share
    lp_multiple = total_lp / fund.fund_size if fund.fund_size else 0.0

    return FundReturns(
        gross_exit=_money(gross_exit),
        lp_preferred=_money(lp_preferred),
        lp_first=_money(lp_first),
        remaining=_money(remaining),
        lp_share=_money(lp_share),
        gp_share=_money(gp_share),
        total_lp=_money(total_lp),
        lp_multiple=round(lp_multiple, 2),
    )


# ── Entry point ──────────────────────────────────────────────────────────────


def evaluate(
    inputs: SiteInputs | dict[str, Any] | None,
    fund: FundSettings | dict[str, Any] | None = None,
) -> EvaluationResult:
    """Compute the full evaluation for one site. Never raises on bad input."""
    if not isinstance(inputs, SiteInputs):
        inputs = SiteInputs.model_validate(inputs if isinstance(inputs, dict) else {})
    if not isinstance(fund, FundSettings):
        fund = FundSettings.model_validate(fund if isinstance(fund, dict) else {})

    mw = estimate_mw(inputs.gas_volume, inputs.gas_pressure)
    tap = tap_cost(inputs.pipeline_diameter)
    lateral = lateral_cost(inputs.pipeline_distance, inputs.terrain)
    total_gas = tap + lateral + METER_COST

    score = risk_score(inputs)
    band = timeline(inputs)

    return EvaluationResult(
        estimated_mw=mw,
        tap_cost=_money(tap),
        lateral_cost=_money(lateral),
        meter_cost=METER_COST,
        total_gas_cost=_money(total_gas),
        de_risking_costs=de_risking_costs(inputs, total_gas),
        risk_score=score,
        risk_level=risk_level(score),
        timeline=band,
        fund_returns=fund_returns(mw, inputs, fund, band.high),
    )
