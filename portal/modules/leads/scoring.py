"""Lead scoring: a 0-100 weighted fit score. Pure functions, no DB."""

from __future__ import annotations

import math

from portal.modules.evaluation.engine import round_half_up
from portal.modules.evaluation.schemas import to_number

WEIGHTS = {
    "size": 0.35,
    "price": 0.25,
    "relationship": 0.20,
    "use": 0.15,
    "contact": 0.05,
}

TARGET_ACREAGE = 50
CHEAP_PRICE_PER_ACRE = 5_000
EXPENSIVE_PRICE_PER_ACRE = 100_000

RELATIONSHIP_SCORES = {
    "landowner": 100,
    "broker": 70,
    "developer": 60,
}
OTHER_RELATIONSHIP_SCORE = 40

# (substring of current use, score); first match wins
USE_SCORES: list[tuple[str, int]] = [
    ("industrial", 100),
    ("oil", 100),
    ("gas", 100),
    ("vacant", 80),
    ("agricult", 70),
    ("timber", 60),
]
OTHER_USE_SCORE = 50


def parse_amount(value) -> float | None:
    """Parse "$2,500,000" or "640" style entries; blank or unparseable gives None."""
    if value is None:
        return None
    number = to_number(value, default=math.nan)
    return None if math.isnan(number) else number


def size_score(acreage: float | None) -> float:
    if not acreage or acreage <= 0:
        return 0.0
    return min(100.0, acreage / TARGET_ACREAGE * 100)


def price_score(acreage: float | None, asking_price: float | None) -> float:
    """Cheaper land per acre scores higher; unknown pricing is neutral."""
    if not acreage or acreage <= 0 or asking_price is None or asking_price < 0:
        return 50.0
    per_acre = asking_price / acreage
    if per_acre <= CHEAP_PRICE_PER_ACRE:
        return 100.0
    if per_acre >= EXPENSIVE_PRICE_PER_ACRE:
        return 0.0
    span = EXPENSIVE_PRICE_PER_ACRE - CHEAP_PRICE_PER_ACRE
    return (EXPENSIVE_PRICE_PER_ACRE - per_acre) / span * 100


def relationship_score(relationship: str | None) -> float:
    key = (relationship or "").strip().lower()
    return float(RELATIONSHIP_SCORES.get(key, OTHER_RELATIONSHIP_SCORE))


def use_score(current_use: str | None) -> float:
    use = (current_use or "").strip().lower()
    if use:
        for fragment, score in USE_SCORES:
            if fragment in use:
                return float(score)
    return float(OTHER_USE_SCORE)


def contact_score(email: str | None, phone: str | None) -> float:
    channels = sum(1 for value in (email, phone) if value and value.strip())
    return channels * 50.0


def score_lead(
    acreage: float | None,
    asking_price: float | None,
    relationship: str | None,
    current_use: str | None,
    email: str | None,
    phone: str | None,
) -> int:
    final = (
        size_score(acreage) * WEIGHTS["size"]
        + price_score(acreage, asking_price) * WEIGHTS["price"]
        + relationship_score(relationship) * WEIGHTS["relationship"]
        + use_score(current_use) * WEIGHTS["use"]
        + contact_score(email, phone) * WEIGHTS["contact"]
    )
    # 6dp first so weight products like 62.4999999 still round up
    return max(0, min(100, round_half_up(round(final, 6))))
