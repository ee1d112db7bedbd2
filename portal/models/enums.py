"""Enumerations shared by the portal models and schemas."""

import enum


# ── Sites ────────────────────────────────────────────────────────────────────


class SiteStatus(str, enum.Enum):
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    KILLED = "killed"


class ChecklistStatus(str, enum.Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"
    BLOCKED = "blocked"


class DocumentCategory(str, enum.Enum):
    LEGAL = "legal"
    GAS = "gas"
    ENVIRO = "enviro"
    POLITICAL = "political"
    ENGINEERING = "engineering"
    FIBER = "fiber"
    OTHER = "other"


# ── Leads ────────────────────────────────────────────────────────────────────


class LeadStatus(str, enum.Enum):
    NEW = "new"
    REVIEWING = "reviewing"
    QUALIFIED = "qualified"
    PASSED = "passed"
    CONVERTED = "converted"


class LeadRelationship(str, enum.Enum):
    LANDOWNER = "landowner"
    BROKER = "broker"
    DEVELOPER = "developer"
    OTHER = "other"
