"""SQLAlchemy models package: import all models so Base.metadata is populated."""

from portal.models.base import BaseModel, ModelMixin, TimestampedModel
from portal.models.enums import (
    ChecklistStatus,
    DocumentCategory,
    LeadRelationship,
    LeadStatus,
    SiteStatus,
)
from portal.models.fund import FundSettingsRecord, PipelineStage
from portal.models.leads import Lead
from portal.models.sites import (
    ChecklistItem,
    Site,
    SiteActivity,
    SiteDocument,
    SiteStageTransition,
)

__all__ = [
    "BaseModel",
    "ModelMixin",
    "TimestampedModel",
    "ChecklistStatus",
    "DocumentCategory",
    "LeadRelationship",
    "LeadStatus",
    "SiteStatus",
    "FundSettingsRecord",
    "PipelineStage",
    "Lead",
    "ChecklistItem",
    "Site",
    "SiteActivity",
    "SiteDocument",
    "SiteStageTransition",
]
