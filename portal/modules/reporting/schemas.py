"""Pydantic schemas for the dashboard, comparison and export endpoints."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel

from portal.modules.activity.schemas import RecentActivity
from portal.modules.evaluation.schemas import FundSettings
from portal.modules.sites.schemas import SiteWithEvaluation


class ExportFormat(str, Enum):
    CSV = "csv"
    XLSX = "xlsx"
    JSON = "json"


class FunnelStage(BaseModel):
    stage: int
    label: str
    count: int


class DashboardResponse(BaseModel):
    active_sites: int
    total_mw: int
    total_gross_exit: float
    avg_risk_score: float
    funnel: list[FunnelStage]
    kill_trigger_sites: int
    recent_activity: list[RecentActivity]


class CompareResponse(BaseModel):
    sites: list[SiteWithEvaluation]


class PortfolioExport(BaseModel):
    """Full data dump: every live site with inputs and evaluation."""

    exported_at: datetime
    fund: FundSettings
    stage_labels: dict[int, str]
    sites: list[SiteWithEvaluation]
