"""Fund-level configuration and pipeline stage labels."""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from portal.models.base import BaseModel, TimestampedModel


class FundSettingsRecord(TimestampedModel):
    """One row per saved revision; the newest row is the active configuration."""

    __tablename__ = "fund_settings"

    fund_size: Mapped[float] = mapped_column(nullable=False)
    pref_return: Mapped[float] = mapped_column(nullable=False)
    lp_split: Mapped[float] = mapped_column(nullable=False)
    gp_split: Mapped[float] = mapped_column(nullable=False)
    management_fee: Mapped[float] = mapped_column(nullable=False)
    commitment_fee_per_m: Mapped[float] = mapped_column(nullable=False, default=0.0)


class PipelineStage(BaseModel):
    __tablename__ = "pipeline_stages"

    stage: Mapped[int] = mapped_column(nullable=False, unique=True)
    label: Mapped[str] = mapped_column(String(100), nullable=False)
