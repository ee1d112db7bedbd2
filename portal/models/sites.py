"""Site records and the per-site tables hanging off them."""

from __future__ import annotations

import uuid
from datetime import date
from typing import Any

from sqlalchemy import Date, ForeignKey, Index, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from portal.models.base import BaseModel, JSONType, TimestampedModel
from portal.models.enums import ChecklistStatus, DocumentCategory, SiteStatus


class Site(BaseModel):
    __tablename__ = "sites"
    __table_args__ = (
        Index("ix_sites_stage_updated", "stage", "updated_at"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(String(500))
    city: Mapped[str | None] = mapped_column(String(100))
    state: Mapped[str | None] = mapped_column(String(50))
    county: Mapped[str | None] = mapped_column(String(100))
    acreage: Mapped[float | None] = mapped_column()
    asking_price: Mapped[float | None] = mapped_column()
    stage: Mapped[int] = mapped_column(nullable=False, default=1)
    status: Mapped[SiteStatus] = mapped_column(
        nullable=False, default=SiteStatus.ACTIVE
    )
    notes: Mapped[str | None] = mapped_column(Text)
    # Raw evaluation attributes, stored as entered
    inputs: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    # {category: {"actual": float, "notes": str}}
    actuals: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)


class SiteStageTransition(TimestampedModel):
    """Append-only log of pipeline stage moves."""

    __tablename__ = "site_stage_transitions"
    __table_args__ = (
        Index("ix_site_stage_transitions_site", "site_id", "created_at"),
    )

    site_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("sites.id", ondelete="CASCADE"),
        nullable=False,
    )
    from_stage: Mapped[int | None] = mapped_column(nullable=True)
    to_stage: Mapped[int] = mapped_column(nullable=False)


class ChecklistItem(BaseModel):
    __tablename__ = "checklist_items"
    __table_args__ = (
        UniqueConstraint("site_id", "stage", "item_key", name="uq_checklist_site_stage_item"),
    )

    site_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("sites.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    stage: Mapped[int] = mapped_column(nullable=False)
    item_key: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[ChecklistStatus] = mapped_column(
        nullable=False, default=ChecklistStatus.NOT_STARTED
    )
    status_date: Mapped[date | None] = mapped_column(Date)
    notes: Mapped[str | None] = mapped_column(Text)


class SiteActivity(TimestampedModel):
    __tablename__ = "site_activities"
    __table_args__ = (
        Index("ix_site_activities_site_date", "site_id", "activity_date"),
    )

    site_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("sites.id", ondelete="CASCADE"),
        nullable=False,
    )
    activity_date: Mapped[date] = mapped_column(Date, nullable=False)
    action: Mapped[str] = mapped_column(String(500), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)
    cost: Mapped[float] = mapped_column(nullable=False, default=0.0)
    stage: Mapped[int] = mapped_column(nullable=False, default=1)


class SiteDocument(TimestampedModel):
    """A link to an externally stored file (drive, listing, data room)."""

    __tablename__ = "site_documents"

    site_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("sites.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(String(2000), nullable=False)
    category: Mapped[DocumentCategory] = mapped_column(
        nullable=False, default=DocumentCategory.OTHER
    )
    date_added: Mapped[date] = mapped_column(Date, nullable=False)
