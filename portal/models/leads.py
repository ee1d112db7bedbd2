"""Inbound site leads from landowners, brokers and listings."""

from __future__ import annotations

import uuid

from sqlalchemy import ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from portal.models.base import BaseModel
from portal.models.enums import LeadRelationship, LeadStatus


class Lead(BaseModel):
    __tablename__ = "leads"

    first_name: Mapped[str | None] = mapped_column(String(100))
    last_name: Mapped[str | None] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    phone: Mapped[str | None] = mapped_column(String(50))
    company: Mapped[str | None] = mapped_column(String(255))
    city: Mapped[str | None] = mapped_column(String(100))
    state: Mapped[str | None] = mapped_column(String(50))
    county: Mapped[str | None] = mapped_column(String(100))
    acreage: Mapped[float | None] = mapped_column()
    asking_price: Mapped[float | None] = mapped_column()
    relationship: Mapped[LeadRelationship | None] = mapped_column(nullable=True)
    current_use: Mapped[str | None] = mapped_column(String(100))
    source: Mapped[str | None] = mapped_column(String(100))
    notes: Mapped[str | None] = mapped_column(Text)
    status: Mapped[LeadStatus] = mapped_column(nullable=False, default=LeadStatus.NEW)
    score: Mapped[int] = mapped_column(nullable=False, default=0)
    converted_site_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("sites.id", ondelete="SET NULL"),
        nullable=True,
    )
