"""Pydantic schemas for the stage gate checklist."""

import datetime

from pydantic import BaseModel, Field

from portal.models.enums import ChecklistStatus


class ChecklistItemState(BaseModel):
    key: str
    name: str
    kill_trigger: str | None = None
    status: ChecklistStatus = ChecklistStatus.NOT_STARTED
    date: datetime.date | None = None
    notes: str | None = None


class ChecklistStage(BaseModel):
    stage: int
    name: str
    progress: int  # percent of items complete
    items: list[ChecklistItemState]


class KillTriggerAlert(BaseModel):
    stage: int
    key: str
    name: str
    message: str


class ChecklistResponse(BaseModel):
    stages: list[ChecklistStage]
    completed: int
    total: int
    kill_triggers: list[KillTriggerAlert]


class ChecklistItemUpdate(BaseModel):
    status: ChecklistStatus
    date: datetime.date | None = None
    notes: str | None = Field(None, max_length=5000)
