"""Pydantic schemas for site document links."""

import uuid
from datetime import date

from pydantic import BaseModel, Field, field_validator

from portal.models.enums import DocumentCategory


class DocumentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    url: str = Field(..., min_length=1, max_length=2000)
    category: DocumentCategory = DocumentCategory.OTHER

    @field_validator("url")
    @classmethod
    def url_is_http(cls, v: str) -> str:
        v = v.strip()
        if not v.lower().startswith(("http://", "https://")):
            raise ValueError("url must start with http:// or https://")
        return v


class DocumentResponse(BaseModel):
    id: uuid.UUID
    site_id: uuid.UUID
    name: str
    url: str
    category: DocumentCategory
    date_added: date

    model_config = {"from_attributes": True}


class DocumentWithSite(DocumentResponse):
    site_name: str
