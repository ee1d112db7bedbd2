"""Auth schemas: login request, session identity."""

from datetime import datetime

from pydantic import BaseModel, Field


class CurrentUser(BaseModel):
    """Identity carried by a verified portal session token."""

    email: str
    expires_at: datetime


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    authenticated: bool
    email: str
