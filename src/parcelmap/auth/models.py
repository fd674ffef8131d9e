"""Authentication data models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class TokenValidation(BaseModel):
    valid: bool
    user_id: str | None = None
    display_name: str = ""
    expires_at: datetime | None = None
