from __future__ import annotations

from pydantic import BaseModel, Field


class VendorLoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class VendorProfile(BaseModel):
    id: str
    shop_name: str
    contact_email: str | None = None
    contact_phone: str | None = None
