from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SessionCreateRequest(BaseModel):
    code: str = Field(..., min_length=1)


class RedirectUrlResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    redirect_url: str = Field(..., alias="redirectUrl")


class UserProfile(BaseModel):
    id: str
    provider_user_id: str
    email: str
    name: str | None = None
    phone: str | None = None
    hostel: str | None = None


class ProfileUpdateRequest(BaseModel):
    phone: str | None = None
    hostel: str | None = None
