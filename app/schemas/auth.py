from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ProfileRecord(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: str = Field(min_length=3, max_length=320)
    picture: str | None = Field(default=None, max_length=2000)


class TokenResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    access_token: str = Field(min_length=1)


class LinkedInUserInfo(BaseModel):
    """Shape of the OpenID Connect userinfo payload returned by LinkedIn."""

    model_config = ConfigDict(extra="ignore")

    sub: str | None = None
    name: str | None = None
    given_name: str | None = None
    family_name: str | None = None
    email: str = Field(min_length=3)
    picture: str | None = None

    @model_validator(mode="after")
    def _require_name(self) -> "LinkedInUserInfo":
        if not (self.name or "").strip() and not (self.given_name or self.family_name):
            raise ValueError("userinfo payload has no name")
        return self

    def to_profile(self) -> ProfileRecord:
        name = (self.name or "").strip()
        if not name:
            name = " ".join(part for part in (self.given_name, self.family_name) if part).strip()
        picture = (self.picture or "").strip() or None
        return ProfileRecord(name=name, email=self.email.strip(), picture=picture)

