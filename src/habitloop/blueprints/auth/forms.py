"""Signup and login form definitions."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CredentialsForm(BaseModel):
    """Email and password pair used by signup and login."""

    model_config = ConfigDict(str_strip_whitespace=True)

    email: str = Field(max_length=255)
    password: str = Field(min_length=1, max_length=256)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        local, _, domain = value.partition("@")
        if not local or "." not in domain:
            raise ValueError("Please provide a valid email address.")
        return value.lower()


class SignupForm(CredentialsForm):
    password: str = Field(min_length=8, max_length=256)


__all__ = ["CredentialsForm", "SignupForm"]
