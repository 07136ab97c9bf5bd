"""User account models."""

from typing import Annotated, Any, Optional

from pydantic import AfterValidator, ConfigDict, Field

from storefront.schemas.base import CamelModel

MIN_PASSWORD_LENGTH = 6


def _check_email(value: str) -> str:
    value = value.strip().lower()
    local, _, domain = value.partition("@")
    if not local or "." not in domain:
        raise ValueError("Invalid email address")
    return value


Email = Annotated[str, AfterValidator(_check_email)]


class SignupRequest(CamelModel):
    email: Email
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    name: str = Field(min_length=1)


class SigninRequest(CamelModel):
    email: Email
    password: str


class ProfileUpdate(CamelModel):
    """Editable profile fields, merged into ``user_metadata`` under snake_case keys."""
    model_config = ConfigDict(extra="forbid")

    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    bio: Optional[str] = None


class User(CamelModel):
    """Public view of an account. The password hash never leaves the store."""
    id: str
    email: str
    email_confirmed_at: Optional[str] = None
    user_metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: str

    @property
    def display_name(self) -> str:
        return self.user_metadata.get("full_name") or self.user_metadata.get("name") or ""
