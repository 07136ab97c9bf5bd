"""
Contact form for checkout: Prefill -> Validate -> Submit.

Fields are described by ``FieldDefinition`` entries with optional validators.
The form is pre-filled from the signed-in user's metadata; the email field is
locked to the account address and ignores edits.

Usage:
    form = CheckoutForm.for_user(user)
    ok, msg = form.set_field("phone", "+7 914 555 12 34")
    if form.is_complete():
        info = form.to_customer_info()
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from storefront.schemas.booking_schema import Address, CustomerInfo
from storefront.schemas.user_schema import User
from storefront.utils import normalize_phone

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 2
MIN_PHONE_DIGITS = 7
MAX_PHONE_DIGITS = 15
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class FieldStatus(str, Enum):
    EMPTY = "empty"
    INVALID = "invalid"
    VALID = "valid"


def _validate_name(value: str) -> bool:
    return len(value.strip()) >= MIN_NAME_LENGTH


def _validate_phone(value: str) -> bool:
    digits = re.sub(r"[^\d]", "", value)
    return MIN_PHONE_DIGITS <= len(digits) <= MAX_PHONE_DIGITS


def _validate_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value.strip()))


@dataclass(frozen=True)
class FieldDefinition:
    """Schema for one form field."""

    name: str
    display_name: str
    required: bool = True
    validator: Optional[Callable[[str], bool]] = None
    locked: bool = False


@dataclass
class FieldValue:
    raw_value: Optional[str] = None
    normalized_value: Optional[str] = None
    status: FieldStatus = FieldStatus.EMPTY
    errors: list[str] = field(default_factory=list)


class CheckoutForm:
    """
    Collects the customer details a booking needs.

    Street, city and country are optional; name, email and phone are required
    and validated.
    """

    FIELD_DEFINITIONS: list[FieldDefinition] = [
        FieldDefinition(name="name", display_name="full name", validator=_validate_name),
        FieldDefinition(name="email", display_name="email", validator=_validate_email, locked=True),
        FieldDefinition(name="phone", display_name="phone number", validator=_validate_phone),
        FieldDefinition(name="street", display_name="street address", required=False),
        FieldDefinition(name="city", display_name="city", required=False),
        FieldDefinition(name="country", display_name="country", required=False),
    ]

    def __init__(self) -> None:
        self.fields: dict[str, FieldValue] = {
            defn.name: FieldValue() for defn in self.FIELD_DEFINITIONS
        }

    @classmethod
    def for_user(cls, user: Optional[User]) -> "CheckoutForm":
        """Build a form pre-filled from the account metadata."""
        form = cls()
        if user is None:
            return form
        meta = user.user_metadata
        prefill = {
            "name": meta.get("full_name") or meta.get("name") or "",
            "email": user.email,
            "phone": meta.get("phone") or "",
            "street": meta.get("address") or "",
            "city": meta.get("city") or "",
            "country": meta.get("country") or "",
        }
        for name, value in prefill.items():
            if value:
                form._assign(name, str(value))
        return form

    def _get_definition(self, name: str) -> FieldDefinition:
        for defn in self.FIELD_DEFINITIONS:
            if defn.name == name:
                return defn
        raise ValueError(f"Unknown field: {name}")

    def _normalize(self, name: str, value: str) -> str:
        value = value.strip()
        if name == "phone":
            return normalize_phone(value)
        if name == "email":
            return value.lower()
        return value

    def _assign(self, name: str, raw_value: str) -> tuple[bool, str]:
        defn = self._get_definition(name)
        value = self.fields[name]
        value.raw_value = raw_value
        value.errors = []

        if not raw_value.strip():
            value.normalized_value = None
            value.status = FieldStatus.EMPTY
            return not defn.required, f"Please enter your {defn.display_name}."

        if defn.validator and not defn.validator(raw_value):
            value.status = FieldStatus.INVALID
            value.errors.append(f"The {defn.display_name} '{raw_value}' doesn't look right.")
            logger.debug("Field '%s' validation failed: '%s'", name, raw_value)
            return False, value.errors[-1]

        value.normalized_value = self._normalize(name, raw_value)
        value.status = FieldStatus.VALID
        return True, f"Got {defn.display_name}: {value.normalized_value}"

    def set_field(self, name: str, raw_value: str) -> tuple[bool, str]:
        """
        Set a field from user input.

        Returns:
            (success, message). Locked fields keep their value and report failure.
        """
        defn = self._get_definition(name)
        if defn.locked and self.fields[name].status != FieldStatus.EMPTY:
            return False, f"The {defn.display_name} is tied to your account and can't be changed."
        return self._assign(name, raw_value)

    def get(self, name: str) -> Optional[str]:
        return self.fields[name].normalized_value

    def missing_fields(self) -> list[FieldDefinition]:
        """Required fields that are empty or invalid."""
        return [
            defn
            for defn in self.FIELD_DEFINITIONS
            if defn.required and self.fields[defn.name].status != FieldStatus.VALID
        ]

    def is_complete(self) -> bool:
        return not self.missing_fields()

    def to_customer_info(self) -> CustomerInfo:
        if not self.is_complete():
            missing = ", ".join(d.display_name for d in self.missing_fields())
            raise ValueError(f"Checkout form is incomplete: {missing}")
        return CustomerInfo(
            name=self.get("name"),
            email=self.get("email"),
            phone=self.get("phone"),
            address=Address(
                street=self.get("street") or "",
                city=self.get("city") or "",
                country=self.get("country") or "",
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            d.name: self.fields[d.name].normalized_value
            for d in self.FIELD_DEFINITIONS
            if self.fields[d.name].normalized_value is not None
        }
