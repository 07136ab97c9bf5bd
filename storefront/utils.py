"""Shared utilities used across the storefront."""

import re
from datetime import date, datetime, timezone


def normalize_phone(value: str) -> str:
    """Normalize a phone number by stripping everything except digits and a leading +.

    Examples:
        >>> normalize_phone("8 (914) 555-12-34")
        '89145551234'
        >>> normalize_phone("+7 914 555 12 34")
        '+79145551234'
    """
    value = value.strip()
    if value.startswith("+"):
        return "+" + re.sub(r"[^\d]", "", value[1:])
    return re.sub(r"[^\d]", "", value)


def parse_duration_days(duration: str) -> int:
    """Leading day count of a display duration such as "7 days"; 1 when absent.

    Examples:
        >>> parse_duration_days("7 days")
        7
        >>> parse_duration_days("half day")
        1
    """
    match = re.match(r"\s*(\d+)", duration or "")
    if not match:
        return 1
    return int(match.group(1)) or 1


def parse_iso_date(value: str) -> date:
    """Parse ``YYYY-MM-DD`` or a full ISO timestamp down to its calendar date."""
    value = value.strip()
    if "T" in value:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    return date.fromisoformat(value)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with a trailing Z."""
    return utc_now().isoformat(timespec="milliseconds").replace("+00:00", "Z")
