"""
Field-level validators for client data.

Every predicate here is total: it accepts any input and returns a bool,
never raising. That lets the orchestrator run all of them against
untrusted request bodies without guarding each call.
"""

import re
from datetime import date, datetime
from typing import Any, Optional

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Optional leading +, then 7-15 digits. No separators.
PHONE_PATTERN = re.compile(r"^\+?\d{7,15}$")

LEADING_INT_PATTERN = re.compile(r"^\s*([+-]?\d+)")

MIN_AGE = 1
MAX_AGE = 120


def is_not_empty(value: Any) -> bool:
    """True if the value is present and not just whitespace."""
    if value is None:
        return False
    return str(value).strip() != ""


def is_valid_email(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    return EMAIL_PATTERN.match(value.strip()) is not None


def is_valid_phone(value: Any) -> bool:
    """
    Strict format check on the trimmed string.

    "+12345678901" passes; "123-456-7890" does not, since separators
    are not stripped.
    """
    if not isinstance(value, str):
        return False
    return PHONE_PATTERN.match(value.strip()) is not None


def parse_age(value: Any) -> Optional[int]:
    """
    Read an age the way a form field would.

    Strings use their leading integer ("30", " 30 years" -> 30),
    floats are truncated. Booleans are not ages.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return None
        return int(value)
    if isinstance(value, str):
        match = LEADING_INT_PATTERN.match(value)
        if match:
            return int(match.group(1))
    return None


def is_valid_age(value: Any) -> bool:
    age = parse_age(value)
    return age is not None and MIN_AGE <= age <= MAX_AGE


def _local_day(moment: datetime) -> date:
    # Offset-aware moments are judged by the local calendar day
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.date()


def parse_date(value: Any) -> Optional[date]:
    """Parse an ISO date or datetime (string or object) to a calendar date."""
    if isinstance(value, datetime):
        return _local_day(value)
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        # fromisoformat on 3.10 does not accept a trailing Z
        return _local_day(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        return None


def is_valid_date(value: Any, today: Optional[date] = None) -> bool:
    """True if the value parses and is not later than the end of today."""
    parsed = parse_date(value)
    if parsed is None:
        return False
    return parsed <= (today or date.today())
