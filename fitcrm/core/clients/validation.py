"""
Validation orchestrator for client records.

Runs every field validator against a candidate record and collects
field-keyed error messages. Each field reports at most one message
(the first rule it fails), but every field is always checked so the
caller sees all problems in one round trip.

Nothing here touches storage. Uniqueness checks work against whatever
collection the caller passes in.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Mapping, Optional

from .models import ClientRecord, FitnessGoal, Gender, TrainingSession
from .validators import (
    is_not_empty,
    is_valid_age,
    is_valid_date,
    is_valid_email,
    is_valid_phone,
    parse_age,
    parse_date,
)

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
NOTES_MAX_LENGTH = 1000

VALID_GENDERS = frozenset(g.value for g in Gender)
VALID_GOALS = frozenset(g.value for g in FitnessGoal)

# Fields a caller may set on a client; id and the two lists are handled separately.
CLIENT_FIELDS = (
    "name",
    "age",
    "gender",
    "email",
    "phone",
    "fitness_goal",
    "membership_start",
)


@dataclass
class ValidationResult:
    """Outcome of validating a candidate. errors only holds failing fields."""
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _enum_value(value: Any) -> Any:
    return value.value if isinstance(value, (Gender, FitnessGoal)) else value


def _check_name(value: Any) -> Optional[str]:
    if not is_not_empty(value):
        return "Full name is required"
    length = len(str(value).strip())
    if length < NAME_MIN_LENGTH:
        return "Full name must be at least 2 characters"
    if length > NAME_MAX_LENGTH:
        return "Full name must be less than 100 characters"
    return None


def _check_age(value: Any) -> Optional[str]:
    if not is_not_empty(value):
        return "Age is required"
    if not is_valid_age(value):
        return "Age must be greater than 0 and less than or equal to 120"
    return None


def _check_gender(value: Any) -> Optional[str]:
    value = _enum_value(value)
    if not is_not_empty(value):
        return "Gender is required"
    if value not in VALID_GENDERS:
        return "Invalid gender selection"
    return None


def _check_email(
    value: Any,
    existing_records: Iterable[ClientRecord],
    exclude_id: Optional[str],
) -> Optional[str]:
    if not is_not_empty(value):
        return "Email is required"
    if not is_valid_email(value):
        return "Please enter a valid email address"

    wanted = value.strip().lower()
    for record in existing_records:
        if exclude_id is not None and record.id == exclude_id:
            continue
        if record.email.strip().lower() == wanted:
            return "This email is already registered"
    return None


def _check_phone(value: Any) -> Optional[str]:
    if not is_not_empty(value):
        return "Phone number is required"
    if not is_valid_phone(value):
        return "Please enter a valid phone number (7-15 digits, optional + prefix)"
    return None


def _check_goal(value: Any) -> Optional[str]:
    value = _enum_value(value)
    if not is_not_empty(value):
        return "Fitness goal is required"
    if value not in VALID_GOALS:
        return "Invalid fitness goal selection"
    return None


def _check_start_date(value: Any, today: Optional[date]) -> Optional[str]:
    if not is_not_empty(value):
        return "Start date is required"
    if not is_valid_date(value, today=today):
        return "Start date cannot be in the future"
    return None


def _check_history(value: Any, today: Optional[date]) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, (list, tuple)):
        return "Training history must be a list of sessions"
    for position, item in enumerate(value, start=1):
        if isinstance(item, TrainingSession):
            item = {"date": item.date, "notes": item.notes}
        if not isinstance(item, Mapping):
            return f"Session {position}: Session date is required"
        result = validate_training_session(item, today=today)
        if not result.is_valid:
            field = "date" if "date" in result.errors else "notes"
            return f"Session {position}: {result.errors[field]}"
    return None


def validate_client(
    candidate: Mapping[str, Any],
    existing_records: Iterable[ClientRecord] = (),
    exclude_id: Optional[str] = None,
    today: Optional[date] = None,
) -> ValidationResult:
    """
    Validate a candidate client against all field rules.

    Args:
        candidate: Field values keyed by ClientRecord attribute name
        existing_records: Current collection, for the email uniqueness rule
        exclude_id: Record to skip in the uniqueness rule (the one being updated)
        today: Override for the current date (tests)

    Returns:
        ValidationResult with an error for every failing field
    """
    existing = list(existing_records)
    checks = {
        "name": _check_name(candidate.get("name")),
        "age": _check_age(candidate.get("age")),
        "gender": _check_gender(candidate.get("gender")),
        "email": _check_email(candidate.get("email"), existing, exclude_id),
        "phone": _check_phone(candidate.get("phone")),
        "fitness_goal": _check_goal(candidate.get("fitness_goal")),
        "membership_start": _check_start_date(candidate.get("membership_start"), today),
    }
    if "training_history" in candidate:
        checks["training_history"] = _check_history(candidate["training_history"], today)
    return ValidationResult(
        errors={name: message for name, message in checks.items() if message}
    )


def validate_training_session(
    candidate: Mapping[str, Any],
    today: Optional[date] = None,
) -> ValidationResult:
    """Validate a training history entry before it is appended."""
    errors: dict[str, str] = {}

    session_date = candidate.get("date")
    if not is_not_empty(session_date):
        errors["date"] = "Session date is required"
    elif not is_valid_date(session_date, today=today):
        errors["date"] = "Session date cannot be in the future"

    notes = candidate.get("notes")
    if notes is not None and not isinstance(notes, str):
        errors["notes"] = "Notes must be text"
    elif notes and len(notes) > NOTES_MAX_LENGTH:
        errors["notes"] = "Notes must be less than 1000 characters"

    return ValidationResult(errors=errors)


def normalize_client_data(candidate: Mapping[str, Any]) -> dict[str, Any]:
    """
    Convert validated input into the canonical stored values.

    Only fields present in the candidate are returned, so this works for
    partial updates too. Assumes the values already passed validation.
    """
    normalized: dict[str, Any] = {}

    if "name" in candidate:
        normalized["name"] = str(candidate["name"]).strip()
    if "age" in candidate:
        normalized["age"] = parse_age(candidate["age"])
    if "gender" in candidate:
        normalized["gender"] = Gender(_enum_value(candidate["gender"]))
    if "email" in candidate:
        normalized["email"] = candidate["email"].strip().lower()
    if "phone" in candidate:
        normalized["phone"] = candidate["phone"].strip()
    if "fitness_goal" in candidate:
        normalized["fitness_goal"] = FitnessGoal(_enum_value(candidate["fitness_goal"]))
    if "membership_start" in candidate:
        normalized["membership_start"] = parse_date(candidate["membership_start"])
    if "training_history" in candidate:
        normalized["training_history"] = [
            item if isinstance(item, TrainingSession) else TrainingSession.from_dict(item)
            for item in candidate["training_history"] or []
        ]
    if "next_session_exercises" in candidate:
        normalized["next_session_exercises"] = [
            str(item) for item in candidate["next_session_exercises"] or []
        ]

    return normalized


def record_to_candidate(record: ClientRecord) -> dict[str, Any]:
    """Field values of a stored record, in the shape validate_client expects."""
    return {
        "name": record.name,
        "age": record.age,
        "gender": record.gender.value,
        "email": record.email,
        "phone": record.phone,
        "fitness_goal": record.fitness_goal.value,
        "membership_start": record.membership_start.isoformat(),
    }
