"""
Domain models for client management.

These models represent the core business concepts. They have no dependencies
on web frameworks, storage backends, or external APIs. The same shapes are
used whether a record lives in process memory or in a serialized blob.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Mapping, Optional


class Gender(Enum):
    """Gender options offered on the client form."""
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class FitnessGoal(Enum):
    """The training goal a client signs up with."""
    WEIGHT_LOSS = "Weight Loss"
    MUSCLE_GAIN = "Muscle Gain"
    GENERAL_FITNESS = "General Fitness"
    ENDURANCE = "Endurance"


@dataclass(frozen=True)
class TrainingSession:
    """
    One completed training session in a client's history.

    Frozen because history entries are values: once logged, a session
    is never edited in place.
    """
    date: date
    notes: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date.isoformat(), "notes": self.notes}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TrainingSession":
        raw_date = data.get("date")
        if isinstance(raw_date, date):
            session_date = raw_date
        else:
            session_date = date.fromisoformat(str(raw_date)[:10])
        return cls(date=session_date, notes=str(data.get("notes") or ""))


@dataclass
class ClientRecord:
    """
    A client of the fitness business.

    This is the aggregate root: it owns the client's training history
    and the exercises planned for their next session. Both lists are
    always present, even when empty.
    """
    id: str
    name: str
    age: int
    gender: Gender
    email: str
    phone: str
    fitness_goal: FitnessGoal
    membership_start: date
    training_history: list[TrainingSession] = field(default_factory=list)
    next_session_exercises: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Client identifier cannot be empty")
        if self.training_history is None:
            self.training_history = []
        if self.next_session_exercises is None:
            self.next_session_exercises = []

    @property
    def has_history(self) -> bool:
        return bool(self.training_history)

    @property
    def last_session(self) -> Optional[TrainingSession]:
        """Most recently logged session, if any."""
        return self.training_history[-1] if self.training_history else None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON shape used on the wire and in blobs."""
        return {
            "id": self.id,
            "name": self.name,
            "age": self.age,
            "gender": self.gender.value,
            "email": self.email,
            "phone": self.phone,
            "fitnessGoal": self.fitness_goal.value,
            "membershipStart": self.membership_start.isoformat(),
            "trainingHistory": [s.to_dict() for s in self.training_history],
            "nextSessionExercises": list(self.next_session_exercises),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ClientRecord":
        """
        Rebuild a record from its serialized form.

        Raises ValueError/KeyError on malformed input; callers decide
        whether that is fatal.
        """
        return cls(
            id=str(data["id"]),
            name=data["name"],
            age=int(data["age"]),
            gender=Gender(data["gender"]),
            email=data["email"],
            phone=data["phone"],
            fitness_goal=FitnessGoal(data["fitnessGoal"]),
            membership_start=date.fromisoformat(str(data["membershipStart"])[:10]),
            training_history=[
                TrainingSession.from_dict(item)
                for item in data.get("trainingHistory") or []
            ],
            next_session_exercises=[
                str(item) for item in data.get("nextSessionExercises") or []
            ],
        )


@dataclass(frozen=True)
class ClientSummary:
    """Dashboard statistics over the whole collection."""
    total: int
    new_this_month: int
    goal_counts: dict[str, int]
