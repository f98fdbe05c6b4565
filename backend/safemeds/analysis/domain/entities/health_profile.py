"""
Health Profile Entity

The caller-supplied record used to personalize a safety verdict.
"""

from dataclasses import dataclass, field
from typing import Tuple, Iterable, Optional, Dict, Any
from enum import Enum

from ..exceptions import InvalidProfileError


class Sex(Enum):
    """Biological sex categories accepted in a profile."""

    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"

    @classmethod
    def from_string(cls, value: Optional[str]) -> "Sex":
        """Parse a sex category, case-insensitively."""
        if isinstance(value, Sex):
            return value
        if not value:
            return cls.OTHER

        normalized = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == normalized:
                return member

        raise InvalidProfileError("sex", f"must be one of {[m.value for m in cls]}, got '{value}'")


def _clean_names(values: Optional[Iterable[str]], field_name: str) -> Tuple[str, ...]:
    """Strip names and drop blanks; None becomes an empty tuple."""
    if values is None:
        return ()
    if isinstance(values, str):
        values = [values]
    elif not isinstance(values, (list, tuple, set, frozenset)):
        raise InvalidProfileError(field_name, "must be a list of strings")

    names = []
    for value in values:
        if not isinstance(value, str):
            raise InvalidProfileError(field_name, "must be a list of strings")
        if value.strip():
            names.append(value.strip())
    return tuple(names)


@dataclass(frozen=True)
class HealthProfile:
    """
    Immutable health profile.

    List fields are stored as tuples and are never None.

    Attributes:
        age: Age in years
        sex: Biological sex category
        conditions: Diagnosed conditions (e.g. "Asthma", "High BP")
        allergies: Known allergies (e.g. "Penicillin")
        current_medications: Medications currently taken
    """

    age: int
    sex: Sex = Sex.OTHER
    conditions: Tuple[str, ...] = field(default_factory=tuple)
    allergies: Tuple[str, ...] = field(default_factory=tuple)
    current_medications: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if isinstance(self.age, bool) or not isinstance(self.age, int):
            raise InvalidProfileError("age", "must be an integer")
        if self.age < 0 or self.age > 150:
            raise InvalidProfileError("age", f"out of range: {self.age}")

        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "sex", Sex.from_string(self.sex))
        for name in ("conditions", "allergies", "current_medications"):
            object.__setattr__(self, name, _clean_names(getattr(self, name), name))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the client's camelCase profile shape."""
        return {
            "age": self.age,
            "gender": self.sex.value,
            "conditions": list(self.conditions),
            "allergies": list(self.allergies),
            "currentMeds": list(self.current_medications),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HealthProfile":
        """
        Build a profile from a dictionary.

        Accepts snake_case keys and the client's camelCase keys
        (``gender``, ``currentMeds``). Unknown keys are ignored.
        """
        if "age" not in data:
            raise InvalidProfileError("age", "is required")

        age = data["age"]
        if isinstance(age, str) and age.strip().isdigit():
            age = int(age.strip())

        return cls(
            age=age,
            sex=data.get("sex", data.get("gender")),
            conditions=data.get("conditions"),
            allergies=data.get("allergies"),
            current_medications=data.get(
                "current_medications", data.get("currentMeds", data.get("current_meds"))
            ),
        )
