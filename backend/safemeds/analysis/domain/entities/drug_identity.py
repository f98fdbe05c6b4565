"""
Drug Identity Entity

Normalized identity produced by the identification stage.
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any


UNKNOWN = "Unknown"


def is_unknown(value: Optional[str]) -> bool:
    """True for empty values and the "Unknown" sentinel."""
    if value is None:
        return True
    normalized = value.strip()
    return not normalized or normalized.lower() == UNKNOWN.lower()


@dataclass(frozen=True)
class DrugIdentity:
    """
    Immutable drug identity.

    An active ingredient of "Unknown" is the single failure signal the
    pipeline checks before calling the reference and reasoning stages.

    Attributes:
        brand_name: Commercial name of the drug
        active_ingredient: Generic chemical name
        strength: Dosage strength if visible (e.g. "500mg")
    """

    brand_name: str = UNKNOWN
    active_ingredient: str = UNKNOWN
    strength: Optional[str] = None

    @property
    def is_resolved(self) -> bool:
        """Check whether an active ingredient was identified."""
        return not is_unknown(self.active_ingredient)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "brandName": self.brand_name,
            "activeIngredient": self.active_ingredient,
            "strength": self.strength,
        }

    def __str__(self) -> str:
        strength = f" {self.strength}" if self.strength else ""
        return f"{self.brand_name} ({self.active_ingredient}){strength}"
