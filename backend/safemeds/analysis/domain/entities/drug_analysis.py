"""
Drug Analysis Entity

The safety verdict produced by one pipeline invocation.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Dict, Any, Iterable
from enum import Enum
import time

from .drug_identity import DrugIdentity, UNKNOWN
from .reference_summary import ReferenceSummary


class SafetyStatus(Enum):
    """Safety verdict categories."""

    SAFE = "SAFE"
    CAUTION = "CAUTION"
    DANGER = "DANGER"
    UNKNOWN = "UNKNOWN"

    @property
    def is_conclusive(self) -> bool:
        """UNKNOWN is reserved for pipeline failures."""
        return self is not SafetyStatus.UNKNOWN


# User-facing copy for degraded results
SCAN_FAILED_NAME = "Scan Failed"
NOT_APPLICABLE = "N/A"
UNIDENTIFIED_HEADLINE = "Could Not Identify"
UNIDENTIFIED_REASONING = (
    "Please try scanning again with better lighting and a clear view of the text."
)
ANALYSIS_FAILED_HEADLINE = "Analysis Failed"
TEXT_FAILURE_REASONING = "Could not process the text input."
REASONING_FAILURE_REASONING = "The safety analysis could not be completed. Please try again."


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def _as_tuple(values: Optional[Iterable[str]]) -> Tuple[str, ...]:
    if not values:
        return ()
    return tuple(values)


@dataclass(frozen=True)
class DrugAnalysis:
    """
    Immutable safety verdict (a.k.a. SafetyVerdict).

    Ownership passes to the caller, which may persist it (see
    ``to_dict``), display it, or discard it.

    Attributes:
        drug_name: Brand or display name of the drug
        active_ingredient: Generic name
        purpose: What the drug treats
        status: Safety verdict
        headline: Short verdict (e.g. "Do Not Take!", "Safe")
        reasoning: Clinical explanation referencing profile matches
        simple_explanation: Plain-language explanation
        interaction_score: Risk level 0-100
        side_effects: Most common side effects
        safe_alternatives: Safer generic alternatives
        contraindications_detected: Profile conditions that conflict
        timestamp: Creation time in epoch milliseconds
        fda_source: Whether openFDA label data informed the verdict
    """

    drug_name: str
    active_ingredient: str
    purpose: str
    status: SafetyStatus
    headline: str
    reasoning: str
    simple_explanation: Optional[str] = None
    interaction_score: Optional[int] = None
    side_effects: Tuple[str, ...] = field(default_factory=tuple)
    safe_alternatives: Tuple[str, ...] = field(default_factory=tuple)
    contraindications_detected: Tuple[str, ...] = field(default_factory=tuple)
    timestamp: int = field(default_factory=now_ms)
    fda_source: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "side_effects", _as_tuple(self.side_effects))
        object.__setattr__(self, "safe_alternatives", _as_tuple(self.safe_alternatives))
        object.__setattr__(
            self, "contraindications_detected", _as_tuple(self.contraindications_detected)
        )

    @property
    def is_failure(self) -> bool:
        return self.status is SafetyStatus.UNKNOWN

    # -------------------------------------------------------------------------
    # Degraded results
    # -------------------------------------------------------------------------

    @classmethod
    def unidentified_scan(cls, timestamp: Optional[int] = None) -> "DrugAnalysis":
        """Result for an image that could not be identified."""
        return cls(
            drug_name=SCAN_FAILED_NAME,
            active_ingredient=UNKNOWN,
            purpose=NOT_APPLICABLE,
            status=SafetyStatus.UNKNOWN,
            headline=UNIDENTIFIED_HEADLINE,
            reasoning=UNIDENTIFIED_REASONING,
            timestamp=timestamp if timestamp is not None else now_ms(),
        )

    @classmethod
    def text_failure(cls, text: str, timestamp: Optional[int] = None) -> "DrugAnalysis":
        """Result for a text query that could not be processed."""
        return cls(
            drug_name=text,
            active_ingredient=UNKNOWN,
            purpose=NOT_APPLICABLE,
            status=SafetyStatus.UNKNOWN,
            headline=ANALYSIS_FAILED_HEADLINE,
            reasoning=TEXT_FAILURE_REASONING,
            timestamp=timestamp if timestamp is not None else now_ms(),
        )

    @classmethod
    def analysis_failure(
        cls,
        identity: DrugIdentity,
        reference: Optional[ReferenceSummary] = None,
        timestamp: Optional[int] = None
    ) -> "DrugAnalysis":
        """Result for an identified drug whose safety analysis failed."""
        return cls(
            drug_name=identity.brand_name,
            active_ingredient=identity.active_ingredient,
            purpose=NOT_APPLICABLE,
            status=SafetyStatus.UNKNOWN,
            headline=ANALYSIS_FAILED_HEADLINE,
            reasoning=REASONING_FAILURE_REASONING,
            timestamp=timestamp if timestamp is not None else now_ms(),
            fda_source=bool(reference and reference.fda_source),
        )

    # -------------------------------------------------------------------------
    # Serialization (client persistence format)
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase shape the client stores in history."""
        return {
            "drugName": self.drug_name,
            "activeIngredient": self.active_ingredient,
            "purpose": self.purpose,
            "status": self.status.value,
            "headline": self.headline,
            "reasoning": self.reasoning,
            "simpleExplanation": self.simple_explanation,
            "interactionScore": self.interaction_score,
            "sideEffects": list(self.side_effects),
            "safeAlternatives": list(self.safe_alternatives),
            "contraindicationsDetected": list(self.contraindications_detected),
            "timestamp": self.timestamp,
            "fdaSource": self.fda_source,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DrugAnalysis":
        """Rebuild an analysis previously produced by ``to_dict``."""
        return cls(
            drug_name=data["drugName"],
            active_ingredient=data.get("activeIngredient", UNKNOWN),
            purpose=data.get("purpose", NOT_APPLICABLE),
            status=SafetyStatus(data.get("status", SafetyStatus.UNKNOWN.value)),
            headline=data.get("headline", ""),
            reasoning=data.get("reasoning", ""),
            simple_explanation=data.get("simpleExplanation"),
            interaction_score=data.get("interactionScore"),
            side_effects=data.get("sideEffects") or (),
            safe_alternatives=data.get("safeAlternatives") or (),
            contraindications_detected=data.get("contraindicationsDetected") or (),
            timestamp=data.get("timestamp", 0),
            fda_source=bool(data.get("fdaSource", False)),
        )

    def __str__(self) -> str:
        return f"DrugAnalysis({self.drug_name}: {self.status.value}, score={self.interaction_score})"


# Glossary name used by callers
SafetyVerdict = DrugAnalysis
