"""
Structured Output Schemas

JSON Schemas sent to the generative model and the pydantic models that
validate what comes back. Model output is untrusted: nothing reaches the
domain before it has been parsed here.
"""

from typing import List, Optional, Dict, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..domain.entities.drug_identity import DrugIdentity, UNKNOWN, is_unknown
from ..domain.entities.drug_analysis import DrugAnalysis, SafetyStatus
from ..domain.entities.reference_summary import ReferenceSummary
from ..domain.exceptions import SchemaViolationError


# =============================================================================
# Schemas sent to the model
# =============================================================================

IDENTITY_SCHEMA: Dict[str, Any] = {
    "title": "DrugIdentity",
    "type": "object",
    "properties": {
        "brandName": {
            "type": "string",
            "description": "Commercial name of the drug",
        },
        "activeIngredient": {
            "type": "string",
            "description": "Generic chemical name (e.g. Paracetamol, Ibuprofen)",
        },
        "strength": {
            "type": "string",
            "description": "Dosage strength if visible (e.g. 500mg)",
        },
    },
    "required": ["brandName", "activeIngredient"],
}

SAFETY_SCHEMA: Dict[str, Any] = {
    "title": "SafetyVerdict",
    "type": "object",
    "properties": {
        "purpose": {
            "type": "string",
            "description": "What this drug treats",
        },
        "status": {
            "type": "string",
            "enum": ["SAFE", "CAUTION", "DANGER"],
            "description": "Safety verdict based on profile",
        },
        "headline": {
            "type": "string",
            "description": "Short, punchy verdict (e.g., 'Do Not Take!', 'Safe')",
        },
        "reasoning": {
            "type": "string",
            "description": "Clinical explanation referencing specific profile matches",
        },
        "simpleExplanation": {
            "type": "string",
            "description": (
                "A reassuring, jargon-free explanation (max 2 sentences) "
                "as if spoken by a friendly family doctor."
            ),
        },
        "interactionScore": {
            "type": "integer",
            "description": "Risk level 0-100, where 0 is safe and 100 is lethal.",
        },
        "sideEffects": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Top 3 side effects",
        },
        "safeAlternatives": {
            "type": "array",
            "items": {"type": "string"},
            "description": "List 1-2 generic alternatives if verdict is DANGER/CAUTION. Empty if SAFE.",
        },
        "contraindicationsDetected": {
            "type": "array",
            "items": {"type": "string"},
            "description": "List of user conditions that conflict",
        },
    },
    "required": [
        "purpose",
        "status",
        "headline",
        "reasoning",
        "simpleExplanation",
        "sideEffects",
    ],
}


# =============================================================================
# Response models
# =============================================================================

class IdentityPayload(BaseModel):
    """Identification response. Every field may be missing; defaults are applied later."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    brand_name: Optional[str] = Field(default=None, alias="brandName")
    active_ingredient: Optional[str] = Field(default=None, alias="activeIngredient")
    strength: Optional[str] = None

    @field_validator("brand_name", "active_ingredient", "strength")
    @classmethod
    def strip_blank(cls, v):
        if v is None:
            return None
        v = v.strip()
        return v or None

    def to_image_identity(self) -> DrugIdentity:
        """Identity for a photographed package: missing ingredient stays Unknown."""
        return DrugIdentity(
            brand_name=self.brand_name or "Unknown Drug",
            active_ingredient=self.active_ingredient or UNKNOWN,
            strength=self.strength,
        )

    def to_text_identity(self, query: str) -> DrugIdentity:
        """Identity for a typed query: unresolved fields fall back to the query."""
        query = query.strip()
        return DrugIdentity(
            brand_name=query if is_unknown(self.brand_name) else self.brand_name,
            active_ingredient=query if is_unknown(self.active_ingredient) else self.active_ingredient,
            strength=self.strength,
        )


class SafetyPayload(BaseModel):
    """Safety reasoning response."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    purpose: str
    status: Literal["SAFE", "CAUTION", "DANGER"]
    headline: str
    reasoning: str
    simple_explanation: str = Field(alias="simpleExplanation")
    interaction_score: Optional[int] = Field(default=None, alias="interactionScore", ge=0, le=100)
    side_effects: List[str] = Field(alias="sideEffects")
    safe_alternatives: Optional[List[str]] = Field(default=None, alias="safeAlternatives")
    contraindications_detected: Optional[List[str]] = Field(
        default=None, alias="contraindicationsDetected"
    )

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    def to_analysis(
        self,
        identity: DrugIdentity,
        reference: ReferenceSummary,
        timestamp: int
    ) -> DrugAnalysis:
        """
        Build the verdict, applying the defaulting rules:
        missing score -> 0, missing lists -> empty, SAFE -> no alternatives.
        """
        status = SafetyStatus(self.status)
        alternatives = self.safe_alternatives or []
        if status is SafetyStatus.SAFE:
            alternatives = []

        return DrugAnalysis(
            drug_name=identity.brand_name,
            active_ingredient=identity.active_ingredient,
            purpose=self.purpose,
            status=status,
            headline=self.headline,
            reasoning=self.reasoning,
            simple_explanation=self.simple_explanation,
            interaction_score=self.interaction_score if self.interaction_score is not None else 0,
            side_effects=self.side_effects,
            safe_alternatives=alternatives,
            contraindications_detected=self.contraindications_detected or [],
            timestamp=timestamp,
            fda_source=reference.fda_source,
        )


def _validation_messages(error: ValidationError) -> List[str]:
    return [
        f"{'.'.join(str(p) for p in e['loc']) or '<root>'}: {e['msg']}"
        for e in error.errors()
    ]


def parse_identity(raw: Any) -> IdentityPayload:
    """
    Validate an identification response.

    Raises:
        SchemaViolationError: If the response is not a conforming object
    """
    if not isinstance(raw, dict):
        raise SchemaViolationError(IDENTITY_SCHEMA["title"], errors=["response is not an object"])
    try:
        return IdentityPayload.model_validate(raw)
    except ValidationError as e:
        raise SchemaViolationError(IDENTITY_SCHEMA["title"], errors=_validation_messages(e))


def parse_safety(raw: Any) -> SafetyPayload:
    """
    Validate a safety reasoning response.

    Raises:
        SchemaViolationError: If the response is not a conforming object
    """
    if not isinstance(raw, dict):
        raise SchemaViolationError(SAFETY_SCHEMA["title"], errors=["response is not an object"])
    try:
        return SafetyPayload.model_validate(raw)
    except ValidationError as e:
        raise SchemaViolationError(SAFETY_SCHEMA["title"], errors=_validation_messages(e))
