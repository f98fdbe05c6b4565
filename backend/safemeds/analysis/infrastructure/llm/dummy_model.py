"""
Dummy Generative Model

Offline stand-in that answers deterministically, for development
without API keys.
"""

from typing import Optional, Dict, Any, List
import re

from ...domain.ports.generative_model import GenerativeModelPort
from ...domain.value_objects.content_part import ContentPart


_QUERY_PATTERN = re.compile(r'search query: "(.+?)"')
_CONDITIONS_PATTERN = re.compile(r"^- Conditions: (.+)$", re.MULTILINE)


class DummyGenerativeModel(GenerativeModelPort):
    """
    Dummy generative model for testing.

    Photographs always identify as Acetaminophen; text queries resolve to
    themselves. The verdict is CAUTION when the profile lists conditions
    and SAFE otherwise.
    """

    def generate_json(
        self,
        parts: List[ContentPart],
        schema: Dict[str, Any],
        temperature: Optional[float] = None
    ) -> Dict[str, Any]:
        text = "\n".join(p.text for p in parts if p.is_text)

        if schema.get("title") == "DrugIdentity":
            return self._identity(text, has_image=any(p.is_inline_data for p in parts))
        return self._verdict(text)

    @staticmethod
    def _identity(text: str, has_image: bool) -> Dict[str, Any]:
        if has_image:
            return {
                "brandName": "Tylenol Extra Strength",
                "activeIngredient": "Acetaminophen",
                "strength": "500mg",
            }
        match = _QUERY_PATTERN.search(text)
        name = match.group(1) if match else "Unknown"
        return {"brandName": name, "activeIngredient": name}

    @staticmethod
    def _verdict(text: str) -> Dict[str, Any]:
        match = _CONDITIONS_PATTERN.search(text)
        conditions = match.group(1) if match else "None reported"

        if conditions == "None reported":
            return {
                "purpose": "Demo purpose",
                "status": "SAFE",
                "headline": "Safe",
                "reasoning": "This is a test response from the offline model.",
                "simpleExplanation": "This is only a demo answer, so please ask your pharmacist.",
                "interactionScore": 5,
                "sideEffects": ["Nausea"],
                "safeAlternatives": [],
                "contraindicationsDetected": [],
            }

        return {
            "purpose": "Demo purpose",
            "status": "CAUTION",
            "headline": "Use With Caution",
            "reasoning": f"Test response: review use with {conditions}.",
            "simpleExplanation": "This is only a demo answer, so please ask your pharmacist.",
            "interactionScore": 40,
            "sideEffects": ["Nausea"],
            "safeAlternatives": ["Consult a pharmacist"],
            "contraindicationsDetected": [c.strip() for c in conditions.split(",")],
        }

    @property
    def model_name(self) -> str:
        return "DummyModel"
