"""
Prompt Templates

Instructions sent to the generative model for identification and
safety reasoning.
"""

from typing import Iterable

from ..domain.entities.drug_identity import DrugIdentity
from ..domain.entities.health_profile import HealthProfile
from ..domain.entities.reference_summary import ReferenceSummary


IMAGE_IDENTIFICATION_PROMPT = (
    "Identify the drug brand name and active ingredient strictly from the packaging. "
    "If illegible, mark as Unknown."
)

TEXT_IDENTIFICATION_TEMPLATE = (
    'Extract the brand name, active ingredient, and strength from this search query: "{query}". '
    "If it's just a generic name, use it for both."
)

NO_REFERENCE_DATA = "No official FDA data found, rely on internal medical knowledge."

NONE_REPORTED = "None reported"

SAFETY_PROMPT_TEMPLATE = """You are a specialized Medical Safety AI.

Task: Analyze safety for the user.

DRUG: {drug_name} ({active_ingredient})
{strength_line}
OFFICIAL FDA LABEL DATA (Source of Truth for Risks):
{reference}

{profile}

INSTRUCTIONS:
1. Cross-reference User Conditions with FDA Contraindications.
2. Check for Drug-Drug interactions with Current Meds.
3. Check for Allergies.
4. Check for Age/Sex specific risks (e.g. pregnancy categories if applicable).
5. Verdict (choose exactly one of SAFE, CAUTION, DANGER):
   - DANGER: Direct contraindication or allergy (e.g., NSAID + High BP/Kidney disease).
   - CAUTION: Potential interaction or age/sex warning.
   - SAFE: No known conflicts.
6. Interaction Score:
   - Calculate a risk score (0-100) that rises with the severity of the verdict. High BP + NSAID = ~75.
7. Alternatives Logic:
   - If Verdict is DANGER or CAUTION: Suggest 1-2 generic alternatives that are safer for this specific profile.
   - If Verdict is SAFE: Return an empty array.
8. Simple Explanation:
   - Write exactly one "Explain Like a Doctor" version. Warm, personal, non-technical, and different from the clinical reasoning.
9. List the user's conditions that conflict with this drug in contraindicationsDetected, using the user's own wording.
"""


def _join(values: Iterable[str]) -> str:
    values = list(values)
    return ", ".join(values) if values else NONE_REPORTED


def build_text_identification_prompt(query: str) -> str:
    return TEXT_IDENTIFICATION_TEMPLATE.format(query=query.strip().replace('"', "'"))


def format_profile(profile: HealthProfile) -> str:
    """Structured rendering of the health profile."""
    return "\n".join([
        "USER PROFILE:",
        f"- Age: {profile.age}",
        f"- Sex: {profile.sex.value}",
        f"- Conditions: {_join(profile.conditions)}",
        f"- Allergies: {_join(profile.allergies)}",
        f"- Current Meds: {_join(profile.current_medications)}",
    ])


def build_safety_prompt(
    identity: DrugIdentity,
    reference: ReferenceSummary,
    profile: HealthProfile
) -> str:
    """
    Assemble the single safety reasoning request.

    Args:
        identity: Resolved drug identity
        reference: Label summary; empty means rely on general knowledge
        profile: Caller's health profile

    Returns:
        Prompt text
    """
    strength_line = f"Strength: {identity.strength}\n" if identity.strength else ""

    return SAFETY_PROMPT_TEMPLATE.format(
        drug_name=identity.brand_name,
        active_ingredient=identity.active_ingredient,
        strength_line=strength_line,
        reference=reference.text if reference.has_data else NO_REFERENCE_DATA,
        profile=format_profile(profile),
    )
