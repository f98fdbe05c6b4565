"""
Tests for prompt assembly
"""

from safemeds.analysis.application.prompts import (
    NO_REFERENCE_DATA,
    build_safety_prompt,
    build_text_identification_prompt,
    format_profile,
)
from safemeds.analysis.domain.entities.drug_identity import DrugIdentity
from safemeds.analysis.domain.entities.health_profile import HealthProfile
from safemeds.analysis.domain.entities.reference_summary import ReferenceSummary


def test_text_identification_prompt_quotes_query():
    prompt = build_text_identification_prompt("  Tylenol PM ")
    assert 'search query: "Tylenol PM"' in prompt


def test_profile_lists_render_none_reported():
    text = format_profile(HealthProfile(age=30, sex="Female"))

    assert "- Age: 30" in text
    assert "- Sex: Female" in text
    assert "- Conditions: None reported" in text
    assert "- Current Meds: None reported" in text


def test_safety_prompt_embeds_reference_and_profile():
    identity = DrugIdentity(brand_name="Advil", active_ingredient="Ibuprofen", strength="200mg")
    reference = ReferenceSummary(text="WARNINGS: Stomach bleeding warning.", fda_source=True)
    profile = HealthProfile(
        age=70, sex="Male", conditions=["Kidney Disease", "High BP"], allergies=["Penicillin"]
    )

    prompt = build_safety_prompt(identity, reference, profile)

    assert "DRUG: Advil (Ibuprofen)" in prompt
    assert "Strength: 200mg" in prompt
    assert "WARNINGS: Stomach bleeding warning." in prompt
    assert "- Conditions: Kidney Disease, High BP" in prompt
    assert "- Allergies: Penicillin" in prompt
    assert NO_REFERENCE_DATA not in prompt


def test_safety_prompt_without_reference():
    identity = DrugIdentity(brand_name="Zzz", active_ingredient="Zzz")

    prompt = build_safety_prompt(identity, ReferenceSummary.empty(), HealthProfile(age=20))

    assert NO_REFERENCE_DATA in prompt
    assert "Strength:" not in prompt
