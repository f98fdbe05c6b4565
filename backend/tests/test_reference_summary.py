"""
Tests for label summaries and the best-effort reference lookup
"""

from safemeds.analysis.application.reference_data import fetch_reference_summary
from safemeds.analysis.domain.entities.reference_summary import ReferenceSummary, MAX_SUMMARY_LENGTH
from safemeds.analysis.domain.exceptions import LabelLookupError

from conftest import InMemoryLabelRepository, ASPIRIN_LABEL


def test_sections_in_fixed_order_with_prefixes():
    record = {
        "warnings": ["Warning text."],
        "boxed_warning": ["Boxed text."],
        "contraindications": ["Contra one.", "Contra two."],
    }

    summary = ReferenceSummary.from_label(record)

    assert summary.text == (
        "BOXED WARNING: Boxed text.\n\n"
        "CONTRAINDICATIONS: Contra one. Contra two.\n\n"
        "WARNINGS: Warning text."
    )
    assert summary.fda_source


def test_missing_sections_are_omitted():
    summary = ReferenceSummary.from_label(ASPIRIN_LABEL)

    assert "BOXED WARNING" not in summary.text
    assert summary.text.startswith("CONTRAINDICATIONS: ")
    assert "\n\nWARNINGS: Reye's syndrome" in summary.text


def test_summary_truncated_to_limit():
    record = {"warnings": ["x" * 8000], "contraindications": ["y" * 100]}

    summary = ReferenceSummary.from_label(record)

    assert len(summary.text) == MAX_SUMMARY_LENGTH
    assert summary.text.startswith("CONTRAINDICATIONS: ")


def test_record_without_sections_is_empty():
    summary = ReferenceSummary.from_label({"openfda": {"generic_name": ["X"]}})
    assert summary == ReferenceSummary.empty()
    assert not summary.fda_source


def test_lookup_skips_unknown_ingredient():
    repository = InMemoryLabelRepository({"aspirin": ASPIRIN_LABEL})

    assert fetch_reference_summary(repository, "Unknown") == ReferenceSummary.empty()
    assert repository.lookups == []


def test_lookup_without_match_is_empty():
    repository = InMemoryLabelRepository()

    summary = fetch_reference_summary(repository, "zzzzolol")

    assert summary == ReferenceSummary.empty()
    assert repository.lookups == ["zzzzolol"]


def test_lookup_failure_degrades_to_empty():
    repository = InMemoryLabelRepository(error=LabelLookupError("timeout", generic_name="aspirin"))
    assert fetch_reference_summary(repository, "aspirin") == ReferenceSummary.empty()


def test_unexpected_lookup_error_degrades_to_empty():
    repository = InMemoryLabelRepository(error=RuntimeError("boom"))
    assert fetch_reference_summary(repository, "aspirin") == ReferenceSummary.empty()


def test_lookup_found():
    repository = InMemoryLabelRepository({"aspirin": ASPIRIN_LABEL})

    summary = fetch_reference_summary(repository, " Aspirin ")

    assert summary.fda_source
    assert repository.lookups == ["Aspirin"]
