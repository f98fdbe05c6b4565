"""
Reference Data Lookup

Best-effort enrichment of an identified drug with official label warnings.
"""

import logging

from ..domain.ports.drug_label import DrugLabelPort
from ..domain.entities.drug_identity import is_unknown
from ..domain.entities.reference_summary import ReferenceSummary, MAX_SUMMARY_LENGTH
from ..cross_cutting.error_handling import handle_exception


logger = logging.getLogger(__name__)


@handle_exception(default_return=ReferenceSummary.empty(), log_level=logging.WARNING)
def fetch_reference_summary(
    repository: DrugLabelPort,
    active_ingredient: str,
    max_length: int = MAX_SUMMARY_LENGTH
) -> ReferenceSummary:
    """
    Fetch and summarize the label for an active ingredient.

    Never raises: lookup failures of any kind degrade to an empty summary.
    An empty or "Unknown" ingredient returns the empty summary without
    touching the repository.

    Args:
        repository: Drug label source
        active_ingredient: Generic name to look up
        max_length: Maximum summary length in characters

    Returns:
        ReferenceSummary (empty when no data is available)
    """
    if is_unknown(active_ingredient):
        return ReferenceSummary.empty()

    record = repository.fetch_label(active_ingredient.strip())
    if record is None:
        logger.info(f"No {repository.source_name} label found for '{active_ingredient}'")
        return ReferenceSummary.empty()

    summary = ReferenceSummary.from_label(record, max_length=max_length)
    logger.info(
        f"{repository.source_name} summary for '{active_ingredient}': "
        f"{len(summary.text)} chars"
    )
    return summary
