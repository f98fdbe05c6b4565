"""
Disclaimer Injection

Mandatory disclaimers attached to safety verdicts.
"""

from typing import Optional

from ...domain.entities.drug_analysis import DrugAnalysis, SafetyStatus


SHORT_DISCLAIMER = "⚠️ AI-generated guidance. Confirm with your doctor or pharmacist."

DANGER_NOTICE = "⚠️ Potentially dangerous for this profile. Do not take without speaking to a doctor."

RETRY_NOTICE = "No verdict could be produced. Nothing here should be read as safe or unsafe."


class DisclaimerInjector:
    """
    Chooses the disclaimer text that accompanies a verdict.
    """

    def get_status_notice(self, analysis: DrugAnalysis) -> Optional[str]:
        """Extra notice for DANGER and UNKNOWN verdicts."""
        if analysis.status is SafetyStatus.DANGER:
            return DANGER_NOTICE
        if analysis.status is SafetyStatus.UNKNOWN:
            return RETRY_NOTICE
        return None

    def for_analysis(self, analysis: DrugAnalysis) -> str:
        """
        Disclaimer block for an analysis: the status notice (if any)
        followed by the short disclaimer.
        """
        notice = self.get_status_notice(analysis)
        if notice:
            return f"{notice}\n{SHORT_DISCLAIMER}"
        return SHORT_DISCLAIMER
