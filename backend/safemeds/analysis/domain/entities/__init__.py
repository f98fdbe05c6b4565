"""
Domain Entities

Core domain objects representing profiles, identities and verdicts.
"""

from .health_profile import HealthProfile, Sex
from .drug_identity import DrugIdentity, UNKNOWN, is_unknown
from .reference_summary import ReferenceSummary, MAX_SUMMARY_LENGTH
from .drug_analysis import DrugAnalysis, SafetyVerdict, SafetyStatus
from .pipeline_result import (
    PipelineResult,
    PipelineError,
    PipelineStage,
    PipelineState,
    StageStatus,
    StageResult,
    InputKind,
)

__all__ = [
    "HealthProfile",
    "Sex",
    "DrugIdentity",
    "UNKNOWN",
    "is_unknown",
    "ReferenceSummary",
    "MAX_SUMMARY_LENGTH",
    "DrugAnalysis",
    "SafetyVerdict",
    "SafetyStatus",
    "PipelineResult",
    "PipelineError",
    "PipelineStage",
    "PipelineState",
    "StageStatus",
    "StageResult",
    "InputKind",
]
