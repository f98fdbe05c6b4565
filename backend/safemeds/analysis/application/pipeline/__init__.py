"""
Pipeline Module

Contains pipeline orchestration, context management, and stage definitions.
"""

from .orchestrator import PipelineOrchestrator, PipelineBuilder, PipelineConfig
from .context import PipelineContext
from .stages import (
    PipelineStageExecutor,
    StageConfig,
    IdentificationStage,
    ReferenceDataStage,
    SafetyReasoningStage,
)

__all__ = [
    "PipelineOrchestrator",
    "PipelineBuilder",
    "PipelineConfig",
    "PipelineContext",
    "PipelineStageExecutor",
    "StageConfig",
    "IdentificationStage",
    "ReferenceDataStage",
    "SafetyReasoningStage",
]
