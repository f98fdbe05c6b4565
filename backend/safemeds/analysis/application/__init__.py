"""
Application Layer

Pipeline orchestration, context management, and application services.
"""

from .pipeline import PipelineOrchestrator, PipelineBuilder, PipelineContext
from .services import DrugAnalysisService

__all__ = [
    "PipelineOrchestrator",
    "PipelineBuilder",
    "PipelineContext",
    "DrugAnalysisService",
]
