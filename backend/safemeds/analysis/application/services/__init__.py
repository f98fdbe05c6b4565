"""
Application Services

High-level services that coordinate domain operations.
"""

from .drug_analysis_service import DrugAnalysisService

__all__ = [
    "DrugAnalysisService",
]
