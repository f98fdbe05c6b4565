"""
Medication Safety Analysis

Personalized safety verdicts for a medication, from a packaging photo or
a drug name, checked against the user's health profile.
Pipeline: IDENTIFICATION → REFERENCE DATA (openFDA) → SAFETY REASONING
"""

__version__ = "1.0.0"
__author__ = "SafeMeds Team"

from .bootstrap import create_analysis_service
from .application.services.drug_analysis_service import DrugAnalysisService
from .domain.entities.health_profile import HealthProfile, Sex
from .domain.entities.drug_analysis import DrugAnalysis, SafetyStatus

__all__ = [
    "create_analysis_service",
    "DrugAnalysisService",
    "HealthProfile",
    "Sex",
    "DrugAnalysis",
    "SafetyStatus",
]
