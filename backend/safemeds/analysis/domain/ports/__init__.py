"""
Ports (Interfaces)

Abstract interfaces defining the contracts for infrastructure adapters.
Following Hexagonal Architecture / Ports & Adapters pattern.
"""

from .generative_model import GenerativeModelPort
from .drug_label import DrugLabelPort

__all__ = [
    "GenerativeModelPort",
    "DrugLabelPort",
]
