"""
Infrastructure Layer

Concrete implementations of domain ports (adapters).
Contains integrations with external services.
"""

from .llm import (
    GeminiGenerativeModel,
    OpenAIGenerativeModel,
    OllamaGenerativeModel,
    DummyGenerativeModel,
    GenerativeModelFactory,
    ModelType,
)
from .openfda import OpenFDALabelClient

__all__ = [
    # Generative models
    "GeminiGenerativeModel",
    "OpenAIGenerativeModel",
    "OllamaGenerativeModel",
    "DummyGenerativeModel",
    "GenerativeModelFactory",
    "ModelType",
    # Reference data
    "OpenFDALabelClient",
]
