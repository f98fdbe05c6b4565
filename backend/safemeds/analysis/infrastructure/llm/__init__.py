"""
Generative Model Adapters

Implementations of GenerativeModelPort for identification and safety
reasoning. Supports cloud (Gemini, OpenAI) and local (Ollama) models.
"""

from .gemini_model import GeminiGenerativeModel
from .openai_model import OpenAIGenerativeModel
from .ollama_model import OllamaGenerativeModel
from .dummy_model import DummyGenerativeModel
from .factory import GenerativeModelFactory, ModelType

__all__ = [
    "GeminiGenerativeModel",
    "OpenAIGenerativeModel",
    "OllamaGenerativeModel",
    "DummyGenerativeModel",
    "GenerativeModelFactory",
    "ModelType",
]
