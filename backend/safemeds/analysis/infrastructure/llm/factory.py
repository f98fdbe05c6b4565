"""
Generative Model Factory

Factory for creating generative model instances.
Supports cloud (Gemini, OpenAI) and local (Ollama) models.
"""

from typing import Dict, Any
from enum import Enum

from ...domain.ports.generative_model import GenerativeModelPort
from .gemini_model import GeminiGenerativeModel
from .dummy_model import DummyGenerativeModel


class ModelType(Enum):
    """Available generative model implementations."""

    GEMINI = "gemini"
    OPENAI = "openai"
    OLLAMA = "ollama"
    DUMMY = "dummy"


DEFAULT_MODELS = {
    ModelType.GEMINI: "gemini-2.5-flash",
    ModelType.OPENAI: "gpt-4o-mini",
    ModelType.OLLAMA: "llama3.2-vision",
}


class GenerativeModelFactory:
    """
    Factory for creating generative model instances.

    Usage:
        # Cloud model (Gemini)
        model = GenerativeModelFactory.create(
            ModelType.GEMINI,
            api_key="your-api-key"
        )

        # Local model (Ollama)
        model = GenerativeModelFactory.create(
            ModelType.OLLAMA,
            model="llama3.2-vision"
        )
    """

    @staticmethod
    def create(
        model_type: ModelType,
        **kwargs
    ) -> GenerativeModelPort:
        """
        Create a generative model instance.

        Args:
            model_type: Type of model to create
            **kwargs: Configuration options
                - api_key: API key (Gemini, OpenAI)
                - model: Model name
                - base_url: API endpoint override
                - timeout: Request timeout in seconds

        Returns:
            GenerativeModelPort implementation
        """
        model = kwargs.get("model") or DEFAULT_MODELS.get(model_type)

        if model_type == ModelType.GEMINI:
            return GeminiGenerativeModel(
                api_key=kwargs.get("api_key"),
                model=model,
                base_url=kwargs.get("base_url"),
                timeout=kwargs.get("timeout", 60)
            )

        elif model_type == ModelType.OPENAI:
            # Import here so the openai package is only needed when selected
            from .openai_model import OpenAIGenerativeModel

            return OpenAIGenerativeModel(
                api_key=kwargs.get("api_key"),
                model=model,
                base_url=kwargs.get("base_url"),
                timeout=kwargs.get("timeout", 60)
            )

        elif model_type == ModelType.OLLAMA:
            from .ollama_model import OllamaGenerativeModel

            return OllamaGenerativeModel(
                base_url=kwargs.get("base_url") or "http://localhost:11434",
                model=model,
                timeout=kwargs.get("timeout", 300)
            )

        elif model_type == ModelType.DUMMY:
            return DummyGenerativeModel()

        else:
            raise ValueError(f"Unknown model type: {model_type}")

    @staticmethod
    def create_from_config(config: Dict[str, Any]) -> GenerativeModelPort:
        """Create a model from a configuration dictionary (see ModelConfig)."""
        type_str = str(config.get("type", "gemini")).lower()

        try:
            model_type = ModelType(type_str)
        except ValueError:
            if type_str in ("google", "gemini-2.5-flash"):
                model_type = ModelType.GEMINI
            elif type_str in ("gpt", "gpt-4o"):
                model_type = ModelType.OPENAI
            elif type_str == "local":
                model_type = ModelType.OLLAMA
            else:
                raise ValueError(f"Unknown model type: {type_str}")

        options = {k: v for k, v in config.items() if k != "type"}
        return GenerativeModelFactory.create(model_type, **options)
