"""
Generative Model Port

Abstract interface for hosted vision/language models that answer with
schema-constrained JSON.
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List

from ..value_objects.content_part import ContentPart


class GenerativeModelPort(ABC):
    """
    Port (interface) for generative model implementations.

    Used twice per analysis:
    - Identification: text or inline image bytes -> identity JSON
    - Safety reasoning: prompt text -> safety verdict JSON

    Implementations may use:
    - Google Gemini
    - OpenAI GPT-4o family
    - Local models served by Ollama
    """

    @abstractmethod
    def generate_json(
        self,
        parts: List[ContentPart],
        schema: Dict[str, Any],
        temperature: Optional[float] = None
    ) -> Dict[str, Any]:
        """
        Request a JSON object conforming to ``schema``.

        Args:
            parts: Ordered request content (text and/or inline images)
            schema: JSON Schema describing the expected object; its
                ``title`` names the schema
            temperature: Sampling temperature, None for the model default

        Returns:
            The decoded JSON object. Conformance to ``schema`` is NOT
            guaranteed; callers must validate it.

        Raises:
            ModelConnectionError: Transport failure or non-2xx response
            ModelResponseError: Body is not a JSON object
        """
        pass

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model identifier."""
        pass

    @property
    def supports_images(self) -> bool:
        """Whether inline image parts are accepted."""
        return True
