"""
OpenAI Generative Model

Structured-output adapter for OpenAI chat completions using
``response_format`` JSON schemas and image data URLs.
"""

from typing import Optional, Dict, Any, List
import logging
import os
import time

from ...domain.ports.generative_model import GenerativeModelPort
from ...domain.value_objects.content_part import ContentPart
from ...domain.exceptions import ModelConnectionError, ModelResponseError
from .json_response import parse_json_object


logger = logging.getLogger(__name__)


class OpenAIGenerativeModel(GenerativeModelPort):
    """
    Generative model implementation using OpenAI GPT-4o class models.

    Attributes:
        api_key: OpenAI API key (or set OPENAI_API_KEY env var)
        model: Chat model name
        base_url: Compatible endpoint override
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        timeout: int = 60,
        client=None
    ):
        self._api_key = api_key
        self._model = model
        self._base_url = base_url
        self._timeout = timeout
        self._client = client

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _initialize(self) -> None:
        """Lazy initialization of OpenAI client."""
        if self._client is not None:
            return

        from openai import OpenAI

        api_key = self._api_key or os.environ.get("OPENAI_API_KEY")
        if not api_key:
            raise ModelConnectionError(
                "OpenAI API key not provided. Set OPENAI_API_KEY or pass api_key parameter.",
                provider="OpenAI"
            )

        self._client = OpenAI(api_key=api_key, base_url=self._base_url, timeout=self._timeout)
        self.logger.info(f"OpenAI client initialized with model={self._model}")

    @staticmethod
    def _to_openai_part(part: ContentPart) -> Dict[str, Any]:
        if part.is_text:
            return {"type": "text", "text": part.text}
        return {
            "type": "image_url",
            "image_url": {"url": f"data:{part.mime_type};base64,{part.base64_data}"},
        }

    def generate_json(
        self,
        parts: List[ContentPart],
        schema: Dict[str, Any],
        temperature: Optional[float] = None
    ) -> Dict[str, Any]:
        self._initialize()
        start_time = time.time()

        request: Dict[str, Any] = {
            "model": self._model,
            "messages": [
                {"role": "user", "content": [self._to_openai_part(p) for p in parts]},
            ],
            "response_format": {
                "type": "json_schema",
                "json_schema": {
                    "name": schema.get("title", "response"),
                    "schema": schema,
                    "strict": False,
                },
            },
        }
        if temperature is not None:
            request["temperature"] = temperature

        try:
            response = self._client.chat.completions.create(**request)
        except Exception as e:
            self.logger.error(f"OpenAI API call failed: {e}")
            raise ModelConnectionError(
                f"OpenAI API error: {e}",
                status_code=getattr(e, "status_code", None),
                provider="OpenAI"
            )

        if not response.choices:
            raise ModelResponseError("OpenAI returned no choices", provider="OpenAI")

        result = parse_json_object(response.choices[0].message.content or "", provider="OpenAI")

        elapsed = (time.time() - start_time) * 1000
        self.logger.info(
            f"OpenAI {schema.get('title', 'response')} generated in {elapsed:.0f}ms"
        )
        return result

    @property
    def model_name(self) -> str:
        return self._model
