"""
Gemini Generative Model

Structured-output adapter for Google's Generative Language REST API.
Handles both packaging photographs (inline image bytes) and plain
text prompts.
"""

from typing import Optional, Dict, Any, List
import logging
import time

import requests

from ...domain.ports.generative_model import GenerativeModelPort
from ...domain.value_objects.content_part import ContentPart
from ...domain.exceptions import ModelConnectionError, ModelResponseError
from .json_response import parse_json_object


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

# JSON Schema keywords Gemini's responseSchema does not accept
_UNSUPPORTED_SCHEMA_KEYS = {"title", "$schema", "additionalProperties"}


def to_gemini_schema(schema: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert a JSON Schema into Gemini's OpenAPI-style schema.

    Type names are upper-cased (``string`` -> ``STRING``) and
    unsupported keywords are dropped, recursively.
    """
    converted: Dict[str, Any] = {}
    for key, value in schema.items():
        if key in _UNSUPPORTED_SCHEMA_KEYS:
            continue
        if key == "type" and isinstance(value, str):
            converted[key] = value.upper()
        elif key == "properties":
            converted[key] = {name: to_gemini_schema(prop) for name, prop in value.items()}
        elif key == "items":
            converted[key] = to_gemini_schema(value)
        else:
            converted[key] = value
    return converted


class GeminiGenerativeModel(GenerativeModelPort):
    """
    Generative model implementation using Gemini ``generateContent``.

    Attributes:
        api_key: Google AI Studio API key
        model: Gemini model name
        base_url: API root (override for proxies)
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gemini-2.5-flash",
        base_url: Optional[str] = None,
        timeout: int = 60,
        session: Optional[requests.Session] = None
    ):
        self._api_key = api_key
        self._model = model
        self._base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self._timeout = timeout
        self._session = session

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _init_session(self) -> None:
        """Initialize HTTP session."""
        if not self._api_key:
            raise ModelConnectionError(
                "Gemini API key not provided. Set SAFEMEDS_API_KEY or GEMINI_API_KEY.",
                provider="Gemini"
            )
        self._session = requests.Session()
        self._session.headers.update({
            "Content-Type": "application/json",
            "x-goog-api-key": self._api_key,
        })

    @staticmethod
    def _to_gemini_part(part: ContentPart) -> Dict[str, Any]:
        if part.is_text:
            return {"text": part.text}
        return {"inline_data": {"mime_type": part.mime_type, "data": part.base64_data}}

    def _build_payload(
        self,
        parts: List[ContentPart],
        schema: Dict[str, Any],
        temperature: Optional[float]
    ) -> Dict[str, Any]:
        generation_config: Dict[str, Any] = {
            "responseMimeType": "application/json",
            "responseSchema": to_gemini_schema(schema),
        }
        if temperature is not None:
            generation_config["temperature"] = temperature

        return {
            "contents": [{"role": "user", "parts": [self._to_gemini_part(p) for p in parts]}],
            "generationConfig": generation_config,
        }

    def generate_json(
        self,
        parts: List[ContentPart],
        schema: Dict[str, Any],
        temperature: Optional[float] = None
    ) -> Dict[str, Any]:
        if not self._session:
            self._init_session()

        start_time = time.time()
        url = f"{self._base_url}/models/{self._model}:generateContent"
        payload = self._build_payload(parts, schema, temperature)

        try:
            response = self._session.post(url, json=payload, timeout=self._timeout)
        except requests.RequestException as e:
            self.logger.error(f"Gemini API call failed: {e}")
            raise ModelConnectionError(f"Gemini API error: {e}", provider="Gemini")

        if not response.ok:
            raise ModelConnectionError(
                f"Gemini API returned HTTP {response.status_code}",
                status_code=response.status_code,
                provider="Gemini"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ModelResponseError(
                f"Gemini API returned a non-JSON body: {e}",
                raw_response=response.text,
                provider="Gemini"
            )

        text = self._extract_text(body)
        result = parse_json_object(text, provider="Gemini")

        elapsed = (time.time() - start_time) * 1000
        self.logger.info(
            f"Gemini {schema.get('title', 'response')} generated in {elapsed:.0f}ms"
        )
        return result

    @staticmethod
    def _extract_text(body: Dict[str, Any]) -> str:
        """Concatenate the text parts of the first candidate."""
        candidates = body.get("candidates") or []
        if not candidates:
            reason = (body.get("promptFeedback") or {}).get("blockReason", "no candidates")
            raise ModelResponseError(f"Gemini returned no answer ({reason})", provider="Gemini")

        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(p.get("text", "") for p in parts)

    @property
    def model_name(self) -> str:
        return self._model
