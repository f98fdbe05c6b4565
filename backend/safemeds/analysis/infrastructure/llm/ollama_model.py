"""
Ollama Generative Model

Local model implementation using Ollama's chat API with structured
outputs. Vision-capable models (e.g. llama3.2-vision, qwen2.5vl) are
needed for packaging photographs.
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


class OllamaGenerativeModel(GenerativeModelPort):
    """
    Generative model using a local Ollama server.

    Attributes:
        base_url: Ollama API base URL (default: http://localhost:11434)
        model: Model name (e.g., "llama3.2-vision")
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "llama3.2-vision",
        timeout: int = 300,
        session: Optional[requests.Session] = None
    ):
        self._base_url = base_url.rstrip('/')
        self._model = model
        self._timeout = timeout
        self._session = session

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _init_session(self) -> None:
        """Initialize HTTP session."""
        self._session = requests.Session()
        self._session.headers.update({
            'Content-Type': 'application/json',
        })

    def _build_payload(
        self,
        parts: List[ContentPart],
        schema: Dict[str, Any],
        temperature: Optional[float]
    ) -> Dict[str, Any]:
        message: Dict[str, Any] = {
            "role": "user",
            "content": "\n\n".join(p.text for p in parts if p.is_text),
        }
        images = [p.base64_data for p in parts if p.is_inline_data]
        if images:
            message["images"] = images

        payload: Dict[str, Any] = {
            "model": self._model,
            "messages": [message],
            "format": schema,
            "stream": False,
        }
        if temperature is not None:
            payload["options"] = {"temperature": temperature}
        return payload

    def generate_json(
        self,
        parts: List[ContentPart],
        schema: Dict[str, Any],
        temperature: Optional[float] = None
    ) -> Dict[str, Any]:
        if not self._session:
            self._init_session()

        start_time = time.time()
        payload = self._build_payload(parts, schema, temperature)

        try:
            self.logger.info(f"Calling Ollama with model {self._model}...")
            response = self._session.post(
                f"{self._base_url}/api/chat",
                json=payload,
                timeout=self._timeout
            )
        except requests.RequestException as e:
            self.logger.error(f"Ollama API call failed: {e}")
            raise ModelConnectionError(f"Ollama API error: {e}", provider="Ollama")

        if not response.ok:
            raise ModelConnectionError(
                f"Ollama returned HTTP {response.status_code}. Run: ollama pull {self._model}",
                status_code=response.status_code,
                provider="Ollama"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ModelResponseError(
                f"Ollama returned a non-JSON body: {e}",
                raw_response=response.text,
                provider="Ollama"
            )

        content = (body.get("message") or {}).get("content", "")
        result = parse_json_object(content, provider="Ollama")

        elapsed = (time.time() - start_time) * 1000
        self.logger.info(f"Ollama {schema.get('title', 'response')} generated in {elapsed:.0f}ms")
        return result

    @property
    def model_name(self) -> str:
        return self._model
