"""
Helpers for decoding model answers into JSON objects.
"""

from typing import Dict, Any
import json
import re

from ...domain.exceptions import ModelResponseError


# Some local models wrap structured output in a markdown fence
_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def parse_json_object(text: str, provider: str) -> Dict[str, Any]:
    """
    Decode a model answer that must be a single JSON object.

    Raises:
        ModelResponseError: If the text is empty, not JSON, or not an object
    """
    if not text or not text.strip():
        raise ModelResponseError("Model returned an empty response", provider=provider)

    text = text.strip()
    match = _FENCE_PATTERN.match(text)
    if match:
        text = match.group(1)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ModelResponseError(
            f"Model response is not valid JSON: {e}",
            raw_response=text,
            provider=provider
        )

    if not isinstance(data, dict):
        raise ModelResponseError(
            f"Model response is a JSON {type(data).__name__}, expected an object",
            raw_response=text,
            provider=provider
        )

    return data
