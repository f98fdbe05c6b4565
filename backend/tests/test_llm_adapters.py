"""
Tests for the generative model adapters (network mocked)
"""

import json
from types import SimpleNamespace
from unittest.mock import Mock

import pytest
import requests

from safemeds.analysis.application.schemas import IDENTITY_SCHEMA, SAFETY_SCHEMA
from safemeds.analysis.domain.exceptions import ModelConnectionError, ModelResponseError
from safemeds.analysis.domain.value_objects.content_part import ContentPart
from safemeds.analysis.domain.value_objects.image_data import ImageData
from safemeds.analysis.infrastructure.llm import (
    DummyGenerativeModel,
    GeminiGenerativeModel,
    GenerativeModelFactory,
    ModelType,
    OllamaGenerativeModel,
    OpenAIGenerativeModel,
)
from safemeds.analysis.infrastructure.llm.gemini_model import to_gemini_schema
from safemeds.analysis.infrastructure.llm.json_response import parse_json_object

from conftest import ASPIRIN_IDENTITY


def _http_response(status_code=200, body=None):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.json.return_value = body
    response.text = json.dumps(body)
    return response


def _session(response=None, error=None):
    session = Mock()
    if error:
        session.post.side_effect = error
    else:
        session.post.return_value = response
    return session


def _gemini_body(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


@pytest.fixture
def image_parts(png_bytes):
    return [
        ContentPart.from_image(ImageData.from_bytes(png_bytes, format="png")),
        ContentPart.from_text("Identify the medication."),
    ]


# =============================================================================
# JSON decoding
# =============================================================================

def test_fenced_json_is_unwrapped():
    text = '```json\n{"brandName": "Advil"}\n```'
    assert parse_json_object(text, provider="test") == {"brandName": "Advil"}


@pytest.mark.parametrize("text", ["", "   ", "not json", "[1, 2]"])
def test_non_object_answers_rejected(text):
    with pytest.raises(ModelResponseError):
        parse_json_object(text, provider="test")


# =============================================================================
# Gemini
# =============================================================================

def test_gemini_schema_conversion():
    converted = to_gemini_schema(SAFETY_SCHEMA)

    assert "title" not in converted
    assert converted["type"] == "OBJECT"
    assert converted["properties"]["status"]["type"] == "STRING"
    assert converted["properties"]["status"]["enum"] == ["SAFE", "CAUTION", "DANGER"]
    assert converted["properties"]["sideEffects"]["items"]["type"] == "STRING"
    assert converted["required"] == SAFETY_SCHEMA["required"]


def test_gemini_request_payload(image_parts):
    session = _session(_http_response(body=_gemini_body(json.dumps(ASPIRIN_IDENTITY))))
    model = GeminiGenerativeModel(api_key="key", model="gemini-2.5-flash", session=session)

    result = model.generate_json(image_parts, IDENTITY_SCHEMA)

    assert result == ASPIRIN_IDENTITY
    url = session.post.call_args[0][0]
    payload = session.post.call_args[1]["json"]
    assert url.endswith("/v1beta/models/gemini-2.5-flash:generateContent")

    parts = payload["contents"][0]["parts"]
    assert parts[0]["inline_data"]["mime_type"] == "image/png"
    assert parts[1] == {"text": "Identify the medication."}
    assert payload["generationConfig"]["responseMimeType"] == "application/json"
    assert payload["generationConfig"]["responseSchema"]["type"] == "OBJECT"
    assert "temperature" not in payload["generationConfig"]


def test_gemini_temperature_forwarded():
    session = _session(_http_response(body=_gemini_body('{"status": "SAFE"}')))
    model = GeminiGenerativeModel(api_key="key", session=session)

    model.generate_json([ContentPart.from_text("x")], SAFETY_SCHEMA, temperature=0.0)

    assert session.post.call_args[1]["json"]["generationConfig"]["temperature"] == 0.0


def test_gemini_http_error():
    model = GeminiGenerativeModel(api_key="key", session=_session(_http_response(status_code=429)))

    with pytest.raises(ModelConnectionError) as exc_info:
        model.generate_json([ContentPart.from_text("x")], IDENTITY_SCHEMA)
    assert exc_info.value.details["status_code"] == 429


def test_gemini_network_error():
    model = GeminiGenerativeModel(
        api_key="key", session=_session(error=requests.Timeout("read timed out"))
    )

    with pytest.raises(ModelConnectionError):
        model.generate_json([ContentPart.from_text("x")], IDENTITY_SCHEMA)


def test_gemini_blocked_prompt():
    body = {"promptFeedback": {"blockReason": "SAFETY"}}
    model = GeminiGenerativeModel(api_key="key", session=_session(_http_response(body=body)))

    with pytest.raises(ModelResponseError, match="SAFETY"):
        model.generate_json([ContentPart.from_text("x")], IDENTITY_SCHEMA)


def test_gemini_requires_api_key():
    with pytest.raises(ModelConnectionError):
        GeminiGenerativeModel().generate_json([ContentPart.from_text("x")], IDENTITY_SCHEMA)


# =============================================================================
# Ollama
# =============================================================================

def test_ollama_request_payload(image_parts):
    body = {"message": {"role": "assistant", "content": json.dumps(ASPIRIN_IDENTITY)}}
    session = _session(_http_response(body=body))
    model = OllamaGenerativeModel(base_url="http://ollama:11434/", session=session)

    result = model.generate_json(image_parts, IDENTITY_SCHEMA, temperature=0.0)

    assert result["activeIngredient"] == "Aspirin"
    assert session.post.call_args[0][0] == "http://ollama:11434/api/chat"
    payload = session.post.call_args[1]["json"]
    message = payload["messages"][0]
    assert message["content"] == "Identify the medication."
    assert message["images"] == [image_parts[0].base64_data]
    assert payload["format"] == IDENTITY_SCHEMA
    assert payload["stream"] is False
    assert payload["options"] == {"temperature": 0.0}


def test_ollama_missing_model():
    model = OllamaGenerativeModel(session=_session(_http_response(status_code=404)))

    with pytest.raises(ModelConnectionError, match="ollama pull"):
        model.generate_json([ContentPart.from_text("x")], IDENTITY_SCHEMA)


# =============================================================================
# OpenAI
# =============================================================================

def _openai_client(content=None, error=None):
    client = Mock()
    if error:
        client.chat.completions.create.side_effect = error
    else:
        message = SimpleNamespace(content=content)
        client.chat.completions.create.return_value = SimpleNamespace(
            choices=[SimpleNamespace(message=message)]
        )
    return client


def test_openai_request(image_parts):
    client = _openai_client(json.dumps(ASPIRIN_IDENTITY))
    model = OpenAIGenerativeModel(model="gpt-4o-mini", client=client)

    assert model.generate_json(image_parts, IDENTITY_SCHEMA) == ASPIRIN_IDENTITY

    request = client.chat.completions.create.call_args[1]
    content = request["messages"][0]["content"]
    assert content[0]["type"] == "image_url"
    assert content[0]["image_url"]["url"].startswith("data:image/png;base64,")
    assert content[1] == {"type": "text", "text": "Identify the medication."}
    assert request["response_format"]["json_schema"]["name"] == "DrugIdentity"
    assert "temperature" not in request


def test_openai_error_is_connection_error():
    model = OpenAIGenerativeModel(client=_openai_client(error=RuntimeError("rate limited")))

    with pytest.raises(ModelConnectionError):
        model.generate_json([ContentPart.from_text("x")], IDENTITY_SCHEMA)


def test_openai_empty_content():
    model = OpenAIGenerativeModel(client=_openai_client(content=None))

    with pytest.raises(ModelResponseError):
        model.generate_json([ContentPart.from_text("x")], IDENTITY_SCHEMA)


# =============================================================================
# Factory
# =============================================================================

def test_factory_defaults():
    gemini = GenerativeModelFactory.create(ModelType.GEMINI, api_key="key")
    ollama = GenerativeModelFactory.create(ModelType.OLLAMA)

    assert isinstance(gemini, GeminiGenerativeModel)
    assert gemini.model_name == "gemini-2.5-flash"
    assert ollama.model_name == "llama3.2-vision"


@pytest.mark.parametrize("type_name, expected", [
    ("gemini", GeminiGenerativeModel),
    ("google", GeminiGenerativeModel),
    ("OpenAI", OpenAIGenerativeModel),
    ("local", OllamaGenerativeModel),
    ("dummy", DummyGenerativeModel),
])
def test_factory_from_config(type_name, expected):
    model = GenerativeModelFactory.create_from_config({"type": type_name, "model": None})
    assert isinstance(model, expected)


def test_factory_rejects_unknown_type():
    with pytest.raises(ValueError):
        GenerativeModelFactory.create_from_config({"type": "claude-in-a-box"})


def test_dummy_model_is_deterministic(image_parts):
    model = DummyGenerativeModel()

    identity = model.generate_json(image_parts, IDENTITY_SCHEMA)
    verdict = model.generate_json(
        [ContentPart.from_text("- Conditions: None reported")], SAFETY_SCHEMA
    )

    assert identity["activeIngredient"] == "Acetaminophen"
    assert verdict["status"] == "SAFE"
