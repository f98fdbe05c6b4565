"""
Tests for the HTTP endpoints
"""

import pytest
from fastapi.testclient import TestClient

from safemeds.analysis.config.settings import AppConfig
from safemeds.analysis.cross_cutting.safety import SHORT_DISCLAIMER
from safemeds.analysis_router import get_analysis_service, get_app_config
from safemeds.main import app

from conftest import FIXED_NOW, UNREADABLE_IDENTITY, ScriptedModel, make_service


PROFILE = {"age": 45, "gender": "Male", "conditions": ["High BP"], "currentMeds": []}


@pytest.fixture
def client(aspirin_model, aspirin_labels):
    app.dependency_overrides[get_analysis_service] = lambda: make_service(aspirin_model, aspirin_labels)
    app.dependency_overrides[get_app_config] = lambda: AppConfig.from_dict({
        "model": {"type": "dummy", "model": "offline"},
    })
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "active"
    assert client.get("/health").json() == {"status": "healthy"}


def test_text_analysis(client, aspirin_model):
    response = client.post("/analysis/text", json={"text": " aspirin ", "profile": PROFILE})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["analysis"]["status"] == "CAUTION"
    assert body["analysis"]["contraindicationsDetected"] == ["High BP"]
    assert body["analysis"]["fdaSource"] is True
    assert body["analysis"]["timestamp"] == FIXED_NOW
    assert body["disclaimer"] == SHORT_DISCLAIMER
    assert body["request_id"]
    assert 'search query: "aspirin"' in aspirin_model.prompt_for("DrugIdentity")


def test_profile_field_names_accepted(client, aspirin_model):
    profile = {"age": 30, "sex": "Female", "current_medications": ["Lisinopril"]}

    response = client.post("/analysis/text", json={"text": "aspirin", "profile": profile})

    assert response.status_code == 200
    prompt = aspirin_model.prompt_for("SafetyVerdict")
    assert "- Sex: Female" in prompt
    assert "Lisinopril" in prompt


@pytest.mark.parametrize("gender, rendered", [
    ("male", "Male"),
    (" FEMALE ", "Female"),
    (None, "Other"),
])
def test_sex_is_case_insensitive(client, aspirin_model, gender, rendered):
    profile = {"age": 45, "gender": gender}

    response = client.post("/analysis/text", json={"text": "aspirin", "profile": profile})

    assert response.status_code == 200
    assert f"- Sex: {rendered}" in aspirin_model.prompt_for("SafetyVerdict")


def test_blank_text_rejected(client, aspirin_model):
    response = client.post("/analysis/text", json={"text": "   ", "profile": PROFILE})

    assert response.status_code == 400
    assert aspirin_model.calls == []


@pytest.mark.parametrize("profile", [
    {"age": 200},
    {"age": 30, "gender": "robot"},
    {"gender": "Male"},
])
def test_invalid_profile_rejected(client, profile):
    response = client.post("/analysis/text", json={"text": "aspirin", "profile": profile})
    assert response.status_code == 422


def test_image_analysis(client, png_data_url):
    response = client.post(
        "/analysis/image", json={"image_base64": png_data_url, "profile": PROFILE}
    )

    assert response.status_code == 200
    assert response.json()["analysis"]["drugName"] == "Bayer Aspirin"


def test_unreadable_image_is_not_an_http_error(png_data_url, aspirin_labels):
    model = ScriptedModel(identity=dict(UNREADABLE_IDENTITY))
    app.dependency_overrides[get_analysis_service] = lambda: make_service(model, aspirin_labels)
    try:
        response = TestClient(app).post(
            "/analysis/image", json={"image_base64": png_data_url, "profile": PROFILE}
        )
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert body["analysis"]["status"] == "UNKNOWN"
    assert body["analysis"]["headline"] == "Could Not Identify"
    assert "No verdict could be produced" in body["disclaimer"]


def test_blank_image_rejected(client):
    response = client.post("/analysis/image", json={"image_base64": "", "profile": PROFILE})
    assert response.status_code == 400


def test_analysis_health(client):
    body = client.get("/analysis/health").json()

    assert body["status"] == "healthy"
    assert body["model_type"] == "dummy"
    assert body["model"] == "offline"
    assert body["model_api_key_set"] is True
    assert body["reference_data_enabled"] is True
