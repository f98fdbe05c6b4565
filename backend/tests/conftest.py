"""
Shared fixtures: scripted model, in-memory label repository, tiny images.
"""

import base64
from io import BytesIO
from typing import Any, Dict, List, Optional

import pytest
from PIL import Image

from safemeds.analysis.application.pipeline.orchestrator import PipelineOrchestrator
from safemeds.analysis.application.services.drug_analysis_service import DrugAnalysisService
from safemeds.analysis.domain.entities.health_profile import HealthProfile
from safemeds.analysis.domain.ports.drug_label import DrugLabelPort
from safemeds.analysis.domain.ports.generative_model import GenerativeModelPort
from safemeds.analysis.domain.value_objects.content_part import ContentPart


FIXED_NOW = 1_700_000_000_000


class ScriptedModel(GenerativeModelPort):
    """Returns canned answers per schema title; an Exception answer is raised."""

    def __init__(self, identity: Any = None, verdict: Any = None):
        self.answers = {"DrugIdentity": identity, "SafetyVerdict": verdict}
        self.calls: List[Dict[str, Any]] = []

    def generate_json(
        self,
        parts: List[ContentPart],
        schema: Dict[str, Any],
        temperature: Optional[float] = None
    ) -> Dict[str, Any]:
        self.calls.append({"schema": schema["title"], "parts": parts, "temperature": temperature})
        answer = self.answers[schema["title"]]
        if isinstance(answer, Exception):
            raise answer
        return answer

    def calls_for(self, title: str) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["schema"] == title]

    def prompt_for(self, title: str) -> str:
        call = self.calls_for(title)[-1]
        return "\n".join(p.text for p in call["parts"] if p.is_text)

    @property
    def model_name(self) -> str:
        return "scripted"


class InMemoryLabelRepository(DrugLabelPort):
    """Label records keyed by lower-case generic name."""

    def __init__(self, labels: Optional[Dict[str, Dict[str, Any]]] = None, error: Exception = None):
        self.labels = {k.lower(): v for k, v in (labels or {}).items()}
        self.error = error
        self.lookups: List[str] = []

    def fetch_label(self, generic_name: str) -> Optional[Dict[str, Any]]:
        self.lookups.append(generic_name)
        if self.error:
            raise self.error
        return self.labels.get(generic_name.lower())

    @property
    def source_name(self) -> str:
        return "memory"


ASPIRIN_LABEL = {
    "boxed_warning": [],
    "contraindications": ["Do not use if you are allergic to NSAIDs."],
    "warnings": [
        "Reye's syndrome: Children and teenagers should not use this medicine.",
        "Stomach bleeding warning.",
    ],
    "openfda": {"generic_name": ["ASPIRIN"]},
}

ASPIRIN_IDENTITY = {"brandName": "Bayer Aspirin", "activeIngredient": "Aspirin", "strength": "325mg"}

ASPIRIN_CAUTION = {
    "purpose": "Pain relief and fever reduction",
    "status": "CAUTION",
    "headline": "Use With Caution",
    "reasoning": "NSAIDs such as aspirin can raise blood pressure and interact with High BP.",
    "simpleExplanation": "This can push your blood pressure up, so check with your doctor first.",
    "interactionScore": 65,
    "sideEffects": ["Upset stomach", "Heartburn", "Bleeding"],
    "safeAlternatives": ["Acetaminophen"],
    "contraindicationsDetected": ["High BP"],
}

UNREADABLE_IDENTITY = {"brandName": "Unknown", "activeIngredient": "Unknown"}


@pytest.fixture
def profile() -> HealthProfile:
    return HealthProfile(age=45, sex="Male", conditions=["High BP"])


@pytest.fixture
def png_bytes() -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (8, 8), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_data_url(png_bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")


@pytest.fixture
def aspirin_model() -> ScriptedModel:
    return ScriptedModel(identity=dict(ASPIRIN_IDENTITY), verdict=dict(ASPIRIN_CAUTION))


@pytest.fixture
def aspirin_labels() -> InMemoryLabelRepository:
    return InMemoryLabelRepository({"aspirin": ASPIRIN_LABEL})


def make_pipeline(model, labels=None, config=None) -> PipelineOrchestrator:
    return PipelineOrchestrator(
        model=model,
        label_repository=labels if labels is not None else InMemoryLabelRepository(),
        config=config,
        clock=lambda: FIXED_NOW,
    )


def make_service(model, labels=None) -> DrugAnalysisService:
    return DrugAnalysisService(make_pipeline(model, labels))
