"""
Tests for individual pipeline stages and the context state machine
"""

import base64

import pytest

from safemeds.analysis.application.pipeline.context import PipelineContext
from safemeds.analysis.application.pipeline.stages import (
    IdentificationStage,
    ReferenceDataStage,
    SafetyReasoningStage,
    StageConfig,
)
from safemeds.analysis.domain.entities.drug_identity import DrugIdentity
from safemeds.analysis.domain.entities.pipeline_result import PipelineStage, PipelineState
from safemeds.analysis.domain.entities.reference_summary import ReferenceSummary
from safemeds.analysis.domain.exceptions import LabelLookupError, ModelConnectionError

from conftest import (
    ASPIRIN_CAUTION,
    ASPIRIN_IDENTITY,
    ASPIRIN_LABEL,
    InMemoryLabelRepository,
    ScriptedModel,
)


def _referencing_context(profile) -> PipelineContext:
    context = PipelineContext.for_text("aspirin", profile)
    context.identity = DrugIdentity(brand_name="Bayer Aspirin", active_ingredient="Aspirin")
    context.transition(PipelineState.REFERENCING)
    return context


def test_state_machine_rejects_illegal_transition(profile):
    context = PipelineContext.for_text("aspirin", profile)

    with pytest.raises(ValueError):
        context.transition(PipelineState.REASONING)


def test_identification_of_text(profile):
    model = ScriptedModel(identity=dict(ASPIRIN_IDENTITY))
    context = PipelineContext.for_text("aspirin", profile)

    assert IdentificationStage(model).run(context)

    assert context.identity.active_ingredient == "Aspirin"
    assert context.state is PipelineState.REFERENCING
    assert 'search query: "aspirin"' in model.prompt_for("DrugIdentity")


def test_identification_rejects_overlong_query(profile):
    model = ScriptedModel(identity=dict(ASPIRIN_IDENTITY))
    context = PipelineContext.for_text("a" * 500, profile)

    assert not IdentificationStage(model).run(context)

    assert model.calls == []
    assert context.state is PipelineState.FAILED
    assert context.errors[0].error_type == "InvalidInputError"


def test_identification_rejects_non_image_bytes(profile):
    model = ScriptedModel(identity=dict(ASPIRIN_IDENTITY))
    context = PipelineContext.for_image("aGVsbG8gd29ybGQ=", profile)  # "hello world"

    assert not IdentificationStage(model).run(context)

    assert model.calls == []
    assert context.errors[0].error_type == "InvalidImageError"


def test_identification_detects_image_format(profile, png_bytes):
    model = ScriptedModel(identity=dict(ASPIRIN_IDENTITY))
    context = PipelineContext.for_image(base64.b64encode(png_bytes).decode("ascii"), profile)

    assert IdentificationStage(model).run(context)

    image_part = model.calls[0]["parts"][0]
    assert image_part.mime_type == "image/png"
    assert image_part.data == png_bytes


def test_reference_stage_stores_summary(profile):
    context = _referencing_context(profile)
    repository = InMemoryLabelRepository({"aspirin": ASPIRIN_LABEL})

    assert ReferenceDataStage(repository).run(context)

    assert context.reference.fda_source
    assert context.state is PipelineState.REASONING
    assert context.warnings == []


def test_reference_stage_never_fails_the_pipeline(profile):
    context = _referencing_context(profile)
    repository = InMemoryLabelRepository(error=LabelLookupError("HTTP 500"))

    ReferenceDataStage(repository, StageConfig(fail_soft=False)).run(context)

    assert context.reference == ReferenceSummary.empty()
    assert context.state is PipelineState.REASONING
    assert not context.should_abort
    assert any("No official FDA label data" in w for w in context.warnings)


def test_disabled_reference_stage_still_advances(profile):
    context = _referencing_context(profile)
    repository = InMemoryLabelRepository({"aspirin": ASPIRIN_LABEL})

    assert ReferenceDataStage(repository, StageConfig(enabled=False)).run(context)

    assert repository.lookups == []
    assert context.reference == ReferenceSummary.empty()
    assert context.state is PipelineState.REASONING


def test_reasoning_uses_clock_and_temperature(profile):
    model = ScriptedModel(verdict=dict(ASPIRIN_CAUTION))
    context = _referencing_context(profile)
    context.clock = lambda: 777
    context.reference = ReferenceSummary(text="WARNINGS: x", fda_source=True)
    context.transition(PipelineState.REASONING)

    assert SafetyReasoningStage(model, temperature=0.0).run(context)

    assert context.analysis.timestamp == 777
    assert context.analysis.fda_source
    assert model.calls[0]["temperature"] == 0.0


def test_reasoning_schema_violation_aborts(profile):
    model = ScriptedModel(verdict=dict(ASPIRIN_CAUTION, status="UNKNOWN"))
    context = _referencing_context(profile)
    context.reference = ReferenceSummary.empty()
    context.transition(PipelineState.REASONING)

    assert not SafetyReasoningStage(model).run(context)

    assert context.analysis is None
    assert context.should_abort
    assert context.state is PipelineState.FAILED
    assert context.errors[-1].stage is PipelineStage.SAFETY_REASONING
    assert context.errors[-1].error_type == "SchemaViolationError"


@pytest.mark.parametrize("fail_soft, aborts", [(False, True), (True, False)])
def test_stage_config_decides_whether_a_failure_aborts(profile, fail_soft, aborts):
    model = ScriptedModel(verdict=ModelConnectionError("Gemini unavailable", status_code=503))
    context = _referencing_context(profile)
    context.reference = ReferenceSummary.empty()
    context.transition(PipelineState.REASONING)

    assert not SafetyReasoningStage(model, StageConfig(fail_soft=fail_soft)).run(context)

    error = context.errors[-1]
    assert error.error_type == "ModelConnectionError"
    assert error.details["status_code"] == 503
    assert error.is_recoverable is fail_soft
    assert context.should_abort is aborts
    assert (context.state is PipelineState.FAILED) is aborts
