"""
Pipeline Stage Definitions

Defines individual pipeline stages and their execution logic.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Optional, Dict, Any
import logging

from .context import PipelineContext
from ..prompts import IMAGE_IDENTIFICATION_PROMPT, build_text_identification_prompt, build_safety_prompt
from ..schemas import IDENTITY_SCHEMA, SAFETY_SCHEMA, parse_identity, parse_safety
from ..reference_data import fetch_reference_summary
from ...cross_cutting.error_handling import describe_error
from ...cross_cutting.validation import validate_image, validate_text, detect_image_format
from ...domain.entities.drug_identity import DrugIdentity
from ...domain.entities.reference_summary import ReferenceSummary, MAX_SUMMARY_LENGTH
from ...domain.entities.pipeline_result import PipelineStage, PipelineState, InputKind
from ...domain.value_objects.image_data import ImageData
from ...domain.value_objects.content_part import ContentPart
from ...domain.exceptions import (
    DomainException,
    InvalidImageError,
    InvalidInputError,
    UnidentifiedDrugError,
)


logger = logging.getLogger(__name__)


@dataclass
class StageConfig:
    """
    Configuration for a pipeline stage.

    Stages never retry; a failure produces a degraded result instead.

    Attributes:
        enabled: Whether the stage is enabled
        fail_soft: If True, a failure is recorded but the pipeline continues
    """

    enabled: bool = True
    fail_soft: bool = False


class PipelineStageExecutor(ABC):
    """
    Abstract base class for pipeline stage executors.

    Stages are responsible for:
    - Reading required data from context
    - Executing their specific logic
    - Writing results back to context

    ``run`` is the stage boundary: every exception raised by ``execute``
    is caught there and recorded in the context.
    """

    def __init__(self, config: Optional[StageConfig] = None):
        self.config = config or StageConfig()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    @abstractmethod
    def stage(self) -> PipelineStage:
        """Get the pipeline stage this executor handles."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Get human-readable stage name."""
        pass

    @abstractmethod
    def execute(self, context: PipelineContext) -> None:
        """
        Execute the stage logic.

        Implementations raise DomainException subclasses on failure and
        store their results in the context on success.
        """
        pass

    def can_execute(self, context: PipelineContext) -> bool:
        """Check if this stage can execute given the current context."""
        return not context.should_abort

    def run(self, context: PipelineContext) -> bool:
        """
        Run the stage with error handling.

        Returns:
            True if stage completed successfully
        """
        if not self.config.enabled:
            self.logger.info(f"Stage {self.name} is disabled, skipping")
            return True

        if not self.can_execute(context):
            self.logger.warning(f"Stage {self.name} cannot execute, prerequisites not met")
            return False

        context.start_stage(self.stage)
        self.logger.info(f"Executing stage {self.name} (request_id={context.request_id[:8]})")

        try:
            self.execute(context)
        except DomainException as e:
            self.logger.warning(f"Stage {self.name} failed: {e}")
            self._record_failure(context, e, details=e.details)
            return False
        except Exception as e:
            self.logger.error(f"Unexpected error in stage {self.name}: {e}", exc_info=True)
            self._record_failure(context, e)
            return False
        finally:
            context.finish_stage(self.stage)

        self.logger.info(f"Stage {self.name} completed successfully")
        return True

    def _record_failure(
        self,
        context: PipelineContext,
        error: Exception,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        context.add_error(
            stage=self.stage,
            error_type=error.__class__.__name__,
            message=describe_error(error),
            is_recoverable=self.config.fail_soft,
            details=details or None
        )


# =============================================================================
# Concrete Stage Executors
# =============================================================================

class IdentificationStage(PipelineStageExecutor):
    """
    Identification Stage Executor.

    Turns a packaging photograph or a typed query into a DrugIdentity.
    An unresolved active ingredient on a photograph is the pipeline's
    short-circuit signal.
    """

    def __init__(
        self,
        model,  # GenerativeModelPort
        config: Optional[StageConfig] = None,
        temperature: Optional[float] = None,
        validate_images: bool = True
    ):
        super().__init__(config)
        self.model = model
        self.temperature = temperature
        self.validate_images = validate_images

    @property
    def stage(self) -> PipelineStage:
        return PipelineStage.IDENTIFICATION

    @property
    def name(self) -> str:
        return "Identification"

    def can_execute(self, context: PipelineContext) -> bool:
        if not super().can_execute(context):
            return False
        if context.input_kind is InputKind.IMAGE:
            return context.image is not None or context.image_payload is not None
        return context.query_text is not None

    def execute(self, context: PipelineContext) -> None:
        if context.input_kind is InputKind.IMAGE:
            identity = self._identify_image(context)
        else:
            identity = self._identify_text(context)

        context.identity = identity

        if not identity.is_resolved:
            raise UnidentifiedDrugError(brand_name=identity.brand_name)

        self.logger.info(f"Identified {identity}")
        context.transition(PipelineState.REFERENCING)

    def _resolve_image(self, context: PipelineContext) -> ImageData:
        """Decode the raw payload (stripping any data-URL prefix) and validate it."""
        image = context.image
        if image is None:
            image = ImageData.from_base64(context.image_payload or "")

        if self.validate_images:
            is_valid, error = validate_image(image)
            if not is_valid:
                raise InvalidImageError(error)
            detected = detect_image_format(image.bytes)
            if detected and detected != image.format:
                image = image.with_format(detected)

        context.image = image
        return image

    def _identify_image(self, context: PipelineContext) -> DrugIdentity:
        image = self._resolve_image(context)

        raw = self.model.generate_json(
            parts=[
                ContentPart.from_image(image),
                ContentPart.from_text(IMAGE_IDENTIFICATION_PROMPT),
            ],
            schema=IDENTITY_SCHEMA,
            temperature=self.temperature,
        )
        return parse_identity(raw).to_image_identity()

    def _identify_text(self, context: PipelineContext) -> DrugIdentity:
        query = context.query_text or ""
        is_valid, error = validate_text(query)
        if not is_valid:
            raise InvalidInputError(field="text", reason=error)

        raw = self.model.generate_json(
            parts=[ContentPart.from_text(build_text_identification_prompt(query))],
            schema=IDENTITY_SCHEMA,
            temperature=self.temperature,
        )
        return parse_identity(raw).to_text_identity(query)


class ReferenceDataStage(PipelineStageExecutor):
    """
    Reference Data Stage Executor.

    Fetches official label warnings for the active ingredient.
    Strictly best-effort: this stage never aborts the pipeline.
    """

    def __init__(
        self,
        repository,  # DrugLabelPort
        config: Optional[StageConfig] = None,
        max_summary_length: int = MAX_SUMMARY_LENGTH
    ):
        super().__init__(replace(config or StageConfig(), fail_soft=True))
        self.repository = repository
        self.max_summary_length = max_summary_length

    @property
    def stage(self) -> PipelineStage:
        return PipelineStage.REFERENCE_DATA

    @property
    def name(self) -> str:
        return "Reference Data"

    def can_execute(self, context: PipelineContext) -> bool:
        return super().can_execute(context) and context.has_identity

    def execute(self, context: PipelineContext) -> None:
        summary = fetch_reference_summary(
            self.repository,
            context.identity.active_ingredient,
            self.max_summary_length,
        )
        context.reference = summary

        if not summary.fda_source:
            context.add_warning(
                "No official FDA label data found; the verdict relies on general medical knowledge."
            )

    def run(self, context: PipelineContext) -> bool:
        success = super().run(context)

        if context.state is PipelineState.REFERENCING:
            if context.reference is None:
                context.reference = ReferenceSummary.empty()
            context.transition(PipelineState.REASONING)

        return success


class SafetyReasoningStage(PipelineStageExecutor):
    """
    Safety Reasoning Stage Executor.

    Combines identity, label data and health profile into a verdict.
    """

    def __init__(
        self,
        model,  # GenerativeModelPort
        config: Optional[StageConfig] = None,
        temperature: float = 0.0
    ):
        super().__init__(config)
        self.model = model
        self.temperature = temperature

    @property
    def stage(self) -> PipelineStage:
        return PipelineStage.SAFETY_REASONING

    @property
    def name(self) -> str:
        return "Safety Reasoning"

    def can_execute(self, context: PipelineContext) -> bool:
        return super().can_execute(context) and context.has_identity

    def execute(self, context: PipelineContext) -> None:
        reference = context.reference or ReferenceSummary.empty()
        prompt = build_safety_prompt(context.identity, reference, context.profile)

        raw = self.model.generate_json(
            parts=[ContentPart.from_text(prompt)],
            schema=SAFETY_SCHEMA,
            temperature=self.temperature,
        )
        payload = parse_safety(raw)

        context.analysis = payload.to_analysis(
            identity=context.identity,
            reference=reference,
            timestamp=context.clock(),
        )
        self.logger.info(f"Verdict: {context.analysis}")
