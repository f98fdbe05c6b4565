"""
Pipeline Orchestrator

Main orchestration logic for the medication safety pipeline.
Implements Chain of Responsibility pattern.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Callable, Union
import logging
import time

from .context import PipelineContext
from .stages import (
    PipelineStageExecutor,
    StageConfig,
    IdentificationStage,
    ReferenceDataStage,
    SafetyReasoningStage,
)
from ...domain.value_objects.image_data import ImageData
from ...domain.entities.health_profile import HealthProfile
from ...domain.entities.drug_analysis import now_ms
from ...domain.entities.reference_summary import MAX_SUMMARY_LENGTH
from ...domain.entities.pipeline_result import PipelineResult, PipelineStage
from ...domain.ports.generative_model import GenerativeModelPort
from ...domain.ports.drug_label import DrugLabelPort
from ...domain.exceptions import PipelineConfigurationError


logger = logging.getLogger(__name__)


def _default_stage_configs() -> Dict[PipelineStage, StageConfig]:
    return {
        PipelineStage.IDENTIFICATION: StageConfig(),
        PipelineStage.REFERENCE_DATA: StageConfig(fail_soft=True),
        PipelineStage.SAFETY_REASONING: StageConfig(),
    }


@dataclass
class PipelineConfig:
    """
    Configuration for the pipeline orchestrator.

    Attributes:
        identification_temperature: Sampling temperature for identification
            (None keeps the provider default)
        reasoning_temperature: Sampling temperature for safety reasoning
        max_summary_length: Cap on the label summary, in characters
        validate_images: Check image size, dimensions and format before upload
        stages: Per-stage configurations
    """

    identification_temperature: Optional[float] = None
    reasoning_temperature: float = 0.0
    max_summary_length: int = MAX_SUMMARY_LENGTH
    validate_images: bool = True
    stages: Dict[PipelineStage, StageConfig] = field(default_factory=_default_stage_configs)

    def get_stage_config(self, stage: PipelineStage) -> StageConfig:
        """Get configuration for a specific stage."""
        return self.stages.get(stage, StageConfig())


class PipelineOrchestrator:
    """
    Main pipeline orchestrator for medication safety analysis.

    Orchestrates the flow: IDENTIFICATION → REFERENCE DATA → SAFETY REASONING

    Features:
    - Sequential stage execution
    - Short-circuit when the drug cannot be identified
    - Best-effort reference data that never aborts the run
    - Exactly one DrugAnalysis per run, degraded on failure

    Usage:
        orchestrator = PipelineOrchestrator(
            model=gemini_model,
            label_repository=openfda_client
        )

        result = orchestrator.run_text("aspirin", profile)
    """

    def __init__(
        self,
        model: GenerativeModelPort,
        label_repository: DrugLabelPort,
        config: Optional[PipelineConfig] = None,
        clock: Callable[[], int] = now_ms
    ):
        """
        Initialize the pipeline orchestrator.

        Args:
            model: Generative model used for identification and reasoning
            label_repository: Official drug label source
            config: Pipeline configuration
            clock: Millisecond clock used to timestamp verdicts
        """
        self.config = config or PipelineConfig()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self._model = model
        self._label_repository = label_repository
        self._clock = clock

        self._stages = self._build_stages()

        self.logger.info(f"Pipeline initialized with {len(self._stages)} stages")

    def _build_stages(self) -> List[PipelineStageExecutor]:
        """Build the ordered list of pipeline stages."""
        return [
            IdentificationStage(
                model=self._model,
                config=self.config.get_stage_config(PipelineStage.IDENTIFICATION),
                temperature=self.config.identification_temperature,
                validate_images=self.config.validate_images
            ),
            ReferenceDataStage(
                repository=self._label_repository,
                config=self.config.get_stage_config(PipelineStage.REFERENCE_DATA),
                max_summary_length=self.config.max_summary_length
            ),
            SafetyReasoningStage(
                model=self._model,
                config=self.config.get_stage_config(PipelineStage.SAFETY_REASONING),
                temperature=self.config.reasoning_temperature
            ),
        ]

    def run_image(
        self,
        image: Union[ImageData, str],
        profile: HealthProfile
    ) -> PipelineResult:
        """
        Run the complete pipeline on a packaging photograph.

        Args:
            image: Decoded ImageData, or a base64 string / data URL
            profile: Caller's health profile

        Returns:
            PipelineResult containing the verdict
        """
        context = PipelineContext.for_image(image, profile, clock=self._clock)
        return self._run(context)

    def run_text(
        self,
        text: str,
        profile: HealthProfile
    ) -> PipelineResult:
        """
        Run the complete pipeline on a typed or spoken drug name.

        Args:
            text: Drug name query
            profile: Caller's health profile

        Returns:
            PipelineResult containing the verdict
        """
        context = PipelineContext.for_text(text, profile, clock=self._clock)
        return self._run(context)

    def _run(self, context: PipelineContext) -> PipelineResult:
        start_time = time.time()
        self.logger.info(
            f"Starting {context.input_kind.value} analysis (request_id={context.request_id})"
        )

        stages_completed = 0
        stages_failed = 0

        for stage_executor in self._stages:
            if context.should_abort:
                self.logger.warning(f"Pipeline aborted: {context.abort_reason}")
                break

            if stage_executor.run(context):
                stages_completed += 1
            else:
                stages_failed += 1

        result = context.to_pipeline_result()

        elapsed_total = (time.time() - start_time) * 1000
        result.total_processing_time_ms = elapsed_total

        self.logger.info(
            f"Pipeline completed: {stages_completed} succeeded, {stages_failed} failed, "
            f"status={result.analysis.status.value}, total time: {elapsed_total:.2f}ms"
        )

        return result

    def validate_configuration(self) -> bool:
        """
        Validate that the pipeline is properly configured.

        Returns:
            True if configuration is valid

        Raises:
            PipelineConfigurationError: If configuration is invalid
        """
        missing = []

        if self._model is None:
            missing.append("model")
        if self._label_repository is None:
            missing.append("label_repository")

        for stage in (PipelineStage.IDENTIFICATION, PipelineStage.SAFETY_REASONING):
            if not self.config.get_stage_config(stage).enabled:
                missing.append(f"{stage.value} stage")

        if missing:
            raise PipelineConfigurationError(
                message=f"Pipeline is missing required components: {', '.join(missing)}",
                missing_components=missing
            )

        return True

    @property
    def stage_count(self) -> int:
        """Get the number of stages in the pipeline."""
        return len(self._stages)

    @property
    def stage_names(self) -> List[str]:
        """Get the names of all stages."""
        return [s.name for s in self._stages]


class PipelineBuilder:
    """
    Builder for constructing pipeline orchestrators.

    Usage:
        pipeline = (
            PipelineBuilder()
            .with_model(gemini_model)
            .with_label_repository(openfda_client)
            .with_config(pipeline_config)
            .build()
        )
    """

    def __init__(self):
        self._model: Optional[GenerativeModelPort] = None
        self._label_repository: Optional[DrugLabelPort] = None
        self._config: Optional[PipelineConfig] = None
        self._clock: Callable[[], int] = now_ms

    def with_model(self, model: GenerativeModelPort) -> "PipelineBuilder":
        """Set the generative model."""
        self._model = model
        return self

    def with_label_repository(self, repository: DrugLabelPort) -> "PipelineBuilder":
        """Set the drug label repository."""
        self._label_repository = repository
        return self

    def with_config(self, config: PipelineConfig) -> "PipelineBuilder":
        """Set the pipeline configuration."""
        self._config = config
        return self

    def with_clock(self, clock: Callable[[], int]) -> "PipelineBuilder":
        """Set the millisecond clock used for verdict timestamps."""
        self._clock = clock
        return self

    def build(self) -> PipelineOrchestrator:
        """
        Build the pipeline orchestrator.

        Raises:
            PipelineConfigurationError: If required components are missing
        """
        missing = []

        if self._model is None:
            missing.append("model")
        if self._label_repository is None:
            missing.append("label_repository")

        if missing:
            raise PipelineConfigurationError(
                message=f"Cannot build pipeline, missing: {', '.join(missing)}",
                missing_components=missing
            )

        return PipelineOrchestrator(
            model=self._model,
            label_repository=self._label_repository,
            config=self._config,
            clock=self._clock
        )
