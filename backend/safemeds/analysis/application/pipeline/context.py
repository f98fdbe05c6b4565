"""
Pipeline Context

Carries state through the pipeline stages.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Callable, Union
from datetime import datetime
import uuid

from ...domain.value_objects.image_data import ImageData
from ...domain.entities.health_profile import HealthProfile
from ...domain.entities.drug_identity import DrugIdentity
from ...domain.entities.reference_summary import ReferenceSummary
from ...domain.entities.drug_analysis import DrugAnalysis, now_ms
from ...domain.entities.pipeline_result import (
    PipelineResult,
    PipelineError,
    PipelineStage,
    PipelineState,
    StageStatus,
    InputKind,
    STATE_TRANSITIONS,
)


@dataclass
class StageMetrics:
    """
    Metrics for a single pipeline stage execution.

    Attributes:
        stage: The pipeline stage
        start_time: When execution started
        end_time: When execution completed
        duration_ms: Total execution time in milliseconds
    """

    stage: PipelineStage
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration_ms: float = 0.0

    def start(self) -> None:
        """Mark stage as started."""
        self.start_time = datetime.now()

    def finish(self) -> None:
        """Mark stage as finished and calculate duration."""
        self.end_time = datetime.now()
        if self.start_time:
            delta = self.end_time - self.start_time
            self.duration_ms = delta.total_seconds() * 1000


@dataclass
class PipelineContext:
    """
    Context object that carries state through the pipeline.

    One context is created per invocation and never shared, so concurrent
    analyses are fully independent.

    Attributes:
        request_id: Unique identifier for this pipeline execution
        profile: Caller's health profile
        image: Input image (image analyses)
        query_text: Input text (text analyses)

        identity: Result from identification
        reference: Result from reference data lookup
        analysis: Final verdict

        errors: Errors from all stages
        warnings: Warnings to include in output
        states: Visited states of the pipeline state machine
    """

    profile: HealthProfile
    input_kind: InputKind
    image: Optional[ImageData] = None
    image_payload: Optional[str] = None
    query_text: Optional[str] = None
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    clock: Callable[[], int] = now_ms

    # Stage results
    identity: Optional[DrugIdentity] = None
    reference: Optional[ReferenceSummary] = None
    analysis: Optional[DrugAnalysis] = None

    # Error and warning tracking
    errors: List[PipelineError] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    # Execution metadata
    created_at: datetime = field(default_factory=datetime.now)
    stage_metrics: Dict[PipelineStage, StageMetrics] = field(default_factory=dict)
    states: List[PipelineState] = field(default_factory=lambda: [PipelineState.IDENTIFYING])

    # Control flags
    should_abort: bool = False
    abort_reason: Optional[str] = None
    failed_at: Optional[int] = None

    @property
    def state(self) -> PipelineState:
        """Current state of the pipeline state machine."""
        return self.states[-1]

    def transition(self, new_state: PipelineState) -> None:
        """
        Move the state machine forward.

        Raises:
            ValueError: If the transition is not allowed
        """
        if new_state == self.state:
            return
        if new_state not in STATE_TRANSITIONS[self.state]:
            raise ValueError(f"Illegal pipeline transition {self.state.value} -> {new_state.value}")
        self.states.append(new_state)

    def add_error(
        self,
        stage: PipelineStage,
        error_type: str,
        message: str,
        is_recoverable: bool = True,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Add an error to the context.

        Non-recoverable errors abort the pipeline and move it to FAILED,
        stamping the failure time.
        """
        error = PipelineError(
            stage=stage,
            error_type=error_type,
            message=message,
            is_recoverable=is_recoverable,
            details=details
        )
        self.errors.append(error)

        if not is_recoverable:
            self.should_abort = True
            self.abort_reason = message
            self.failed_at = self.clock()
            self.transition(PipelineState.FAILED)

    def add_warning(self, warning: str) -> None:
        """Add a warning to include in the final output."""
        if warning not in self.warnings:
            self.warnings.append(warning)

    def start_stage(self, stage: PipelineStage) -> None:
        """Mark a stage as started."""
        self.stage_metrics[stage] = StageMetrics(stage=stage)
        self.stage_metrics[stage].start()

    def finish_stage(self, stage: PipelineStage) -> None:
        """Mark a stage as finished."""
        if stage in self.stage_metrics:
            self.stage_metrics[stage].finish()

    @property
    def total_duration_ms(self) -> float:
        """Get total pipeline execution time in milliseconds."""
        return sum(m.duration_ms for m in self.stage_metrics.values())

    @property
    def has_identity(self) -> bool:
        return self.identity is not None and self.identity.is_resolved

    def _failure_analysis(self) -> DrugAnalysis:
        """Degraded verdict for a run that ended in FAILED."""
        timestamp = self.failed_at if self.failed_at is not None else self.clock()

        if self.has_identity:
            return DrugAnalysis.analysis_failure(self.identity, self.reference, timestamp=timestamp)
        if self.input_kind is InputKind.TEXT:
            return DrugAnalysis.text_failure(self.query_text or "", timestamp=timestamp)
        return DrugAnalysis.unidentified_scan(timestamp=timestamp)

    def to_pipeline_result(self) -> PipelineResult:
        """
        Close the state machine and convert the context to a PipelineResult.

        Always yields exactly one DrugAnalysis.
        """
        if self.analysis is None:
            if self.state is not PipelineState.FAILED:
                self.failed_at = self.clock()
                self.transition(PipelineState.FAILED)
            self.analysis = self._failure_analysis()

        self.transition(PipelineState.DONE)

        result = PipelineResult(
            analysis=self.analysis,
            input_kind=self.input_kind,
            identity=self.identity,
            reference=self.reference,
            errors=self.errors.copy(),
            warnings=self.warnings.copy(),
            states=self.states.copy(),
            request_id=self.request_id,
            created_at=self.created_at,
            total_processing_time_ms=self.total_duration_ms,
        )

        for stage in PipelineStage:
            metrics = self.stage_metrics.get(stage)
            if metrics is None:
                result.set_stage_status(stage, StageStatus.SKIPPED)
                continue
            failed = any(e.stage == stage and not e.is_recoverable for e in self.errors)
            status = StageStatus.FAILED if failed else StageStatus.COMPLETED
            result.set_stage_status(stage, status, metrics.duration_ms)

        return result

    def __str__(self) -> str:
        return (
            f"PipelineContext(id={self.request_id[:8]}..., state={self.state.value}, "
            f"errors={len(self.errors)})"
        )

    @classmethod
    def for_image(
        cls,
        image: Union[ImageData, str],
        profile: HealthProfile,
        clock: Callable[[], int] = now_ms
    ) -> "PipelineContext":
        """
        Create a context for an image analysis.

        ``image`` may be decoded ImageData or the raw base64/data-URL
        payload; raw payloads are decoded by the identification stage.
        """
        if isinstance(image, ImageData):
            return cls(
                profile=profile,
                input_kind=InputKind.IMAGE,
                image=image,
                clock=clock,
            )
        return cls(
            profile=profile,
            input_kind=InputKind.IMAGE,
            image_payload=image,
            clock=clock,
        )

    @classmethod
    def for_text(
        cls,
        text: str,
        profile: HealthProfile,
        clock: Callable[[], int] = now_ms
    ) -> "PipelineContext":
        return cls(
            profile=profile,
            input_kind=InputKind.TEXT,
            query_text=text,
            clock=clock,
        )
