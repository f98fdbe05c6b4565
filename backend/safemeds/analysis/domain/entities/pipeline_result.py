"""
Pipeline Result Entity

Final output of one analysis pipeline run, with execution diagnostics.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
from enum import Enum
from datetime import datetime

from .drug_analysis import DrugAnalysis
from .drug_identity import DrugIdentity
from .reference_summary import ReferenceSummary


class StageStatus(Enum):
    """Status of a pipeline stage execution."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


class PipelineStage(Enum):
    """Enumeration of pipeline stages."""

    IDENTIFICATION = "identification"
    REFERENCE_DATA = "reference_data"
    SAFETY_REASONING = "safety_reasoning"


class PipelineState(Enum):
    """
    Pipeline state machine.

    IDENTIFYING -> REFERENCING -> REASONING -> DONE
    IDENTIFYING -> FAILED -> DONE
    REASONING -> FAILED -> DONE
    """

    IDENTIFYING = "identifying"
    REFERENCING = "referencing"
    REASONING = "reasoning"
    FAILED = "failed"
    DONE = "done"


# Allowed transitions; REFERENCING never fails.
STATE_TRANSITIONS: Dict[PipelineState, set] = {
    PipelineState.IDENTIFYING: {PipelineState.REFERENCING, PipelineState.FAILED},
    PipelineState.REFERENCING: {PipelineState.REASONING},
    PipelineState.REASONING: {PipelineState.DONE, PipelineState.FAILED},
    PipelineState.FAILED: {PipelineState.DONE},
    PipelineState.DONE: set(),
}


class InputKind(Enum):
    """What the caller submitted."""

    IMAGE = "image"
    TEXT = "text"


@dataclass
class PipelineError:
    """
    An error recorded during pipeline execution.

    Attributes:
        stage: Pipeline stage where error occurred
        error_type: Type of error
        message: Human-readable error message
        details: Additional error details
        timestamp: When the error occurred
        is_recoverable: Whether pipeline can continue
    """

    stage: PipelineStage
    error_type: str
    message: str
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime = field(default_factory=datetime.now)
    is_recoverable: bool = True

    def __str__(self) -> str:
        return f"[{self.stage.value}] {self.error_type}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "stage": self.stage.value,
            "error_type": self.error_type,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "is_recoverable": self.is_recoverable,
        }


@dataclass
class StageResult:
    """Metadata about a single stage execution."""

    stage: PipelineStage
    status: StageStatus = StageStatus.PENDING
    duration_ms: float = 0.0

    @property
    def is_successful(self) -> bool:
        return self.status == StageStatus.COMPLETED


@dataclass
class PipelineResult:
    """
    Complete result of one pipeline run.

    ``analysis`` is always set once the pipeline reaches DONE; the other
    fields are diagnostics for logging and debugging.
    """

    analysis: DrugAnalysis
    input_kind: InputKind
    identity: Optional[DrugIdentity] = None
    reference: Optional[ReferenceSummary] = None
    errors: List[PipelineError] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    states: List[PipelineState] = field(default_factory=list)
    stage_results: Dict[PipelineStage, StageResult] = field(default_factory=dict)
    request_id: str = ""
    created_at: datetime = field(default_factory=datetime.now)
    total_processing_time_ms: float = 0.0

    @property
    def is_successful(self) -> bool:
        """Check if the pipeline produced a conclusive verdict."""
        return self.analysis.status.is_conclusive

    @property
    def failed_stage(self) -> Optional[PipelineStage]:
        """The stage whose failure aborted the run, if any."""
        for error in self.errors:
            if not error.is_recoverable:
                return error.stage
        return None

    def set_stage_status(
        self,
        stage: PipelineStage,
        status: StageStatus,
        duration_ms: float = 0.0
    ) -> None:
        self.stage_results[stage] = StageResult(
            stage=stage, status=status, duration_ms=duration_ms
        )

    def get_debug_info(self) -> Dict[str, Any]:
        """Detailed information about pipeline execution."""
        return {
            "request_id": self.request_id,
            "input_kind": self.input_kind.value,
            "created_at": self.created_at.isoformat(),
            "total_processing_time_ms": self.total_processing_time_ms,
            "states": [s.value for s in self.states],
            "identity": self.identity.to_dict() if self.identity else None,
            "fda_source": bool(self.reference and self.reference.fda_source),
            "stages": {
                stage.value: {
                    "status": result.status.value,
                    "duration_ms": result.duration_ms,
                }
                for stage, result in self.stage_results.items()
            },
            "errors": [e.to_dict() for e in self.errors],
            "warnings": list(self.warnings),
        }
