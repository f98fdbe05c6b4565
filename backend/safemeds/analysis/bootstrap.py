"""
Service Assembly

Wires configuration, adapters and the pipeline into a ready service.
"""

from typing import Optional
import logging

from .config.settings import AppConfig
from .application.pipeline.orchestrator import PipelineBuilder, PipelineConfig
from .application.pipeline.stages import StageConfig
from .application.services.drug_analysis_service import DrugAnalysisService
from .domain.entities.pipeline_result import PipelineStage
from .domain.ports.drug_label import DrugLabelPort
from .domain.ports.generative_model import GenerativeModelPort
from .infrastructure.llm.factory import GenerativeModelFactory
from .infrastructure.openfda.label_client import OpenFDALabelClient


logger = logging.getLogger(__name__)


def build_pipeline_config(config: AppConfig) -> PipelineConfig:
    """Translate application settings into orchestrator settings."""
    return PipelineConfig(
        identification_temperature=config.model.identification_temperature,
        reasoning_temperature=config.model.reasoning_temperature,
        max_summary_length=config.openfda.max_summary_length,
        validate_images=config.pipeline.validate_images,
        stages={
            PipelineStage.IDENTIFICATION: StageConfig(),
            PipelineStage.REFERENCE_DATA: StageConfig(
                enabled=config.pipeline.reference_data_enabled,
                fail_soft=True
            ),
            PipelineStage.SAFETY_REASONING: StageConfig(),
        },
    )


def create_analysis_service(
    config: Optional[AppConfig] = None,
    model: Optional[GenerativeModelPort] = None,
    label_repository: Optional[DrugLabelPort] = None
) -> DrugAnalysisService:
    """
    Build a DrugAnalysisService.

    Args:
        config: Application configuration (default: from environment)
        model: Generative model override (default: built from config.model)
        label_repository: Label source override (default: openFDA)

    Returns:
        Configured DrugAnalysisService
    """
    config = config or AppConfig.from_env()

    if model is None:
        model = GenerativeModelFactory.create_from_config({
            "type": config.model.type,
            "model": config.model.model,
            "api_key": config.model.api_key,
            "base_url": config.model.base_url,
            "timeout": config.model.timeout,
        })

    if label_repository is None:
        label_repository = OpenFDALabelClient(
            base_url=config.openfda.base_url,
            api_key=config.openfda.api_key,
            timeout=config.openfda.timeout
        )

    pipeline = (
        PipelineBuilder()
        .with_model(model)
        .with_label_repository(label_repository)
        .with_config(build_pipeline_config(config))
        .build()
    )

    logger.info(
        f"Analysis service ready: model={config.model.type}/{model.model_name}, "
        f"labels={label_repository.source_name}"
    )
    return DrugAnalysisService(pipeline)
