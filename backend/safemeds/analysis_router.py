"""
Analysis Router - Medication Safety Endpoints

1. Identify the drug from a packaging photo or a typed name
2. Pull official warnings from openFDA
3. Reason over the user's health profile for a verdict
"""

from functools import lru_cache
from typing import Optional, List, Dict, Any
import logging
import time

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field, field_validator

from safemeds.analysis.bootstrap import create_analysis_service
from safemeds.analysis.config.settings import AppConfig, get_default_config
from safemeds.analysis.application.services.drug_analysis_service import DrugAnalysisService
from safemeds.analysis.domain.entities.health_profile import HealthProfile, Sex
from safemeds.analysis.domain.exceptions import InvalidProfileError
from safemeds.analysis.cross_cutting.safety import DisclaimerInjector


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analysis", tags=["Analysis"])

_disclaimers = DisclaimerInjector()


@lru_cache(maxsize=1)
def get_app_config() -> AppConfig:
    return get_default_config()


@lru_cache(maxsize=1)
def get_analysis_service() -> DrugAnalysisService:
    """Process-wide service; adapters hold only configuration and an HTTP session."""
    return create_analysis_service(get_app_config())


class HealthProfileModel(BaseModel):
    """Health profile as sent by the client."""

    model_config = ConfigDict(populate_by_name=True)

    age: int = Field(ge=0, le=150)
    sex: Sex = Field(default=Sex.OTHER, alias="gender")
    conditions: List[str] = Field(default_factory=list)
    allergies: List[str] = Field(default_factory=list)
    current_medications: List[str] = Field(default_factory=list, alias="currentMeds")

    @field_validator("sex", mode="before")
    @classmethod
    def parse_sex(cls, value: Any) -> Sex:
        """Same case-insensitive parsing as the service and the CLI."""
        try:
            return Sex.from_string(value)
        except InvalidProfileError as e:
            raise ValueError(e.message)

    def to_domain(self) -> HealthProfile:
        return HealthProfile(
            age=self.age,
            sex=self.sex,
            conditions=self.conditions,
            allergies=self.allergies,
            current_medications=self.current_medications,
        )


class TextAnalysisRequest(BaseModel):
    """Request model for drug name analysis."""
    text: str
    profile: HealthProfileModel


class ImageAnalysisRequest(BaseModel):
    """Request model for base64 image analysis (data-URL prefix allowed)."""
    image_base64: str
    profile: HealthProfileModel


class AnalysisResponse(BaseModel):
    """Response model for an analysis."""
    success: bool
    analysis: Dict[str, Any]
    warnings: List[str] = []
    disclaimer: str
    request_id: Optional[str] = None
    processing_time_ms: Optional[float] = None


def _to_profile(model: HealthProfileModel) -> HealthProfile:
    try:
        return model.to_domain()
    except InvalidProfileError as e:
        raise HTTPException(status_code=422, detail=e.message)


def _build_response(result, start_time: float) -> AnalysisResponse:
    return AnalysisResponse(
        success=result.is_successful,
        analysis=result.analysis.to_dict(),
        warnings=result.warnings,
        disclaimer=_disclaimers.for_analysis(result.analysis),
        request_id=result.request_id,
        processing_time_ms=(time.time() - start_time) * 1000,
    )


@router.post("/text", response_model=AnalysisResponse)
def analyze_text(
    request: TextAnalysisRequest,
    service: DrugAnalysisService = Depends(get_analysis_service)
):
    """Analyze a typed or spoken drug name against the profile."""
    start_time = time.time()

    text = request.text.strip()
    if not text:
        raise HTTPException(status_code=400, detail="Drug name cannot be empty")

    result = service.analyze_text_result(text, _to_profile(request.profile))
    return _build_response(result, start_time)


@router.post("/image", response_model=AnalysisResponse)
def analyze_image(
    request: ImageAnalysisRequest,
    service: DrugAnalysisService = Depends(get_analysis_service)
):
    """Analyze a packaging photograph (base64 or data URL) against the profile."""
    start_time = time.time()

    if not request.image_base64.strip():
        raise HTTPException(status_code=400, detail="Image cannot be empty")

    result = service.analyze_image_result(request.image_base64, _to_profile(request.profile))
    return _build_response(result, start_time)


@router.get("/health")
def analysis_health(config: AppConfig = Depends(get_app_config)):
    """Report which model and label source the service is configured for."""
    return {
        "status": "healthy",
        "model_type": config.model.type,
        "model": config.model.model,
        "model_api_key_set": bool(config.model.api_key) or config.model.type in ("ollama", "dummy"),
        "openfda_url": config.openfda.base_url,
        "reference_data_enabled": config.pipeline.reference_data_enabled,
    }
