"""
Drug Analysis Service

High-level application service for medication safety analysis.
"""

from typing import Optional, Dict, Any, Union
import logging

from ..pipeline.orchestrator import PipelineOrchestrator
from ...domain.value_objects.image_data import ImageData
from ...domain.entities.health_profile import HealthProfile
from ...domain.entities.drug_analysis import DrugAnalysis
from ...domain.entities.pipeline_result import PipelineResult
from ...domain.exceptions import InvalidImageError


logger = logging.getLogger(__name__)

ProfileInput = Union[HealthProfile, Dict[str, Any]]


class DrugAnalysisService:
    """
    Application service for analyzing medications against a health profile.

    This is the main entry point for external consumers. Every analyze
    method returns exactly one DrugAnalysis; pipeline failures come back
    as UNKNOWN verdicts rather than exceptions. Only an invalid profile
    raises (InvalidProfileError), since no analysis can be attempted.

    Usage:
        service = DrugAnalysisService(pipeline)

        # From a camera capture (base64 or data URL)
        analysis = service.analyze_image(image_base64, profile)

        # From a typed or spoken drug name
        analysis = service.analyze_text("aspirin", profile)

        # From a file path
        analysis = service.analyze_image_file("path/to/package.jpg", profile)
    """

    def __init__(self, pipeline: PipelineOrchestrator):
        """
        Initialize the service.

        Args:
            pipeline: Configured pipeline orchestrator
        """
        self.pipeline = pipeline
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        pipeline.validate_configuration()

    @staticmethod
    def _coerce_profile(profile: ProfileInput) -> HealthProfile:
        if isinstance(profile, HealthProfile):
            return profile
        return HealthProfile.from_dict(profile)

    def _log_result(self, result: PipelineResult) -> None:
        if result.is_successful:
            self.logger.info(f"Analysis successful: {result.analysis}")
        else:
            self.logger.warning(
                f"Analysis degraded to {result.analysis.headline!r}: {len(result.errors)} errors"
            )

    # -------------------------------------------------------------------------
    # Full results (verdict + diagnostics)
    # -------------------------------------------------------------------------

    def analyze_image_result(
        self,
        image: Union[ImageData, str],
        profile: ProfileInput
    ) -> PipelineResult:
        """
        Analyze a packaging photograph and return the full pipeline result.

        Args:
            image: ImageData, or base64 string with optional data-URL prefix
            profile: HealthProfile or its dictionary form

        Returns:
            PipelineResult with the verdict and diagnostics
        """
        profile = self._coerce_profile(profile)
        self.logger.info(
            f"Starting image analysis from {image.source if isinstance(image, ImageData) else 'base64'}"
        )

        result = self.pipeline.run_image(image, profile)
        self._log_result(result)
        return result

    def analyze_text_result(
        self,
        text: str,
        profile: ProfileInput
    ) -> PipelineResult:
        """
        Analyze a drug name and return the full pipeline result.

        Args:
            text: Drug name query
            profile: HealthProfile or its dictionary form

        Returns:
            PipelineResult with the verdict and diagnostics
        """
        profile = self._coerce_profile(profile)
        self.logger.info(f"Starting text analysis for {text!r}")

        result = self.pipeline.run_text(text, profile)
        self._log_result(result)
        return result

    # -------------------------------------------------------------------------
    # Caller-facing entry points
    # -------------------------------------------------------------------------

    def analyze_image(self, image_base64: str, profile: ProfileInput) -> DrugAnalysis:
        """Analyze a base64 photograph (data-URL prefix allowed)."""
        return self.analyze_image_result(image_base64, profile).analysis

    def analyze_text(self, text: str, profile: ProfileInput) -> DrugAnalysis:
        """Analyze a typed or spoken drug name."""
        return self.analyze_text_result(text, profile).analysis

    def analyze_image_bytes(
        self,
        image_bytes: bytes,
        profile: ProfileInput,
        format: Optional[str] = None
    ) -> DrugAnalysis:
        """
        Analyze raw image bytes.

        Empty bytes yield the "Could Not Identify" verdict.
        """
        profile = self._coerce_profile(profile)
        try:
            image = ImageData.from_bytes(image_bytes, format=format)
        except InvalidImageError as e:
            self.logger.warning(f"Rejected image bytes: {e}")
            return DrugAnalysis.unidentified_scan()

        return self.analyze_image_result(image, profile).analysis

    def analyze_image_file(self, file_path: str, profile: ProfileInput) -> DrugAnalysis:
        """
        Analyze an image file.

        A missing file yields the "Could Not Identify" verdict.
        """
        profile = self._coerce_profile(profile)
        try:
            image = ImageData.from_file(file_path)
        except (InvalidImageError, OSError) as e:
            self.logger.warning(f"Failed to load image {file_path}: {e}")
            return DrugAnalysis.unidentified_scan()

        return self.analyze_image_result(image, profile).analysis

    def get_debug_info(self, result: PipelineResult) -> Dict[str, Any]:
        """
        Get detailed debug information about pipeline execution.

        Args:
            result: Pipeline result

        Returns:
            Dictionary with debug information
        """
        return result.get_debug_info()
