"""
Domain Exceptions

Custom exceptions for the medication safety analysis domain.
Exceptions are organized by pipeline stage for clear error handling.
Whether a failure aborts the pipeline is decided by the stage that
catches it, not by the exception.
"""

from typing import Optional, Dict, Any


class DomainException(Exception):
    """
    Base exception for all domain-level errors.

    Attributes:
        message: Human-readable error message
        details: Additional error details
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return f"{self.__class__.__name__}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


# =============================================================================
# Identification Exceptions
# =============================================================================

class IdentificationError(DomainException):
    """Base exception for drug identification errors."""

    def __init__(self, message: str = "Could not identify drug", **kwargs):
        super().__init__(message, **kwargs)


class UnidentifiedDrugError(IdentificationError):
    """The model could not resolve an active ingredient from the input."""

    def __init__(
        self,
        message: str = "Could not identify drug",
        brand_name: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if brand_name:
            self.details["brand_name"] = brand_name


# =============================================================================
# Reference Data (openFDA) Exceptions
# =============================================================================

class ReferenceDataError(DomainException):
    """Base exception for reference data lookup errors."""
    pass


class LabelLookupError(ReferenceDataError):
    """The drug label database could not be queried."""

    def __init__(
        self,
        message: str = "Drug label lookup failed",
        generic_name: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if generic_name:
            self.details["generic_name"] = generic_name
        if status_code is not None:
            self.details["status_code"] = status_code


# =============================================================================
# Generative Model Exceptions
# =============================================================================

class GenerativeModelError(DomainException):
    """Base exception for generative model errors."""

    def __init__(
        self,
        message: str = "Generative model error",
        provider: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if provider:
            self.details["provider"] = provider


class ModelConnectionError(GenerativeModelError):
    """Failed to reach the generative model service or it returned non-2xx."""

    def __init__(
        self,
        message: str = "Failed to connect to generative model service",
        status_code: Optional[int] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if status_code is not None:
            self.details["status_code"] = status_code


class ModelResponseError(GenerativeModelError):
    """The model answered, but the body is not a JSON object."""

    def __init__(
        self,
        message: str = "Generative model returned an unreadable response",
        raw_response: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if raw_response:
            self.details["raw_response_preview"] = raw_response[:200]


class SchemaViolationError(GenerativeModelError):
    """The model's JSON does not conform to the requested schema."""

    def __init__(
        self,
        schema_name: str,
        errors: Optional[list] = None,
        message: Optional[str] = None,
        **kwargs
    ):
        message = message or f"Response does not match the {schema_name} schema"
        super().__init__(message, **kwargs)
        self.details["schema"] = schema_name
        if errors:
            self.details["errors"] = errors


# =============================================================================
# Pipeline Exceptions
# =============================================================================

class PipelineExecutionError(DomainException):
    """Base exception for pipeline-level errors."""
    pass


class PipelineConfigurationError(PipelineExecutionError):
    """Pipeline is not properly configured."""

    def __init__(
        self,
        message: str = "Pipeline is not properly configured",
        missing_components: Optional[list] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if missing_components:
            self.details["missing_components"] = missing_components


# =============================================================================
# Validation Exceptions
# =============================================================================

class ValidationError(DomainException):
    """Base exception for validation errors."""
    pass


class InvalidImageError(ValidationError):
    """Input image is invalid or corrupted."""

    def __init__(
        self,
        message: str = "Invalid or corrupted image",
        **kwargs
    ):
        super().__init__(message, **kwargs)


class InvalidInputError(ValidationError):
    """Invalid input provided to a function or method."""

    def __init__(
        self,
        field: str,
        reason: str,
        **kwargs
    ):
        message = f"Invalid input for '{field}': {reason}"
        super().__init__(message, **kwargs)
        self.details["field"] = field
        self.details["reason"] = reason


class InvalidProfileError(InvalidInputError):
    """Health profile failed validation."""

    def __init__(self, field: str, reason: str, **kwargs):
        super().__init__(field=f"profile.{field}", reason=reason, **kwargs)
