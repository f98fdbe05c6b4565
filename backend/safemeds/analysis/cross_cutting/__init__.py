"""
Cross-Cutting Concerns

Utilities and services that span across multiple layers.
"""

from .logging import configure_logging
from .validation import validate_image, validate_text, detect_image_format
from .error_handling import handle_exception, describe_error
from .safety import DisclaimerInjector

__all__ = [
    "configure_logging",
    "validate_image",
    "validate_text",
    "detect_image_format",
    "handle_exception",
    "describe_error",
    "DisclaimerInjector",
]
