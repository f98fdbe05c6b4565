"""
Input Validation

Checks applied to photographs and drug name queries before they are
sent to the generative model.
"""

from typing import Optional, Tuple
from io import BytesIO

from PIL import Image as PILImage, UnidentifiedImageError

from ..domain.value_objects.image_data import ImageData


# Formats the identification models accept inline
SUPPORTED_FORMATS = {"jpeg", "png", "webp", "gif", "bmp"}

MAX_IMAGE_DIMENSION = 8192

# 10 MB
MAX_FILE_SIZE = 10 * 1024 * 1024

MAX_QUERY_LENGTH = 200

_PIL_ERRORS = (UnidentifiedImageError, OSError, ValueError)


def detect_image_format(image_bytes: bytes) -> Optional[str]:
    """
    Detect the image format with Pillow.

    Returns:
        Lower-case format name (e.g. "jpeg", "png"), or None if the bytes
        are not a readable image
    """
    try:
        with PILImage.open(BytesIO(image_bytes)) as pil_image:
            return pil_image.format.lower() if pil_image.format else None
    except _PIL_ERRORS:
        return None


def validate_image(image: ImageData) -> Tuple[bool, Optional[str]]:
    """
    Check that a photograph is a readable image of acceptable size.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if len(image) > MAX_FILE_SIZE:
        return False, f"Image size exceeds maximum ({MAX_FILE_SIZE // (1024 * 1024)} MB)"

    try:
        with PILImage.open(BytesIO(image.bytes)) as pil_image:
            pil_image.verify()
        # verify() leaves the image unusable, reopen for metadata
        with PILImage.open(BytesIO(image.bytes)) as pil_image:
            size = pil_image.size
            detected = (pil_image.format or "unknown").lower()
    except _PIL_ERRORS as e:
        return False, f"Invalid image data: {e}"

    if max(size) > MAX_IMAGE_DIMENSION:
        return False, f"Image dimensions exceed maximum ({MAX_IMAGE_DIMENSION}x{MAX_IMAGE_DIMENSION})"

    if detected not in SUPPORTED_FORMATS:
        return False, f"Unsupported image format: {detected}"

    return True, None


def validate_text(text: Optional[str], max_length: int = MAX_QUERY_LENGTH) -> Tuple[bool, Optional[str]]:
    """Check a drug name query. Surrounding whitespace is ignored."""
    text = (text or "").strip()

    if not text:
        return False, "Drug name cannot be empty"

    if len(text) > max_length:
        return False, f"Drug name too long (maximum {max_length} characters)"

    return True, None
