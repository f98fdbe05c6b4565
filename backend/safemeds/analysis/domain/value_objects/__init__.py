"""
Value Objects

Immutable objects that describe pipeline inputs.
"""

from .image_data import ImageData
from .content_part import ContentPart

__all__ = [
    "ImageData",
    "ContentPart",
]
