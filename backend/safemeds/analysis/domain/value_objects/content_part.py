"""
Content Part Value Object

One part of a multimodal request to the generative model.
"""

from dataclasses import dataclass, field
from typing import Optional
import base64

from .image_data import ImageData


@dataclass(frozen=True)
class ContentPart:
    """
    A text part or an inline binary part of a model request.

    Exactly one of ``text`` or ``data`` is set.
    """

    text: Optional[str] = None
    data: Optional[bytes] = field(default=None, repr=False)
    mime_type: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.text is None) == (self.data is None):
            raise ValueError("ContentPart needs exactly one of text or data")
        if self.data is not None and not self.mime_type:
            raise ValueError("Inline data requires a mime_type")

    @property
    def is_text(self) -> bool:
        return self.text is not None

    @property
    def is_inline_data(self) -> bool:
        return self.data is not None

    @property
    def base64_data(self) -> str:
        """Inline bytes encoded for JSON transport."""
        if self.data is None:
            return ""
        return base64.b64encode(self.data).decode("utf-8")

    @classmethod
    def from_text(cls, text: str) -> "ContentPart":
        return cls(text=text)

    @classmethod
    def from_image(cls, image: ImageData) -> "ContentPart":
        return cls(data=image.bytes, mime_type=image.mime_type)
