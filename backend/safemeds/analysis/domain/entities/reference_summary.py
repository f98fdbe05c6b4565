"""
Reference Summary Entity

Authoritative label warnings fetched for an active ingredient.
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any, List, Tuple


MAX_SUMMARY_LENGTH = 5000

# (label field, prefix) in the order they appear in the summary
LABEL_SECTIONS: List[Tuple[str, str]] = [
    ("boxed_warning", "BOXED WARNING"),
    ("contraindications", "CONTRAINDICATIONS"),
    ("warnings", "WARNINGS"),
]


def _join_paragraphs(value: Any) -> str:
    """
    openFDA returns each section as an array of paragraphs.
    Join them with spaces; tolerate a bare string.
    """
    if not value:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, list):
        return " ".join(str(p) for p in value if p).strip()
    return ""


@dataclass(frozen=True)
class ReferenceSummary:
    """
    Concatenated boxed-warning, contraindications and warnings text.

    An empty ``text`` means no authoritative data was available.

    Attributes:
        text: Summary text, at most MAX_SUMMARY_LENGTH characters
        fda_source: True when real label data was found
    """

    text: str = ""
    fda_source: bool = False

    @property
    def has_data(self) -> bool:
        return bool(self.text)

    @classmethod
    def empty(cls) -> "ReferenceSummary":
        return cls(text="", fda_source=False)

    @classmethod
    def from_label(
        cls,
        record: Optional[Dict[str, Any]],
        max_length: int = MAX_SUMMARY_LENGTH
    ) -> "ReferenceSummary":
        """
        Build a summary from one openFDA label record.

        Present sections are prefixed, joined by a blank line in the fixed
        order boxed warning, contraindications, warnings, and the result is
        truncated to ``max_length``. Missing sections are omitted.
        """
        if not record:
            return cls.empty()

        sections = []
        for field_name, prefix in LABEL_SECTIONS:
            body = _join_paragraphs(record.get(field_name))
            if body:
                sections.append(f"{prefix}: {body}")

        text = "\n\n".join(sections)[:max_length]
        return cls(text=text, fda_source=bool(text))
