"""
Drug Label Port

Abstract interface for public drug label databases.
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any


class DrugLabelPort(ABC):
    """
    Port (interface) for drug label lookups.

    Implementations query by exact generic name and return the first
    matching label record as raw JSON (e.g. one openFDA ``results`` entry).
    """

    @abstractmethod
    def fetch_label(self, generic_name: str) -> Optional[Dict[str, Any]]:
        """
        Fetch the first label whose generic name matches exactly.

        Args:
            generic_name: Active ingredient name

        Returns:
            The label record, or None if nothing matched

        Raises:
            LabelLookupError: Transport, HTTP or decoding failure
        """
        pass

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Human-readable name of the label source."""
        pass
