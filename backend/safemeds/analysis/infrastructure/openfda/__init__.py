"""
openFDA Adapters

Implementations of DrugLabelPort backed by the public openFDA API.
"""

from .label_client import OpenFDALabelClient, OPENFDA_LABEL_URL

__all__ = [
    "OpenFDALabelClient",
    "OPENFDA_LABEL_URL",
]
