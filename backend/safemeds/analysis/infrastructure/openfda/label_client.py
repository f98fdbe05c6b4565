"""
openFDA Label Client

Drug label lookups against the openFDA ``drug/label`` endpoint.
"""

from typing import Optional, Dict, Any
from urllib.parse import quote
import logging

import requests

from ...domain.ports.drug_label import DrugLabelPort
from ...domain.exceptions import LabelLookupError


logger = logging.getLogger(__name__)

OPENFDA_LABEL_URL = "https://api.fda.gov/drug/label.json"


def build_generic_name_query(generic_name: str) -> str:
    """Exact-match search expression on the label's generic name."""
    return f'openfda.generic_name:"{generic_name}"'


class OpenFDALabelClient(DrugLabelPort):
    """
    DrugLabelPort implementation over the public openFDA API.

    openFDA answers "no matches" with HTTP 404, which maps to None; every
    other failure raises LabelLookupError.

    Attributes:
        base_url: Label endpoint
        api_key: Optional openFDA key (raises the anonymous rate limit)
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        base_url: str = OPENFDA_LABEL_URL,
        api_key: Optional[str] = None,
        timeout: int = 15,
        session: Optional[requests.Session] = None
    ):
        self._base_url = base_url
        self._api_key = api_key
        self._timeout = timeout
        self._session = session

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _init_session(self) -> None:
        """Initialize HTTP session."""
        self._session = requests.Session()
        self._session.headers.update({
            "Accept": "application/json",
            "User-Agent": "SafeMeds/1.0",
        })

    def build_url(self, generic_name: str) -> str:
        """Full request URL, encoded the way the API expects."""
        encoded_query = quote(build_generic_name_query(generic_name), safe="!*'()")
        url = f"{self._base_url}?search={encoded_query}&limit=1"
        if self._api_key:
            url += f"&api_key={quote(self._api_key, safe='')}"
        return url

    def fetch_label(self, generic_name: str) -> Optional[Dict[str, Any]]:
        if not self._session:
            self._init_session()

        url = self.build_url(generic_name)
        self.logger.debug(f"openFDA lookup: {build_generic_name_query(generic_name)}")

        try:
            response = self._session.get(url, timeout=self._timeout)
        except requests.RequestException as e:
            raise LabelLookupError(
                f"openFDA request failed: {e}",
                generic_name=generic_name
            )

        if response.status_code == 404:
            return None

        if not response.ok:
            raise LabelLookupError(
                f"openFDA returned HTTP {response.status_code}",
                generic_name=generic_name,
                status_code=response.status_code
            )

        try:
            body = response.json()
        except ValueError as e:
            raise LabelLookupError(
                f"openFDA returned invalid JSON: {e}",
                generic_name=generic_name
            )

        results = body.get("results") if isinstance(body, dict) else None
        if not results:
            return None

        return results[0]

    @property
    def source_name(self) -> str:
        return "openFDA"
