"""
openFDA Label Search Adapter

Queries the openFDA drug endpoints:

    GET https://api.fda.gov/drug/label.json?search=...&limit=N&api_key=...
    GET https://api.fda.gov/drug/ndc.json?search=...&limit=N&api_key=...

openFDA answers a search with no hits with HTTP 404 and
``{"error": {"code": "NOT_FOUND", ...}}``; that is reported as EMPTY.
"""

from typing import Optional, Dict, Any, List, Callable
import logging
import time

import requests

from ...domain.ports.label_search import LabelSearchPort, LabelRecord
from ...domain.value_objects.call_outcome import CallOutcome
from ..utils.http import create_session


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.fda.gov/drug"
LABEL_ENDPOINT = "label.json"
NDC_ENDPOINT = "ndc.json"
NOT_FOUND_CODE = "NOT_FOUND"


class OpenFDALabelSearch(LabelSearchPort):
    """
    LabelSearchPort implementation backed by openFDA.

    The API key is optional (openFDA allows keyless use at a lower rate
    limit) and is never logged.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the client.

        Args:
            api_key: openFDA API key
            base_url: Drug API base URL
            timeout: Request timeout in seconds
            session: Optional requests session (shared or fake)
        """
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or create_session()

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _get(self, endpoint: str, query: str, limit: int) -> CallOutcome[List[LabelRecord]]:
        params: Dict[str, Any] = {"search": query, "limit": limit}
        if self._api_key:
            params["api_key"] = self._api_key

        start_time = time.time()
        try:
            response = self._session.get(
                f"{self._base_url}/{endpoint}",
                params=params,
                timeout=self._timeout,
            )
            data = response.json()
        except requests.RequestException as e:
            self.logger.error(f"openFDA request failed ({endpoint} {query!r}): {type(e).__name__}")
            return CallOutcome.error(f"transport error: {type(e).__name__}")
        except ValueError as e:
            self.logger.error(f"openFDA returned invalid JSON ({endpoint} {query!r}): {e}")
            return CallOutcome.error("malformed response")

        if not isinstance(data, dict):
            return CallOutcome.error("malformed response")

        error = data.get("error")
        if error:
            code = error.get("code") if isinstance(error, dict) else None
            if code == NOT_FOUND_CODE:
                self.logger.debug(f"openFDA: no matches for {query!r}")
                return CallOutcome.empty("no matches")
            self.logger.error(f"openFDA API error: {error}")
            return CallOutcome.error(f"API error: {error}")

        if not response.ok:
            return CallOutcome.error(f"HTTP {response.status_code}")

        results = data.get("results")
        if results is None:
            return CallOutcome.empty("no results")
        if not isinstance(results, list):
            return CallOutcome.error("malformed response")

        records = [r for r in results if isinstance(r, dict)]
        elapsed = (time.time() - start_time) * 1000
        self.logger.info(f"openFDA {endpoint} {query!r}: {len(records)} result(s) in {elapsed:.0f}ms")

        if not records:
            return CallOutcome.empty("no results")
        return CallOutcome.success(records)

    def search_labels(self, query: str, limit: int = 10) -> CallOutcome[List[LabelRecord]]:
        return self._get(LABEL_ENDPOINT, query, limit)

    def search_products(self, query: str, limit: int = 1) -> CallOutcome[List[LabelRecord]]:
        return self._get(NDC_ENDPOINT, query, limit)

    @property
    def provider_name(self) -> str:
        return "openfda"


class DummyLabelSearch(LabelSearchPort):
    """
    In-memory label search for tests and offline development.

    Answers are looked up by exact query string; a ``responder`` callable
    can be given instead for pattern-based answers. Every query is recorded
    in ``queries`` as ``(endpoint, query, limit)``.
    """

    def __init__(
        self,
        labels: Optional[Dict[str, List[LabelRecord]]] = None,
        products: Optional[Dict[str, List[LabelRecord]]] = None,
        responder: Optional[Callable[[str, str, int], CallOutcome]] = None
    ):
        self._labels = labels or {}
        self._products = products or {}
        self._responder = responder
        self.queries: List[tuple] = []

    def _answer(self, endpoint: str, table: Dict[str, List[LabelRecord]], query: str, limit: int) -> CallOutcome:
        self.queries.append((endpoint, query, limit))
        if self._responder is not None:
            return self._responder(endpoint, query, limit)
        records = table.get(query) or []
        return CallOutcome.success(records[:limit]) if records else CallOutcome.empty("no matches")

    def search_labels(self, query: str, limit: int = 10) -> CallOutcome[List[LabelRecord]]:
        return self._answer(LABEL_ENDPOINT, self._labels, query, limit)

    def search_products(self, query: str, limit: int = 1) -> CallOutcome[List[LabelRecord]]:
        return self._answer(NDC_ENDPOINT, self._products, query, limit)

    @property
    def provider_name(self) -> str:
        return "DummyLabelSearch"
