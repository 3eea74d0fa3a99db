"""
HTTP client for the product listing endpoint

`ProductListingClient.fetch()` never raises: every failure is logged and
turned into a `ListingResult` with an empty product list and an outcome that
says what went wrong.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from apps.core.exceptions import ListingFetchError
from .state import ListingOutcome

logger = logging.getLogger(__name__)

LISTING_PATH = "/api/products/"


@dataclass
class ListingResult:
    outcome: ListingOutcome
    products: List[Dict[str, Any]] = field(default_factory=list)
    total: int = 0
    page: int = 1
    per_page: int = 0
    total_pages: int = 0
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome in (ListingOutcome.OK, ListingOutcome.EMPTY)

    @classmethod
    def failed(cls, outcome: ListingOutcome, message: str) -> "ListingResult":
        return cls(outcome=outcome, message=message)


class ProductListingClient:
    """
    Calls `GET /api/products/` on `base_url`.

    A `requests.Session` may be passed in (tests pass a fake one).
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: float = 5.0):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def url(self) -> str:
        return f"{self.base_url}{LISTING_PATH}"

    def _get_json(self, params: Dict[str, str]) -> Dict[str, Any]:
        try:
            response = self.session.get(self.url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise ListingFetchError(str(e), ListingOutcome.NETWORK_ERROR)

        try:
            body = response.json()
        except ValueError:
            if response.status_code >= 400:
                raise ListingFetchError(f"HTTP {response.status_code}", ListingOutcome.NETWORK_ERROR)
            raise ListingFetchError("response is not JSON", ListingOutcome.MALFORMED)

        if not isinstance(body, dict) or "success" not in body:
            raise ListingFetchError("unexpected response body", ListingOutcome.MALFORMED)

        if body.get("success") is not True:
            message = body.get("message") or f"HTTP {response.status_code}"
            if response.status_code == 404:
                raise ListingFetchError(str(message), ListingOutcome.EMPTY)
            raise ListingFetchError(str(message), ListingOutcome.SERVER_ERROR)

        return body

    def fetch(self, params: Dict[str, str]) -> ListingResult:
        """Fetch one page of products."""
        try:
            body = self._get_json(params)

            data = body.get("data")
            pagination = body.get("pagination")
            if not isinstance(data, list) or not isinstance(pagination, dict):
                raise ListingFetchError("missing data or pagination", ListingOutcome.MALFORMED)

            try:
                total = int(pagination.get("total", 0))
                result = ListingResult(
                    # a page past the end has no rows but the set is not empty
                    outcome=ListingOutcome.OK if data or total > 0 else ListingOutcome.EMPTY,
                    products=data,
                    total=total,
                    page=int(pagination.get("page", 1)),
                    per_page=int(pagination.get("perPage", 0)),
                    total_pages=int(pagination.get("totalPages", 0)),
                )
            except (TypeError, ValueError):
                raise ListingFetchError("invalid pagination counters", ListingOutcome.MALFORMED)

        except ListingFetchError as e:
            logger.warning(f"Product listing fetch failed ({e.outcome.value}) params={params}: {e.message}")
            return ListingResult.failed(e.outcome, e.message)

        logger.debug(
            f"Product listing fetched params={params} -> {result.outcome.value}, "
            f"{len(result.products)} of {result.total}"
        )
        return result

    def fetch_product(self, slug: str) -> ListingResult:
        """
        Fetch a single product by slug. An unknown slug comes back as an
        EMPTY result.
        """
        params = {"slug": slug, "withSoldCount": "true"}
        try:
            body = self._get_json(params)
            product = body.get("data")
            if not isinstance(product, dict):
                raise ListingFetchError("product is not an object", ListingOutcome.MALFORMED)
        except ListingFetchError as e:
            if e.outcome == ListingOutcome.EMPTY:
                return ListingResult(outcome=ListingOutcome.EMPTY, message=e.message)
            logger.warning(f"Product fetch failed ({e.outcome.value}) slug={slug}: {e.message}")
            return ListingResult.failed(e.outcome, e.message)

        return ListingResult(outcome=ListingOutcome.OK, products=[product], total=1, page=1, per_page=1, total_pages=1)
