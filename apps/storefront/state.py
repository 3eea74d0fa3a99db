"""
Listing page state and its URL representation

The page URL mirrors the listing state (q, categoryId, sort, page, view) so a
filtered result can be bookmarked and shared. Serialization only ever goes
state -> URL after a transition; a URL is read back into state once, when a
page is opened from a link.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Mapping, Optional
from urllib.parse import urlencode

from apps.core.utils import parse_int
from apps.shop.listing import DEFAULT_SORT_OPTION, SORT_OPTIONS, resolve_sort_option


class ViewMode(str, Enum):
    GRID = "grid"
    LIST = "list"


class ListingOutcome(str, Enum):
    IDLE = "idle"
    OK = "ok"
    EMPTY = "empty"
    NETWORK_ERROR = "network_error"
    MALFORMED = "malformed"
    SERVER_ERROR = "server_error"


FAILED_OUTCOMES = (ListingOutcome.NETWORK_ERROR, ListingOutcome.MALFORMED, ListingOutcome.SERVER_ERROR)

# Query parameters owned by the listing page
QUERY_PARAMS = ("q", "categoryId", "sort", "page", "view")


@dataclass
class ListingState:
    """UI state (filters, sort, view, page) plus the last applied result."""
    search: str = ""
    category_id: Optional[int] = None
    sort: str = DEFAULT_SORT_OPTION
    view_mode: ViewMode = ViewMode.GRID
    page: int = 1
    products: List[dict] = field(default_factory=list)
    total: int = 0
    total_pages: int = 0
    loading: bool = False
    outcome: ListingOutcome = ListingOutcome.IDLE
    error_message: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.outcome == ListingOutcome.EMPTY

    @property
    def has_error(self) -> bool:
        return self.outcome in FAILED_OUTCOMES

    @property
    def has_filters(self) -> bool:
        return bool(self.search) or self.category_id is not None

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def copy(self, **changes) -> "ListingState":
        return replace(self, **changes)


def to_query(state: ListingState, base: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """
    Serialize `state` into query parameters.

    Parameters in `base` that the listing page does not own are kept as they
    are. Empty and default values are left out so the canonical URL of the
    first unfiltered page is the bare path.
    """
    params = {key: value for key, value in (base or {}).items() if key not in QUERY_PARAMS}

    search = (state.search or "").strip()
    if search:
        params["q"] = search
    if state.category_id is not None:
        params["categoryId"] = str(state.category_id)
    if state.sort and state.sort != DEFAULT_SORT_OPTION:
        params["sort"] = state.sort
    if state.page and state.page > 1:
        params["page"] = str(state.page)
    if state.view_mode != ViewMode.GRID:
        params["view"] = ViewMode(state.view_mode).value

    return params


def from_query(params: Mapping[str, str]) -> ListingState:
    """Read a shared link back into listing state; bad values fall back to defaults."""
    sort = params.get("sort") or DEFAULT_SORT_OPTION
    if sort not in SORT_OPTIONS:
        sort = DEFAULT_SORT_OPTION

    page = parse_int(params.get("page"), 1)
    if page < 1:
        page = 1

    view = ViewMode.LIST if params.get("view") == ViewMode.LIST.value else ViewMode.GRID

    return ListingState(
        search=(params.get("q") or "").strip(),
        category_id=parse_int(params.get("categoryId")),
        sort=sort,
        view_mode=view,
        page=page,
    )


def build_location(path: str, state: ListingState, base: Optional[Mapping[str, str]] = None) -> str:
    query = urlencode(to_query(state, base))
    return f"{path}?{query}" if query else path


def fetch_params(state: ListingState, per_page: int) -> Dict[str, str]:
    """
    Endpoint parameters for the current state. Sold counts are always
    requested so the popular ordering has data to show.
    """
    sort = resolve_sort_option(state.sort)
    params = {
        "page": str(state.page),
        "perPage": str(per_page),
        "withSoldCount": "true",
    }
    params.update(sort.as_params())

    search = (state.search or "").strip()
    if search:
        params["q"] = search
    if state.category_id is not None:
        params["categoryId"] = str(state.category_id)
    return params
