"""
Listing page controller

Owns a `ListingState` and applies the page's transitions to it:

    submit_search / change_category / change_sort  -> back to page 1, refetch
    change_page                                    -> keep filters, refetch
    toggle_view / set_view_mode                    -> no fetch
    reset_filters                                  -> clear filters, same as submit_search("")

Every refetch takes a ticket; a result carrying an older ticket than the
latest request is dropped. After every transition the page location is
rebuilt from state.
"""
import logging
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from apps.core.utils import parse_int
from apps.shop.listing import DEFAULT_SORT_OPTION, SORT_OPTIONS
from .client import ListingResult
from .state import (
    ListingOutcome,
    ListingState,
    ViewMode,
    build_location,
    fetch_params,
    from_query,
)

logger = logging.getLogger(__name__)

Fetcher = Callable[[Dict[str, str]], ListingResult]

DEFAULT_PATH = "/products/"
DEFAULT_PER_PAGE = 12


class ListingController:

    def __init__(
        self,
        fetcher: Fetcher,
        state: Optional[ListingState] = None,
        base_query: Optional[Mapping[str, str]] = None,
        path: str = DEFAULT_PATH,
        per_page: int = DEFAULT_PER_PAGE,
        on_navigate: Optional[Callable[[str], None]] = None,
    ):
        self.fetcher = fetcher
        self.state = state or ListingState()
        self.base_query = dict(base_query or {})
        self.path = path
        self.per_page = per_page
        self.on_navigate = on_navigate
        self.history: List[str] = []
        self.location = build_location(self.path, self.state, self.base_query)
        self._ticket = 0

    @classmethod
    def from_query(cls, fetcher: Fetcher, params: Mapping[str, str], **kwargs) -> "ListingController":
        """Open the page from a (possibly shared) link."""
        return cls(fetcher, state=from_query(params), base_query=params, **kwargs)

    # === Transitions ===

    def submit_search(self, text: str) -> ListingState:
        return self._refetch(search=(text or "").strip(), page=1)

    def change_category(self, category_id) -> ListingState:
        return self._refetch(category_id=parse_int(category_id), page=1)

    def change_sort(self, choice: str) -> ListingState:
        if choice not in SORT_OPTIONS:
            choice = DEFAULT_SORT_OPTION
        return self._refetch(sort=choice, page=1)

    def change_page(self, page) -> ListingState:
        page = parse_int(page, 1)
        return self._refetch(page=max(page, 1))

    def set_view_mode(self, mode) -> ListingState:
        self.state.view_mode = ViewMode(mode)
        self._sync_location()
        return self.state

    def toggle_view(self) -> ListingState:
        mode = ViewMode.LIST if self.state.view_mode == ViewMode.GRID else ViewMode.GRID
        return self.set_view_mode(mode)

    def reset_filters(self) -> ListingState:
        self.state.category_id = None
        return self.submit_search("")

    # === Fetching ===

    def begin_request(self) -> Tuple[int, Dict[str, str]]:
        """Take a new ticket and mark the state as loading."""
        self._ticket += 1
        self.state.loading = True
        return self._ticket, fetch_params(self.state, self.per_page)

    def apply_result(self, ticket: int, result: ListingResult) -> bool:
        """
        Apply `result` if `ticket` is still the latest one. Returns False when
        the result was stale and dropped.
        """
        if ticket != self._ticket:
            logger.debug(f"Dropping stale listing result (ticket {ticket}, latest {self._ticket})")
            return False

        state = self.state
        state.outcome = result.outcome
        if result.ok:
            state.products = list(result.products)
            state.total = result.total
            state.total_pages = result.total_pages
            state.error_message = None
        else:
            state.products = []
            state.total = 0
            state.total_pages = 0
            state.error_message = result.message
        state.loading = False
        return True

    def refresh(self) -> ListingState:
        """Fetch the page described by the current state."""
        ticket, params = self.begin_request()
        result = ListingResult.failed(ListingOutcome.NETWORK_ERROR, "fetch did not complete")
        try:
            result = self.fetcher(params)
        finally:
            self.apply_result(ticket, result)
        return self.state

    def _refetch(self, **changes) -> ListingState:
        for name, value in changes.items():
            setattr(self.state, name, value)
        try:
            self.refresh()
        finally:
            self._sync_location()
        return self.state

    # === Location ===

    def _sync_location(self):
        location = build_location(self.path, self.state, self.base_query)
        if location != self.location:
            self.history.append(self.location)
            self.location = location
            if self.on_navigate is not None:
                self.on_navigate(location)

    def url_for(self, **changes) -> str:
        """Location the page would have after applying `changes` to state."""
        return build_location(self.path, self.state.copy(**changes), self.base_query)

    def url_for_page(self, page: int) -> str:
        return self.url_for(page=page)

    def url_for_sort(self, choice: str) -> str:
        return self.url_for(sort=choice, page=1)

    def url_for_category(self, category_id: Optional[int]) -> str:
        return self.url_for(category_id=category_id, page=1)

    def url_for_view(self, mode: ViewMode) -> str:
        return self.url_for(view_mode=ViewMode(mode))

    def reset_url(self) -> str:
        return self.url_for(search="", category_id=None, page=1)
