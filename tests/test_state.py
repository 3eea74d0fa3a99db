from apps.storefront.state import (
    ListingState,
    ViewMode,
    build_location,
    fetch_params,
    from_query,
    to_query,
)


def test_default_state_serializes_to_nothing():
    assert to_query(ListingState()) == {}
    assert build_location("/products/", ListingState()) == "/products/"


def test_to_query_writes_non_default_values():
    state = ListingState(search="  yoga mat ", category_id=3, sort="price_low", page=2, view_mode=ViewMode.LIST)
    assert to_query(state) == {
        "q": "yoga mat",
        "categoryId": "3",
        "sort": "price_low",
        "page": "2",
        "view": "list",
    }


def test_to_query_keeps_unrelated_parameters():
    base = {"utm_source": "newsletter", "q": "old search", "page": "4"}
    params = to_query(ListingState(search="ball"), base)
    assert params == {"utm_source": "newsletter", "q": "ball"}


def test_from_query_reads_a_shared_link():
    state = from_query({"q": "mat", "categoryId": "7", "sort": "popular", "page": "3", "view": "list"})
    assert state.search == "mat"
    assert state.category_id == 7
    assert state.sort == "popular"
    assert state.page == 3
    assert state.view_mode == ViewMode.LIST


def test_from_query_ignores_bad_values():
    state = from_query({"categoryId": "shoes", "sort": "cheapest", "page": "-2", "view": "table"})
    assert state == ListingState()


def test_shared_link_round_trip():
    state = ListingState(search="mat", category_id=2, sort="price_high", page=5)
    assert from_query(to_query(state)) == state


def test_fetch_params_always_request_sold_counts():
    params = fetch_params(ListingState(sort="popular", page=2, category_id=4, search="mat"), per_page=12)
    assert params == {
        "page": "2",
        "perPage": "12",
        "withSoldCount": "true",
        "sortBy": "soldCount",
        "sortOrder": "desc",
        "q": "mat",
        "categoryId": "4",
    }


def test_fetch_params_for_default_state():
    params = fetch_params(ListingState(), per_page=10)
    assert params == {"page": "1", "perPage": "10", "withSoldCount": "true", "sortBy": "id", "sortOrder": "desc"}
