import pytest
import requests

from apps.storefront.client import ProductListingClient
from apps.storefront.state import ListingOutcome


class FakeResponse:

    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self._text = text

    def json(self):
        if self._text is not None:
            raise ValueError("No JSON object could be decoded")
        return self._body


class FakeSession:

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, params=None, timeout=None):
        self.requests.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


def listing_body(products, total=None, total_pages=1):
    return {
        "success": True,
        "data": products,
        "pagination": {
            "total": len(products) if total is None else total,
            "page": 1,
            "perPage": 12,
            "totalPages": total_pages,
        },
        "meta": {},
    }


def client_for(session):
    return ProductListingClient("http://shop.test/", session=session, timeout=2.5)


def test_ok_result_and_request_shape():
    session = FakeSession(FakeResponse(body=listing_body([{"name": "Yoga Mat"}], total=13, total_pages=2)))

    result = client_for(session).fetch({"page": "1", "withSoldCount": "true"})

    assert result.outcome == ListingOutcome.OK
    assert result.products == [{"name": "Yoga Mat"}]
    assert result.total == 13
    assert result.total_pages == 2
    assert session.requests == [{
        "url": "http://shop.test/api/products/",
        "params": {"page": "1", "withSoldCount": "true"},
        "timeout": 2.5,
    }]


def test_zero_matches_is_empty_not_an_error():
    result = client_for(FakeSession(FakeResponse(body=listing_body([])))).fetch({})
    assert result.outcome == ListingOutcome.EMPTY
    assert result.ok


def test_page_past_the_end_is_not_empty():
    session = FakeSession(FakeResponse(body=listing_body([], total=13, total_pages=2)))

    result = client_for(session).fetch({"page": "5"})

    assert result.outcome == ListingOutcome.OK
    assert result.products == []
    assert result.total == 13


@pytest.mark.parametrize("error", [
    requests.ConnectionError("refused"),
    requests.Timeout("too slow"),
])
def test_network_failures(error):
    result = client_for(FakeSession(error=error)).fetch({})
    assert result.outcome == ListingOutcome.NETWORK_ERROR
    assert result.products == []
    assert not result.ok


def test_non_json_error_status_is_a_network_error():
    result = client_for(FakeSession(FakeResponse(status_code=502, text="<html>Bad Gateway</html>"))).fetch({})
    assert result.outcome == ListingOutcome.NETWORK_ERROR


@pytest.mark.parametrize("response", [
    FakeResponse(status_code=200, text="<html>not json</html>"),
    FakeResponse(body=["not", "an", "object"]),
    FakeResponse(body={"data": []}),
    FakeResponse(body={"success": True, "data": {"name": "x"}, "pagination": {}}),
    FakeResponse(body={"success": True, "data": [], "pagination": None}),
    FakeResponse(body={"success": True, "data": [], "pagination": {"total": "many"}}),
])
def test_malformed_bodies(response):
    result = client_for(FakeSession(response)).fetch({})
    assert result.outcome == ListingOutcome.MALFORMED
    assert result.products == []


def test_server_reported_failure():
    body = {"success": False, "message": "Internal Server Error"}
    result = client_for(FakeSession(FakeResponse(status_code=500, body=body))).fetch({})
    assert result.outcome == ListingOutcome.SERVER_ERROR
    assert "Internal Server Error" in result.message


def test_fetch_product():
    body = {"success": True, "data": {"name": "Yoga Mat", "slug": "yoga-mat"}}
    session = FakeSession(FakeResponse(body=body))

    result = client_for(session).fetch_product("yoga-mat")

    assert result.outcome == ListingOutcome.OK
    assert result.products == [{"name": "Yoga Mat", "slug": "yoga-mat"}]
    assert session.requests[0]["params"] == {"slug": "yoga-mat", "withSoldCount": "true"}


def test_fetch_unknown_product_is_empty():
    body = {"success": False, "message": "Product not found"}
    result = client_for(FakeSession(FakeResponse(status_code=404, body=body))).fetch_product("missing")
    assert result.outcome == ListingOutcome.EMPTY
