from unittest import mock
from urllib.parse import urlsplit

import pytest
from django.urls import reverse
from rest_framework.throttling import AnonRateThrottle

from apps.storefront.client import ListingResult, ProductListingClient
from apps.storefront.state import ListingOutcome

pytestmark = pytest.mark.django_db

PRODUCTS = [
    {"id": 2, "name": "Soccer Ball", "slug": "soccer-ball", "price": "35.00", "images": [], "soldCount": 7},
    {"id": 1, "name": "Yoga Mat", "slug": "yoga-mat", "price": "19.99", "images": ["/img/mat.jpg"], "soldCount": 0},
]


@pytest.fixture
def listing_client():
    client = mock.Mock()
    with mock.patch("apps.storefront.views.get_listing_client", return_value=client):
        yield client


def ok_result(products=PRODUCTS, total=2, total_pages=1):
    return ListingResult(
        outcome=ListingOutcome.OK if products else ListingOutcome.EMPTY,
        products=list(products),
        total=total,
        page=1,
        per_page=12,
        total_pages=total_pages,
    )


def test_home_redirects_to_listing(client):
    response = client.get("/")
    assert response.status_code == 302
    assert response["Location"] == reverse("storefront:product-list")


def test_listing_page_renders_products(client, listing_client, category):
    listing_client.fetch.return_value = ok_result(total=30, total_pages=3)

    response = client.get("/products/", {"q": "ball", "sort": "popular", "page": "2", "utm": "x"})

    assert response.status_code == 200
    params = listing_client.fetch.call_args.args[0]
    assert params["q"] == "ball"
    assert params["sortBy"] == "soldCount"
    assert params["page"] == "2"
    assert params["withSoldCount"] == "true"

    html = response.content.decode()
    assert "Soccer Ball" in html
    assert "7 sold" in html
    assert "Sports" in html
    assert response.context["next_url"] == "/products/?utm=x&q=ball&sort=popular&page=3"
    assert response.context["previous_url"] == "/products/?utm=x&q=ball&sort=popular"


def test_listing_page_list_view(client, listing_client):
    listing_client.fetch.return_value = ok_result()

    response = client.get("/products/", {"view": "list"})

    assert response.context["is_list_view"] is True
    assert 'class="products list"' in response.content.decode()


def test_empty_state_links_to_unfiltered_first_page(client, listing_client, category):
    listing_client.fetch.return_value = ok_result(products=[], total=0, total_pages=0)

    response = client.get("/products/", {"q": "nothing", "categoryId": str(category.pk), "page": "3"})

    html = response.content.decode()
    assert "No products found" in html
    assert response.context["reset_url"] == "/products/"
    assert 'href="/products/"' in html


def test_failed_fetch_renders_error_state(client, listing_client):
    listing_client.fetch.return_value = ListingResult.failed(ListingOutcome.NETWORK_ERROR, "refused")

    response = client.get("/products/")

    assert response.status_code == 200
    assert "could not be loaded" in response.content.decode()
    assert response.context["state"].products == []


def test_detail_page(client, listing_client):
    listing_client.fetch_product.return_value = ok_result(products=PRODUCTS[1:], total=1)

    response = client.get(reverse("storefront:product-detail", args=["yoga-mat"]))

    assert response.status_code == 200
    assert "Yoga Mat" in response.content.decode()
    listing_client.fetch_product.assert_called_once_with("yoga-mat")


def test_detail_page_unknown_product(client, listing_client):
    listing_client.fetch_product.return_value = ListingResult(outcome=ListingOutcome.EMPTY)

    response = client.get(reverse("storefront:product-detail", args=["missing"]))

    assert response.status_code == 404


def test_listing_client_defaults_to_request_host(rf, settings):
    from apps.storefront.views import get_listing_client

    settings.STOREFRONT = {**settings.STOREFRONT, "API_URL": ""}
    client = get_listing_client(rf.get("/products/"))
    assert client.url == "http://testserver/api/products/"

    settings.STOREFRONT = {**settings.STOREFRONT, "API_URL": "https://api.shop.test"}
    client = get_listing_client(rf.get("/products/"))
    assert client.url == "https://api.shop.test/api/products/"


def test_page_past_the_end_offers_first_page(client, listing_client):
    listing_client.fetch.return_value = ListingResult(
        outcome=ListingOutcome.OK, products=[], total=30, page=9, per_page=12, total_pages=3,
    )

    response = client.get("/products/", {"page": "9"})

    html = response.content.decode()
    assert "No products found" not in html
    assert "past the last page" in html
    assert response.context["first_page_url"] == "/products/"
    assert response.context["previous_url"] == "/products/?page=8"
    assert len(response.context["page_links"]) == 3


def test_empty_state_without_filters_still_links_back(client, listing_client):
    listing_client.fetch.return_value = ok_result(products=[], total=0, total_pages=0)

    html = client.get("/products/").content.decode()

    assert "Back to all products" in html
    assert 'href="/products/"' in html


class DjangoClientSession:
    """Routes listing client requests into the Django test client."""

    def __init__(self, client):
        self.client = client
        self.requests = 0

    def get(self, url, params=None, timeout=None):
        self.requests += 1
        return self.client.get(urlsplit(url).path, params or {})


@pytest.fixture
def anon_rate_of_two():
    rates = {"anon": "2/hour", "orders": "10/hour"}
    with mock.patch.object(AnonRateThrottle, "THROTTLE_RATES", rates):
        yield


def test_listing_endpoint_reads_are_not_throttled(client, product, anon_rate_of_two):
    listing = ProductListingClient("http://testserver", session=DjangoClientSession(client))

    outcomes = [listing.fetch({"page": "1"}).outcome for _ in range(5)]

    assert outcomes == [ListingOutcome.OK] * 5
    # other anonymous endpoints keep the default throttle
    statuses = [client.get(reverse("api:category-list")).status_code for _ in range(3)]
    assert statuses == [200, 200, 429]


def test_listing_page_renders_from_the_live_endpoint(client, product, make_product, anon_rate_of_two):
    make_product("Soccer Ball", "35.00")
    session = DjangoClientSession(client)
    live = ProductListingClient("http://testserver", session=session)

    with mock.patch("apps.storefront.views.get_listing_client", return_value=live):
        pages = [client.get("/products/") for _ in range(4)]

    assert session.requests == 4
    for response in pages:
        assert response.context["state"].outcome == ListingOutcome.OK
        html = response.content.decode()
        assert "Yoga Mat" in html
        assert "Soccer Ball" in html
