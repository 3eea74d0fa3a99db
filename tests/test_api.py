from unittest import mock

import pytest
from django.urls import reverse

from apps.shop.checkout import transition_order
from apps.shop.models import Order, Product

pytestmark = pytest.mark.django_db

LIST_URL = reverse("api:product-list")


@pytest.fixture
def catalog(make_product, other_category):
    return {
        "mat": make_product("Yoga Mat", price="19.99", description="Non-slip", images=["/img/mat.jpg"]),
        "ball": make_product("Soccer Ball", price="35.00"),
        "pan": make_product("Frying Pan", price="42.00", category=other_category),
    }


class TestProductListing:

    def test_default_listing(self, api_client, catalog):
        response = api_client.get(LIST_URL)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [p["name"] for p in body["data"]] == ["Frying Pan", "Soccer Ball", "Yoga Mat"]
        assert body["pagination"] == {"total": 3, "page": 1, "perPage": 10, "totalPages": 1}
        assert body["meta"] == {
            "query": "",
            "categoryId": None,
            "sortBy": "id",
            "sortOrder": "desc",
            "withSoldCount": False,
        }
        assert "soldCount" not in body["data"][0]

    def test_product_shape(self, api_client, catalog):
        body = api_client.get(LIST_URL, {"q": "mat"}).json()

        product = body["data"][0]
        assert product["slug"] == "yoga-mat"
        assert product["price"] == "19.99"
        assert product["categoryId"] == catalog["mat"].category_id
        assert product["images"] == ["/img/mat.jpg"]
        assert set(product) >= {"id", "description", "stock", "height", "length", "weight", "width"}

    def test_search_sort_and_paginate(self, api_client, catalog):
        body = api_client.get(LIST_URL, {"sortBy": "price", "sortOrder": "asc", "perPage": 2, "page": 2}).json()

        assert [p["name"] for p in body["data"]] == ["Frying Pan"]
        assert body["pagination"]["totalPages"] == 2
        assert body["meta"]["sortBy"] == "price"
        assert body["meta"]["sortOrder"] == "asc"

    def test_sort_option_names(self, api_client, catalog):
        body = api_client.get(LIST_URL, {"sortBy": "price_high"}).json()
        assert [p["name"] for p in body["data"]] == ["Frying Pan", "Soccer Ball", "Yoga Mat"]

    def test_category_filter_and_non_numeric_category(self, api_client, catalog, other_category):
        body = api_client.get(LIST_URL, {"categoryId": other_category.pk}).json()
        assert [p["name"] for p in body["data"]] == ["Frying Pan"]
        assert body["meta"]["categoryId"] == other_category.pk

        body = api_client.get(LIST_URL, {"categoryId": "abc"}).json()
        assert body["pagination"]["total"] == 3

    def test_with_sold_count(self, api_client, catalog, order_for):
        order = order_for({catalog["ball"]: 3})
        transition_order(order, Order.STATUS_SHIPPED)

        body = api_client.get(LIST_URL, {"withSoldCount": "true", "sortBy": "popular"}).json()

        assert body["data"][0]["name"] == "Soccer Ball"
        assert body["data"][0]["soldCount"] == 3
        assert body["data"][1]["soldCount"] == 0
        assert body["meta"]["withSoldCount"] is True

    def test_no_matches_is_a_successful_empty_page(self, api_client, catalog):
        body = api_client.get(LIST_URL, {"q": "nothing-like-this"}).json()
        assert body["success"] is True
        assert body["data"] == []
        assert body["pagination"]["total"] == 0
        assert body["pagination"]["totalPages"] == 0

    def test_lookup_by_slug(self, api_client, catalog):
        response = api_client.get(LIST_URL, {"slug": "soccer-ball"})
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Soccer Ball"

        response = api_client.get(LIST_URL, {"slug": "missing"})
        assert response.status_code == 404
        assert response.json()["success"] is False

    @pytest.mark.parametrize("params", [{"page": "0"}, {"perPage": "500"}, {"page": "abc"}])
    def test_invalid_parameters(self, api_client, catalog, params):
        response = api_client.get(LIST_URL, params)
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["details"]

    def test_unexpected_failure_returns_500(self, api_client, catalog):
        with mock.patch("api.views.list_products", side_effect=RuntimeError("db went away")):
            response = api_client.get(LIST_URL)

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "message": "Internal Server Error",
            "code": "SERVER_ERROR",
            "details": {},
            "status_code": 500,
        }


class TestCatalogManagement:

    def test_create_product(self, api_client, category):
        response = api_client.post(
            LIST_URL,
            {"name": "Tennis Racket", "price": "120.50", "stock": 4, "categoryId": category.pk, "images": ["/img/r.jpg"]},
            format="json",
        )
        assert response.status_code == 201
        assert response.json()["data"]["slug"] == "tennis-racket"

    def test_create_product_in_missing_category(self, api_client):
        response = api_client.post(LIST_URL, {"name": "Thing", "price": "1.00", "categoryId": 9999}, format="json")
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_product_detail_update_delete(self, api_client, product, category):
        url = reverse("api:product-detail", args=[product.pk])

        assert api_client.get(url).json()["data"]["soldCount"] == 0

        response = api_client.put(url, {"name": "Yoga Mat Pro", "price": "29.00", "categoryId": category.pk}, format="json")
        assert response.json()["data"]["slug"] == "yoga-mat-pro"

        assert api_client.delete(url).status_code == 200
        assert not Product.objects.filter(pk=product.pk).exists()
        assert api_client.get(url).status_code == 404

    def test_delete_ordered_product_conflicts(self, api_client, product, order_for):
        order_for({product: 1})
        response = api_client.delete(reverse("api:product-detail", args=[product.pk]))
        assert response.status_code == 409
        assert response.json()["code"] == "REFERENTIAL_INTEGRITY"

    def test_categories(self, api_client, category, product):
        response = api_client.post(reverse("api:category-list"), {"name": "Outdoor"}, format="json")
        assert response.status_code == 201
        assert response.json()["data"]["slug"] == "outdoor"

        response = api_client.post(reverse("api:category-list"), {"name": "Outdoor"}, format="json")
        assert response.status_code == 409

        body = api_client.get(reverse("api:category-list"), {"q": "out"}).json()
        assert [c["name"] for c in body["data"]] == ["Outdoor"]

        response = api_client.delete(reverse("api:category-detail", args=["sports"]))
        assert response.status_code == 409
        assert "still referenced by products" in response.json()["message"]

        response = api_client.delete(reverse("api:category-detail", args=["outdoor"]))
        assert response.status_code == 200


class TestOrders:

    @pytest.fixture
    def payload(self, user, product):
        return {
            "userId": user.pk,
            "items": [{"productId": product.pk, "quantity": 2}],
            "recipientName": "Budi Santoso",
            "phone": "081234567890",
            "email": "budi@example.com",
            "address": "Jl. Merdeka No. 10, Bandung",
            "postalCode": "40115",
            "shippingCost": "15000.00",
            "courierName": "jne",
            "courierService": "reg",
        }

    def test_place_order(self, api_client, payload, product):
        response = api_client.post(reverse("api:order-create"), payload, format="json")

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["status"] == "pending"
        assert data["isPending"] is True
        assert data["itemCount"] == 2
        assert data["items"][0]["totalPrice"] == "39.98"
        assert data["total"] == "15039.98"

        product.refresh_from_db()
        assert product.stock == 3

    def test_insufficient_stock(self, api_client, payload):
        payload["items"][0]["quantity"] = 50
        response = api_client.post(reverse("api:order-create"), payload, format="json")
        assert response.status_code == 400
        assert response.json()["code"] == "INSUFFICIENT_STOCK"
        assert Order.objects.count() == 0

    def test_empty_items_and_unknown_user(self, api_client, payload):
        response = api_client.post(reverse("api:order-create"), {**payload, "items": []}, format="json")
        assert response.status_code == 400

        response = api_client.post(reverse("api:order-create"), {**payload, "userId": 9999}, format="json")
        assert response.status_code == 404

    def test_status_flow(self, api_client, payload):
        order_id = api_client.post(reverse("api:order-create"), payload, format="json").json()["data"]["id"]
        status_url = reverse("api:order-status", args=[order_id])

        response = api_client.patch(status_url, {"status": "paid"}, format="json")
        assert response.status_code == 200
        assert response.json()["data"]["isPaid"] is True

        response = api_client.patch(status_url, {"status": "pending"}, format="json")
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_STATUS_TRANSITION"

        body = api_client.get(reverse("api:order-detail", args=[order_id])).json()
        assert body["data"]["status"] == "paid"

    def test_missing_order(self, api_client):
        response = api_client.get(reverse("api:order-detail", args=["does-not-exist"]))
        assert response.status_code == 404


def test_health(api_client, product):
    body = api_client.get(reverse("api:health")).json()
    assert body["status"] == "healthy"
    assert body["database"] == "healthy"
    assert body["catalog"]["products"] == 1
