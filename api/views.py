"""
API Views for the Storefront

This module provides REST API endpoints for:
- Products: listing (search/filter/sort/paginate), detail, catalog management
- Categories: listing, creation, deletion
- Orders: checkout, detail, status transitions
- Health Check: System health and status
"""
import logging
from datetime import datetime, timezone

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.throttling import AnonRateThrottle, ScopedRateThrottle
from drf_spectacular.utils import extend_schema, OpenApiExample

from django.db import connection

from apps.core.exceptions import NotFoundError, StorefrontException
from apps.shop import catalog
from apps.shop.checkout import Courier, CartLine, Recipient, get_order, place_order, transition_order
from apps.shop.listing import ListingQuery, get_product_by_slug, list_products
from apps.shop.models import Category, Order, Product, User
from .exceptions import error_payload
from .serializers import (
    CategoryCreateSerializer,
    CategoryListQuerySerializer,
    CategorySerializer,
    ErrorResponseSerializer,
    HealthCheckSerializer,
    OrderCreateSerializer,
    OrderSerializer,
    OrderStatusSerializer,
    ProductListQuerySerializer,
    ProductListResponseSerializer,
    ProductSerializer,
    ProductWriteSerializer,
)

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


def _get_or_404(model, resource: str, **lookup):
    obj = model.objects.filter(**lookup).first()
    if obj is None:
        raise NotFoundError(resource, next(iter(lookup.values())))
    return obj


class ProductListView(APIView):
    """
    Product listing endpoint.

    Returns a filtered, sorted, paginated page of products. Failures are
    reported as `success: false`; nothing is raised to the caller.
    """
    permission_classes = [AllowAny]  # Adjust based on auth requirements

    def get_throttles(self):
        # The listing page fetches this endpoint from the server, so all
        # shoppers arrive from one address; reads are not throttled.
        if self.request.method == 'GET':
            return []
        return super().get_throttles()

    @extend_schema(
        parameters=[ProductListQuerySerializer],
        responses={200: ProductListResponseSerializer, 400: ErrorResponseSerializer, 500: ErrorResponseSerializer},
        description="List products with search, category filter, sorting and pagination",
        examples=[
            OpenApiExample(
                "Cheapest first",
                value={
                    "success": True,
                    "data": [{"id": 3, "name": "Yoga Mat", "slug": "yoga-mat", "price": "19.99", "images": []}],
                    "pagination": {"total": 1, "page": 1, "perPage": 10, "totalPages": 1},
                    "meta": {"query": "mat", "categoryId": None, "sortBy": "price", "sortOrder": "asc", "withSoldCount": False},
                },
                response_only=True
            ),
        ]
    )
    def get(self, request):
        """
        List products.
        """
        params = ProductListQuerySerializer(data=request.query_params)

        if not params.is_valid():
            return Response(
                error_payload("Invalid request", status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", params.errors),
                status=status.HTTP_400_BAD_REQUEST
            )

        data = params.validated_data
        with_sold_count = data['withSoldCount']
        context = {'with_sold_count': with_sold_count}

        try:
            if data.get('slug'):
                product = get_product_by_slug(data['slug'], with_sold_count=with_sold_count)
                return Response(
                    {"success": True, "data": ProductSerializer(product, context=context).data},
                    status=status.HTTP_200_OK
                )

            query = ListingQuery(
                q=data['q'],
                category_id=data.get('categoryId'),
                sort_by=data['sortBy'],
                sort_order=data['sortOrder'],
                page=data['page'],
                per_page=data['perPage'],
                with_sold_count=with_sold_count,
            )
            page = list_products(query)

            return Response(
                {
                    "success": True,
                    "data": ProductSerializer(page.products, many=True, context=context).data,
                    "pagination": {
                        "total": page.total,
                        "page": page.page,
                        "perPage": page.per_page,
                        "totalPages": page.total_pages,
                    },
                    "meta": {
                        "query": query.q,
                        "categoryId": query.category_id,
                        "sortBy": page.sort.field,
                        "sortOrder": page.sort.order,
                        "withSoldCount": with_sold_count,
                    },
                },
                status=status.HTTP_200_OK
            )

        except StorefrontException as e:
            return Response(error_payload(e.message, e.status_code, e.code), status=e.status_code)
        except Exception as e:
            logger.exception(f"Error fetching products: {e}")
            return Response(
                error_payload("Internal Server Error", status.HTTP_500_INTERNAL_SERVER_ERROR, "SERVER_ERROR"),
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

    @extend_schema(
        request=ProductWriteSerializer,
        responses={201: ProductSerializer, 400: ErrorResponseSerializer, 409: ErrorResponseSerializer},
        description="Create a product (catalog management)"
    )
    def post(self, request):
        serializer = ProductWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        images = data.pop('images', [])
        product = catalog.create_product(data, images)

        return Response(
            {"success": True, "message": "Product created successfully", "data": ProductSerializer(product).data},
            status=status.HTTP_201_CREATED
        )


class ProductDetailView(APIView):
    """
    Read, update or delete a single product by id.
    """
    permission_classes = [AllowAny]

    @extend_schema(responses={200: ProductSerializer, 404: ErrorResponseSerializer})
    def get(self, request, product_id):
        product = _get_or_404(Product, "Product", pk=product_id)
        product = get_product_by_slug(product.slug, with_sold_count=True)
        return Response(
            {"success": True, "data": ProductSerializer(product, context={'with_sold_count': True}).data}
        )

    @extend_schema(
        request=ProductWriteSerializer,
        responses={200: ProductSerializer, 404: ErrorResponseSerializer, 409: ErrorResponseSerializer}
    )
    def put(self, request, product_id):
        product = _get_or_404(Product, "Product", pk=product_id)
        serializer = ProductWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        images = data.pop('images', [])
        product = catalog.update_product(product, data, images)

        return Response(
            {"success": True, "message": "Product updated successfully", "data": ProductSerializer(product).data}
        )

    @extend_schema(responses={200: None, 404: ErrorResponseSerializer, 409: ErrorResponseSerializer})
    def delete(self, request, product_id):
        product = _get_or_404(Product, "Product", pk=product_id)
        catalog.delete_product(product)
        return Response({"success": True, "message": "Product deleted successfully"})


class CategoryListView(APIView):
    """
    List or create categories.
    """
    permission_classes = [AllowAny]

    @extend_schema(parameters=[CategoryListQuerySerializer], responses={200: CategorySerializer(many=True)})
    def get(self, request):
        params = CategoryListQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        data = params.validated_data

        page = catalog.list_categories(q=data['q'], page=data['page'], per_page=data['perPage'])
        return Response({
            "success": True,
            "data": CategorySerializer(page.categories, many=True).data,
            "pagination": {
                "total": page.total,
                "page": page.page,
                "perPage": page.per_page,
                "totalPages": page.total_pages,
            },
        })

    @extend_schema(
        request=CategoryCreateSerializer,
        responses={201: CategorySerializer, 409: ErrorResponseSerializer}
    )
    def post(self, request):
        serializer = CategoryCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        category = catalog.create_category(serializer.validated_data['name'])
        return Response(
            {"success": True, "message": "Category created successfully", "data": CategorySerializer(category).data},
            status=status.HTTP_201_CREATED
        )


class CategoryDetailView(APIView):
    """
    Read or delete a category by slug. Deleting a category that still has
    products is rejected with 409.
    """
    permission_classes = [AllowAny]

    @extend_schema(responses={200: CategorySerializer, 404: ErrorResponseSerializer})
    def get(self, request, slug):
        category = catalog.get_category(slug)
        return Response({"success": True, "data": CategorySerializer(category).data})

    @extend_schema(responses={200: None, 404: ErrorResponseSerializer, 409: ErrorResponseSerializer})
    def delete(self, request, slug):
        category = catalog.get_category(slug)
        catalog.delete_category(category)
        return Response({"success": True, "message": "Category deleted successfully"})


class OrderCreateView(APIView):
    """
    Checkout: place an order atomically (item snapshots + stock decrement).
    """
    permission_classes = [AllowAny]
    throttle_classes = [AnonRateThrottle, ScopedRateThrottle]
    throttle_scope = 'orders'

    @extend_schema(
        request=OrderCreateSerializer,
        responses={201: OrderSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        description="Place an order",
        examples=[
            OpenApiExample(
                "Two items",
                value={
                    "userId": 1,
                    "items": [{"productId": 4, "quantity": 2}, {"productId": 9, "quantity": 1}],
                    "recipientName": "Budi Santoso",
                    "phone": "081234567890",
                    "email": "budi@example.com",
                    "address": "Jl. Merdeka No. 10, Bandung",
                    "postalCode": "40115",
                    "shippingCost": "18000.00",
                    "courierName": "jne",
                    "courierService": "reg",
                },
                request_only=True
            ),
        ]
    )
    def post(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        user = _get_or_404(User, "User", pk=data['userId'])
        logger.info(f"Checkout request - user {user.pk}, {len(data['items'])} lines")

        order = place_order(
            user=user,
            lines=[CartLine(product_id=item['productId'], quantity=item['quantity']) for item in data['items']],
            recipient=Recipient(
                name=data['recipientName'],
                phone=data['phone'],
                email=data['email'],
                address=data['address'],
                postal_code=data['postalCode'],
            ),
            shipping_cost=data['shippingCost'],
            courier=Courier(
                name=data.get('courierName') or None,
                service=data.get('courierService') or None,
                insurance=data.get('courierInsurance') or 0,
                delivery_type=data.get('deliveryType') or None,
            ),
            order_note=data.get('orderNote') or None,
            metadata={"created_from": "api", "user_agent": request.headers.get('user-agent')},
        )

        return Response(
            {"success": True, "message": "Order created successfully", "data": OrderSerializer(get_order(order.pk)).data},
            status=status.HTTP_201_CREATED
        )


class OrderDetailView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(responses={200: OrderSerializer, 404: ErrorResponseSerializer})
    def get(self, request, order_id):
        order = get_order(order_id)
        return Response({"success": True, "data": OrderSerializer(order).data})


class OrderStatusView(APIView):
    """
    Move an order through its lifecycle (pending -> paid -> ... -> delivered).
    """
    permission_classes = [AllowAny]

    @extend_schema(
        request=OrderStatusSerializer,
        responses={200: OrderSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer}
    )
    def patch(self, request, order_id):
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = transition_order(get_order(order_id), serializer.validated_data['status'])
        return Response({"success": True, "message": "Order status updated", "data": OrderSerializer(order).data})


class HealthCheckView(APIView):
    """
    System health check endpoint.

    Returns the status of the API, database connectivity and catalog size.
    """
    permission_classes = [AllowAny]

    @extend_schema(
        responses={200: HealthCheckSerializer},
        description="Check system health status"
    )
    def get(self, request):
        """
        Check system health.
        """
        # Check database connectivity
        db_status = "healthy"
        catalog_status = {}
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
            catalog_status = {
                "categories": Category.objects.count(),
                "products": Product.objects.count(),
                "orders": Order.objects.count(),
            }
        except Exception as e:
            db_status = f"unhealthy: {str(e)}"

        response_data = {
            "status": "healthy" if db_status == "healthy" else "degraded",
            "version": API_VERSION,
            "database": db_status,
            "catalog": catalog_status,
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

        return Response(response_data, status=status.HTTP_200_OK)
