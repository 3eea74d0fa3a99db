"""
API Serializers for Request/Response handling
"""
from rest_framework import serializers

from apps.core.utils import parse_int
from apps.shop.listing import DEFAULT_PER_PAGE, MAX_PER_PAGE, SORT_ASC, SORT_DESC
from apps.shop.models import Category, Order, OrderItem, Product


# === Listing ===

class ProductListQuerySerializer(serializers.Serializer):
    """
    Query parameters of the product listing endpoint.
    """
    page = serializers.IntegerField(required=False, default=1, min_value=1, help_text="1-based page number")
    perPage = serializers.IntegerField(
        required=False,
        default=DEFAULT_PER_PAGE,
        min_value=1,
        max_value=MAX_PER_PAGE,
        help_text="Products per page"
    )
    q = serializers.CharField(
        required=False,
        default="",
        allow_blank=True,
        max_length=200,
        help_text="Search text matched against name and description"
    )
    categoryId = serializers.CharField(
        required=False,
        allow_blank=True,
        help_text="Category filter; non-numeric values are ignored"
    )
    sortBy = serializers.CharField(
        required=False,
        default="id",
        allow_blank=True,
        help_text="Sort choice (newest, price_low, price_high, popular, rating) or column (id, name, price, stock, soldCount)"
    )
    sortOrder = serializers.CharField(required=False, default=SORT_DESC, allow_blank=True, help_text="asc or desc")
    withSoldCount = serializers.BooleanField(required=False, default=False, help_text="Include soldCount per product")
    slug = serializers.CharField(required=False, allow_blank=True, help_text="Return the single product with this slug")

    def validate_categoryId(self, value):
        return parse_int(value)

    def validate_sortOrder(self, value):
        return SORT_ASC if (value or "").lower() == SORT_ASC else SORT_DESC


class ProductSerializer(serializers.ModelSerializer):
    """
    Product record as returned by the listing endpoint.
    """
    categoryId = serializers.IntegerField(source='category_id', read_only=True)
    images = serializers.SerializerMethodField()
    soldCount = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'slug', 'description', 'price', 'stock', 'categoryId',
            'height', 'length', 'weight', 'width', 'images', 'soldCount',
        ]

    def get_images(self, obj):
        return [image.image for image in obj.images.all()]

    def get_soldCount(self, obj):
        return int(getattr(obj, 'sold_count', 0) or 0)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if not self.context.get('with_sold_count'):
            data.pop('soldCount', None)
        return data


class PaginationSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    page = serializers.IntegerField()
    perPage = serializers.IntegerField()
    totalPages = serializers.IntegerField()


class ProductListResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    data = ProductSerializer(many=True)
    pagination = PaginationSerializer()
    meta = serializers.DictField()


class ProductWriteSerializer(serializers.Serializer):
    """
    Request body for creating or updating a product.
    """
    name = serializers.CharField(max_length=100)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    stock = serializers.IntegerField(required=False, default=0, min_value=0)
    categoryId = serializers.IntegerField(min_value=1)
    height = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    length = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    weight = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    width = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    images = serializers.ListField(
        child=serializers.CharField(max_length=255),
        required=False,
        default=list,
        help_text="Image paths to attach (uploading happens elsewhere)"
    )


# === Categories ===

class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ['id', 'name', 'slug']


class CategoryCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)


class CategoryListQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(required=False, default=1, min_value=1)
    perPage = serializers.IntegerField(required=False, default=10, min_value=1, max_value=MAX_PER_PAGE)
    q = serializers.CharField(required=False, default="", allow_blank=True, max_length=100)


# === Orders ===

class OrderLineSerializer(serializers.Serializer):
    productId = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1, max_value=100)


class OrderCreateSerializer(serializers.Serializer):
    """
    Checkout request. Shipping cost and courier come from the shipping-rate
    provider and are taken as given.
    """
    userId = serializers.IntegerField(min_value=1, help_text="Customer placing the order")
    items = OrderLineSerializer(many=True)
    recipientName = serializers.CharField(min_length=2, max_length=100)
    phone = serializers.CharField(max_length=20)
    email = serializers.EmailField(max_length=100)
    address = serializers.CharField(min_length=10, max_length=255)
    postalCode = serializers.CharField(max_length=10)
    shippingCost = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    courierName = serializers.CharField(required=False, allow_blank=True, max_length=50)
    courierService = serializers.CharField(required=False, allow_blank=True, max_length=50)
    courierInsurance = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False, default=0)
    deliveryType = serializers.CharField(required=False, allow_blank=True, max_length=20, default="now")
    orderNote = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)

    def validate_items(self, items):
        if not items:
            raise serializers.ValidationError("At least one item is required.")
        return items


class OrderItemSerializer(serializers.ModelSerializer):
    productId = serializers.IntegerField(source='product_id', read_only=True)
    totalPrice = serializers.DecimalField(source='line_total', max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            'id', 'productId', 'name', 'description', 'category', 'price', 'quantity',
            'height', 'length', 'weight', 'width', 'totalPrice',
        ]


class OrderSerializer(serializers.ModelSerializer):
    """
    Order details with item snapshots and status helpers.
    """
    orderNumber = serializers.CharField(source='order_number')
    userId = serializers.IntegerField(source='user_id')
    shippingCost = serializers.DecimalField(source='shipping_cost', max_digits=10, decimal_places=2)
    recipientName = serializers.CharField(source='recipient_name')
    postalCode = serializers.CharField(source='postal_code')
    courierName = serializers.CharField(source='courier_name')
    courierService = serializers.CharField(source='courier_service')
    courierInsurance = serializers.DecimalField(source='courier_insurance', max_digits=10, decimal_places=2)
    deliveryType = serializers.CharField(source='delivery_type')
    orderNote = serializers.CharField(source='order_note')
    createdAt = serializers.DateTimeField(source='created_at')
    items = OrderItemSerializer(many=True, read_only=True)
    itemCount = serializers.IntegerField(source='item_count', read_only=True)
    isPending = serializers.SerializerMethodField()
    isPaid = serializers.SerializerMethodField()
    isCompleted = serializers.SerializerMethodField()
    isCancelled = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'orderNumber', 'userId', 'status', 'subtotal', 'shippingCost', 'total',
            'recipientName', 'phone', 'email', 'address', 'postalCode',
            'courierName', 'courierService', 'courierInsurance', 'deliveryType', 'orderNote',
            'metadata', 'createdAt', 'items', 'itemCount',
            'isPending', 'isPaid', 'isCompleted', 'isCancelled',
        ]

    def get_isPending(self, obj):
        return obj.status == Order.STATUS_PENDING

    def get_isPaid(self, obj):
        return obj.status in (Order.STATUS_PAID, Order.STATUS_PROCESSING, Order.STATUS_SHIPPED, Order.STATUS_DELIVERED)

    def get_isCompleted(self, obj):
        return obj.status == Order.STATUS_DELIVERED

    def get_isCancelled(self, obj):
        return obj.status in (Order.STATUS_CANCELLED, Order.STATUS_FAILED)


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[choice for choice, _ in Order.STATUS_CHOICES])


# === System ===

class HealthCheckSerializer(serializers.Serializer):
    """
    Response serializer for health check.
    """
    status = serializers.CharField()
    version = serializers.CharField()
    database = serializers.CharField()
    catalog = serializers.DictField()
    timestamp = serializers.DateTimeField()


class ErrorResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    message = serializers.CharField()
    code = serializers.CharField(required=False)
    details = serializers.DictField(required=False)
    status_code = serializers.IntegerField(required=False)
