"""
Shop Models - Catalog & Orders
Tables: users, categories, products, product_images, orders, order_items

Every foreign key is PROTECT: deleting a referenced row is rejected while
dependents exist (no cascades), and the order history is append-only.
"""
from django.contrib.auth.hashers import check_password, make_password
from django.db import models
from django.db.models import Q
from ulid import ULID

from apps.core.exceptions import ImmutableRecordError
from apps.core.models import TimestampedModel


def new_order_id() -> str:
    return str(ULID())


class User(TimestampedModel):
    """
    Store account. Customers place orders, admins manage the catalog.
    """
    ROLE_ADMIN = 'admin'
    ROLE_CUSTOMER = 'customer'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Admin'),
        (ROLE_CUSTOMER, 'Customer'),
    ]

    name = models.CharField(max_length=100)
    email = models.EmailField(max_length=100)
    password = models.CharField(max_length=255, help_text="Password hash, never the raw password")
    role = models.CharField(max_length=8, choices=ROLE_CHOICES, default=ROLE_CUSTOMER, null=True)
    image = models.CharField(max_length=255, blank=True, null=True)

    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        constraints = [
            models.UniqueConstraint(fields=['email'], name='users_email_unique'),
            models.CheckConstraint(
                condition=Q(role__in=['admin', 'customer']),
                name='users_role_valid',
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.email})"

    def set_password(self, raw_password: str):
        self.password = make_password(raw_password)

    def check_password(self, raw_password: str) -> bool:
        return check_password(raw_password, self.password)

    @property
    def is_admin(self) -> bool:
        return self.role == self.ROLE_ADMIN


class Category(models.Model):
    """
    Product category. Name and slug are both unique.
    """
    name = models.CharField(max_length=100)
    slug = models.CharField(max_length=100)

    class Meta:
        db_table = 'categories'
        verbose_name = 'Category'
        verbose_name_plural = 'Categories'
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(fields=['name'], name='categories_name_unique'),
            models.UniqueConstraint(fields=['slug'], name='categories_slug_unique'),
        ]

    def __str__(self):
        return self.name


class Product(models.Model):
    """
    Product in the catalog. Dimensions are optional and copied onto order items.
    """
    name = models.CharField(max_length=100)
    slug = models.CharField(max_length=100)
    description = models.TextField(blank=True, null=True)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    stock = models.IntegerField(default=0, null=True)
    category = models.ForeignKey(
        Category,
        on_delete=models.PROTECT,
        related_name='products',
    )

    height = models.IntegerField(blank=True, null=True)
    length = models.IntegerField(blank=True, null=True)
    weight = models.IntegerField(blank=True, null=True)
    width = models.IntegerField(blank=True, null=True)

    class Meta:
        db_table = 'products'
        verbose_name = 'Product'
        verbose_name_plural = 'Products'
        ordering = ['-id']
        constraints = [
            models.UniqueConstraint(fields=['slug'], name='products_slug_unique'),
        ]

    def __str__(self):
        return f"{self.name} (${self.price})"


class ProductImage(models.Model):
    """
    Image path attached to a product. Storage/CDN delivery happens elsewhere.
    """
    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name='images',
    )
    image = models.CharField(max_length=255)

    class Meta:
        db_table = 'product_images'
        verbose_name = 'Product Image'
        verbose_name_plural = 'Product Images'
        ordering = ['id']

    def __str__(self):
        return self.image


class Order(TimestampedModel):
    """
    Customer order. Created once at checkout; afterwards only `status` changes.
    """
    STATUS_PENDING = 'pending'
    STATUS_PAID = 'paid'
    STATUS_PROCESSING = 'processing'
    STATUS_SHIPPED = 'shipped'
    STATUS_DELIVERED = 'delivered'
    STATUS_CANCELLED = 'cancelled'
    STATUS_FAILED = 'failed'

    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_PAID, 'Paid'),
        (STATUS_PROCESSING, 'Processing'),
        (STATUS_SHIPPED, 'Shipped'),
        (STATUS_DELIVERED, 'Delivered'),
        (STATUS_CANCELLED, 'Cancelled'),
        (STATUS_FAILED, 'Failed'),
    ]

    ALLOWED_TRANSITIONS = {
        STATUS_PENDING: {STATUS_PAID, STATUS_PROCESSING, STATUS_SHIPPED, STATUS_CANCELLED, STATUS_FAILED},
        STATUS_PAID: {STATUS_PROCESSING, STATUS_SHIPPED, STATUS_CANCELLED},
        STATUS_PROCESSING: {STATUS_SHIPPED, STATUS_CANCELLED},
        STATUS_SHIPPED: {STATUS_DELIVERED},
        STATUS_DELIVERED: set(),
        STATUS_CANCELLED: set(),
        STATUS_FAILED: set(),
    }

    # Order statuses whose items count towards a product's sold count
    SOLD_STATUSES = (STATUS_SHIPPED, STATUS_DELIVERED)

    id = models.CharField(max_length=26, primary_key=True, default=new_order_id, editable=False)
    order_number = models.CharField(max_length=32)
    user = models.ForeignKey(User, on_delete=models.PROTECT, related_name='orders')

    subtotal = models.DecimalField(max_digits=10, decimal_places=2)
    shipping_cost = models.DecimalField(max_digits=10, decimal_places=2)
    total = models.DecimalField(max_digits=10, decimal_places=2)

    # Recipient
    recipient_name = models.CharField(max_length=100)
    phone = models.CharField(max_length=20)
    email = models.CharField(max_length=100)
    address = models.CharField(max_length=255)
    postal_code = models.CharField(max_length=10)

    # Shipper / origin
    shipper_name = models.CharField(max_length=100)
    shipper_phone = models.CharField(max_length=20)
    shipper_email = models.CharField(max_length=100)
    origin_address = models.CharField(max_length=255)
    origin_note = models.CharField(max_length=255, blank=True, null=True)
    origin_postal_code = models.CharField(max_length=10)

    # Courier
    courier_name = models.CharField(max_length=50, blank=True, null=True)
    courier_service = models.CharField(max_length=50, blank=True, null=True)
    courier_insurance = models.DecimalField(max_digits=10, decimal_places=2, default='0.00', null=True)
    delivery_type = models.CharField(max_length=20, blank=True, null=True)

    order_note = models.CharField(max_length=255, blank=True, null=True)
    metadata = models.JSONField(blank=True, null=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING, null=True)

    class Meta:
        db_table = 'orders'
        verbose_name = 'Order'
        verbose_name_plural = 'Orders'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['order_number'], name='orders_order_number_unique'),
        ]

    def __str__(self):
        return f"Order {self.order_number} - {self.status}"

    def save(self, *args, **kwargs):
        update_fields = kwargs.get('update_fields')
        if not self._state.adding and (update_fields is None or set(update_fields) - {'status'}):
            raise ImmutableRecordError("Placed orders can only change status")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRecordError("Orders are never deleted")

    def can_transition_to(self, status: str) -> bool:
        return status in self.ALLOWED_TRANSITIONS.get(self.status, set())

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items.all())


class OrderItem(models.Model):
    """
    Line of an order. Holds a snapshot of the product taken at checkout, so
    later product edits never change historical pricing.
    """
    order = models.ForeignKey(Order, on_delete=models.PROTECT, related_name='items')
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='order_items')

    # Snapshot fields
    name = models.CharField(max_length=100)
    description = models.CharField(max_length=255, blank=True, null=True)
    category = models.CharField(max_length=100, blank=True, null=True)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.IntegerField()

    height = models.IntegerField(blank=True, null=True)
    length = models.IntegerField(blank=True, null=True)
    weight = models.IntegerField(blank=True, null=True)
    width = models.IntegerField(blank=True, null=True)

    class Meta:
        db_table = 'order_items'
        verbose_name = 'Order Item'
        verbose_name_plural = 'Order Items'
        ordering = ['id']
        constraints = [
            models.CheckConstraint(condition=Q(quantity__gt=0), name='order_items_quantity_positive'),
        ]

    def __str__(self):
        return f"{self.quantity} x {self.name}"

    @classmethod
    def snapshot(cls, order: Order, product: Product, quantity: int) -> 'OrderItem':
        """Copy the purchase-relevant product fields into an unsaved item."""
        return cls(
            order=order,
            product=product,
            name=product.name[:100],
            description=(product.description or '')[:255] or None,
            category=product.category.name if product.category_id else None,
            price=product.price,
            quantity=quantity,
            height=product.height,
            length=product.length,
            weight=product.weight,
            width=product.width,
        )

    @property
    def line_total(self):
        return self.price * self.quantity

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRecordError("Order items are immutable once placed")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRecordError("Order items are never deleted")
