"""
Synthetic Data Generator for the Storefront

This script seeds users, categories, products (with images) and orders.
Orders go through the checkout service, so stock, item snapshots and sold
counts stay consistent with what the API would produce.

Run: python scripts/generate_data.py
"""
import os
import sys
import random
from decimal import Decimal

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Setup Django
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

import django
django.setup()

from faker import Faker
from apps.core.exceptions import InsufficientStockError
from apps.core.utils import generate_unique_slug
from apps.shop.checkout import CartLine, Courier, Recipient, place_order, transition_order
from apps.shop.models import Category, Order, OrderItem, Product, ProductImage, User

fake = Faker()

CATEGORY_NAMES = ['Electronics', 'Sports', 'Clothing', 'Home', 'Books', 'Toys']

PRODUCT_TEMPLATES = [
    ('Wireless Headphones', 'Electronics', 49.99, 299.99),
    ('Mechanical Keyboard', 'Electronics', 79.99, 199.99),
    ('Bluetooth Speaker', 'Electronics', 29.99, 149.99),
    ('Power Bank', 'Electronics', 19.99, 79.99),
    ('Running Shoes', 'Sports', 49.99, 199.99),
    ('Yoga Mat', 'Sports', 19.99, 79.99),
    ('Dumbbell Set', 'Sports', 29.99, 299.99),
    ('Cotton T-Shirt', 'Clothing', 14.99, 49.99),
    ('Denim Jeans', 'Clothing', 39.99, 129.99),
    ('Winter Jacket', 'Clothing', 79.99, 299.99),
    ('Coffee Maker', 'Home', 29.99, 199.99),
    ('Air Fryer', 'Home', 49.99, 199.99),
    ('Programming Book', 'Books', 29.99, 79.99),
    ('Novel Bestseller', 'Books', 9.99, 29.99),
    ('Board Game', 'Toys', 24.99, 59.99),
]

COURIERS = [('jne', 'reg'), ('jne', 'yes'), ('sicepat', 'reg'), ('gosend', 'instant')]

# Status path walked after checkout, weighted towards completed orders
STATUS_PATHS = [
    ([], 10),
    (['paid'], 10),
    (['paid', 'processing'], 10),
    (['paid', 'shipped'], 20),
    (['paid', 'shipped', 'delivered'], 40),
    (['cancelled'], 7),
    (['failed'], 3),
]


def generate_users(count=50):
    """Generate dummy users (the first one is an admin)."""
    print(f"Generating {count} users...")
    users = []

    for index in range(count):
        user = User(
            name=fake.name(),
            email=fake.unique.email(),
            role=User.ROLE_ADMIN if index == 0 else User.ROLE_CUSTOMER,
        )
        user.set_password('password123')
        user.save()
        users.append(user)

    print(f"Created {len(users)} users")
    return users


def generate_categories():
    """Generate the fixed category set."""
    print(f"Generating {len(CATEGORY_NAMES)} categories...")
    categories = {}

    for name in CATEGORY_NAMES:
        categories[name] = Category.objects.create(name=name, slug=generate_unique_slug(Category, name))

    print(f"Created {len(categories)} categories")
    return categories


def generate_products(categories, count=60):
    """Generate dummy products with one to three images each."""
    print(f"Generating {count} products...")
    products = []
    variations = ['Pro', 'Lite', 'Plus', 'Max', 'Mini', 'Ultra']

    while len(products) < count:
        name_base, category_name, min_price, max_price = random.choice(PRODUCT_TEMPLATES)
        name = f"{name_base} {random.choice(variations)} {fake.unique.random_int(100, 999)}"

        product = Product.objects.create(
            name=name,
            slug=generate_unique_slug(Product, name),
            description=fake.paragraph(nb_sentences=3),
            price=Decimal(str(round(random.uniform(min_price, max_price), 2))),
            stock=random.randint(0, 200),
            category=categories[category_name],
            height=random.randint(1, 40),
            length=random.randint(5, 60),
            weight=random.randint(100, 5000),
            width=random.randint(5, 60),
        )
        for n in range(random.randint(1, 3)):
            ProductImage.objects.create(product=product, image=f"/images/products/{product.slug}-{n + 1}.jpg")
        products.append(product)

    print(f"Created {len(products)} products")
    return products


def generate_orders(users, products, count=150):
    """Place orders through checkout and walk them through their statuses."""
    print(f"Generating {count} orders...")
    orders = []
    skipped = 0
    customers = [user for user in users if not user.is_admin]
    paths, weights = zip(*STATUS_PATHS)

    for _ in range(count):
        user = random.choice(customers)
        picked = random.sample(products, k=random.randint(1, 3))
        courier_name, courier_service = random.choice(COURIERS)

        try:
            order = place_order(
                user=user,
                lines=[CartLine(product_id=p.pk, quantity=random.randint(1, 3)) for p in picked],
                recipient=Recipient(
                    name=user.name,
                    phone=fake.numerify('08##########'),
                    email=user.email,
                    address=fake.street_address() + ', ' + fake.city(),
                    postal_code=fake.postcode()[:10],
                ),
                shipping_cost=Decimal(random.choice(['9000.00', '15000.00', '22000.00'])),
                courier=Courier(name=courier_name, service=courier_service, delivery_type='now'),
                metadata={'created_from': 'seed'},
            )
        except InsufficientStockError:
            skipped += 1
            continue

        for status in random.choices(paths, weights=weights)[0]:
            transition_order(order, status)
        orders.append(order)

    print(f"Created {len(orders)} orders ({skipped} skipped for stock)")
    return orders


def clear_all_data():
    """Clear all existing data, dependents first."""
    print("Clearing existing data...")

    OrderItem.objects.all().delete()
    Order.objects.all().delete()
    ProductImage.objects.all().delete()
    Product.objects.all().delete()
    Category.objects.all().delete()
    User.objects.all().delete()

    print("All data cleared")


def main():
    """Main function to generate all data."""
    print("\n" + "="*60)
    print("Storefront Synthetic Data Generator")
    print("="*60 + "\n")

    # Clear existing data
    clear_all_data()

    # Generate data in order of dependencies
    users = generate_users(50)
    categories = generate_categories()
    products = generate_products(categories, 60)
    orders = generate_orders(users, products, 150)

    sold = Order.objects.filter(status__in=Order.SOLD_STATUSES).count()

    print("\n" + "="*60)
    print("Data Generation Complete!")
    print("="*60)
    print(f"\nSummary:")
    print(f"  - Users: {len(users)}")
    print(f"  - Categories: {len(categories)}")
    print(f"  - Products: {len(products)}")
    print(f"  - Product Images: {ProductImage.objects.count()}")
    print(f"  - Orders: {len(orders)} ({sold} shipped or delivered)")
    print()


if __name__ == '__main__':
    main()
