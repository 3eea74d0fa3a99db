"""
Catalog Browsing Walkthrough

Drives the listing page controller against a running server and prints, for
each transition, the request sent, the resulting page URL and the outcome.

Run: python scripts/browse_catalog.py [base_url]
     (default base_url: $STOREFRONT_API_URL or http://localhost:8000)
"""
import os
import sys
from datetime import datetime

# Setup Django
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

import django
django.setup()

from apps.storefront.client import ProductListingClient
from apps.storefront.controller import ListingController


def print_header(text):
    print("\n" + "=" * 80)
    print(f"  {text}")
    print("=" * 80)


def print_state(controller, requested):
    state = controller.state
    print(f"    request : {requested}")
    print(f"    url     : {controller.location}")
    print(f"    outcome : {state.outcome.value} (loading={state.loading})")
    if state.has_error:
        print(f"    error   : {state.error_message}")
        return
    print(f"    results : {state.total} products, page {state.page}/{state.total_pages}")
    for product in state.products[:3]:
        print(f"      - {product.get('name')} | {product.get('price')} | sold {product.get('soldCount', 0)}")


class RecordingFetcher:
    """Wraps the client so the walkthrough can show what was requested."""

    def __init__(self, client):
        self.client = client
        self.last_params = None

    def __call__(self, params):
        self.last_params = params
        return self.client.fetch(params)


def run_step(controller, fetcher, title, action):
    print(f"\n  > {title}")
    fetcher.last_params = None
    action()
    print_state(controller, fetcher.last_params or "(no fetch)")


def main():
    base_url = sys.argv[1] if len(sys.argv) > 1 else (os.getenv('STOREFRONT_API_URL') or 'http://localhost:8000')

    print_header("STOREFRONT LISTING WALKTHROUGH")
    print(f"\n  Timestamp: {datetime.now().isoformat()}")
    print(f"  Endpoint : {base_url.rstrip('/')}/api/products/")

    fetcher = RecordingFetcher(ProductListingClient(base_url))
    controller = ListingController(fetcher, base_query={'ref': 'walkthrough'})

    run_step(controller, fetcher, "Open the listing page", controller.refresh)
    run_step(controller, fetcher, "Search for 'mat'", lambda: controller.submit_search("mat"))
    run_step(controller, fetcher, "Sort by best selling", lambda: controller.change_sort("popular"))
    run_step(controller, fetcher, "Filter to category 1", lambda: controller.change_category(1))
    run_step(controller, fetcher, "Go to page 2", lambda: controller.change_page(2))
    run_step(controller, fetcher, "Switch to list view", controller.toggle_view)
    run_step(controller, fetcher, "Sort by price, low to high", lambda: controller.change_sort("price_low"))
    run_step(controller, fetcher, "Reset filters", controller.reset_filters)

    print_header("NAVIGATION HISTORY")
    for location in controller.history + [controller.location]:
        print(f"    {location}")
    print()


if __name__ == "__main__":
    main()
