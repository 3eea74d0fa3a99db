"""
Server-rendered storefront pages
"""
import logging

from django.conf import settings
from django.http import Http404
from django.views.generic import TemplateView

from apps.shop.models import Category
from .client import ProductListingClient
from .controller import ListingController
from .state import ListingOutcome, ViewMode

logger = logging.getLogger(__name__)

SORT_LABELS = [
    ("newest", "Newest"),
    ("price_low", "Price: low to high"),
    ("price_high", "Price: high to low"),
    ("popular", "Best selling"),
    ("rating", "Top rated"),
]


def get_listing_client(request) -> ProductListingClient:
    """Client for the listing endpoint; defaults to the host serving this request."""
    config = settings.STOREFRONT
    base_url = config['API_URL'] or request.build_absolute_uri('/')
    return ProductListingClient(base_url, timeout=config['FETCH_TIMEOUT'])


class ProductListPageView(TemplateView):
    template_name = 'storefront/product_list.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        client = get_listing_client(self.request)

        controller = ListingController.from_query(
            client.fetch,
            self.request.GET.dict(),
            path=self.request.path,
            per_page=settings.STOREFRONT['PER_PAGE'],
        )
        state = controller.refresh()

        if state.has_error:
            logger.warning(f"Listing page rendered without products: {state.outcome.value} ({state.error_message})")

        categories = [
            {"id": category.id, "name": category.name, "url": controller.url_for_category(category.id)}
            for category in Category.objects.all()
        ]

        context.update({
            "state": state,
            "controller": controller,
            "categories": categories,
            "all_categories_url": controller.url_for_category(None),
            "sort_options": [
                {"value": value, "label": label, "selected": value == state.sort}
                for value, label in SORT_LABELS
            ],
            "grid_url": controller.url_for_view(ViewMode.GRID),
            "list_url": controller.url_for_view(ViewMode.LIST),
            "is_list_view": state.view_mode == ViewMode.LIST,
            "previous_url": controller.url_for_page(state.page - 1) if state.has_previous else None,
            "next_url": controller.url_for_page(state.page + 1) if state.has_next else None,
            "page_links": [
                {"number": number, "url": controller.url_for_page(number), "current": number == state.page}
                for number in range(1, state.total_pages + 1)
            ],
            "first_page_url": controller.url_for_page(1),
            "reset_url": controller.reset_url(),
        })
        return context


class ProductDetailPageView(TemplateView):
    template_name = 'storefront/product_detail.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        result = get_listing_client(self.request).fetch_product(kwargs['slug'])

        if result.outcome == ListingOutcome.EMPTY:
            raise Http404(f"Product '{kwargs['slug']}' not found")

        context.update({
            "product": result.products[0] if result.products else None,
            "outcome": result.outcome,
            "error_message": None if result.ok else result.message,
        })
        return context
