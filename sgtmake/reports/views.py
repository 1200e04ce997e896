from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from sgtmake.catalog.models import Product
from sgtmake.core.cache_utils import cached_query, ADMIN_STATS_CACHE_TTL, ADMIN_STATS_KEY_PREFIX
from sgtmake.core.permissions import IsDashboardUser
from sgtmake.orders.models import Order
from sgtmake.quotes.models import QuoteRequest
from sgtmake.service_requests.models import ServiceRequest

RECENT_LIMIT = 5


@cached_query(cache_ttl=ADMIN_STATS_CACHE_TTL, key_prefix=ADMIN_STATS_KEY_PREFIX)
def get_dashboard_stats():
    """
    Headline counts and recent activity for the dashboard home.

    Cached for a short TTL; cache_signals drops the entry whenever a product,
    quote, service request or order changes.
    """
    recent_quotes = QuoteRequest.objects.select_related('user').order_by('-created_at')[:RECENT_LIMIT]
    recent_services = ServiceRequest.objects.select_related('user').order_by('-created_at')[:RECENT_LIMIT]

    return {
        'total_products': Product.objects.filter(is_deleted=False).count(),
        'pending_quotes': QuoteRequest.objects.filter(status='pending').count(),
        'pending_services': ServiceRequest.objects.filter(status='pending').count(),
        'total_orders': Order.objects.count(),
        'recent_quotes': [
            {
                'id': quote.id,
                'customer_name': quote.user.display_name if quote.user else None,
                'total_items': quote.total_items,
                'status': quote.status,
                'created_at': quote.created_at,
            }
            for quote in recent_quotes
        ],
        'recent_services': [
            {
                'id': service.id,
                'customer_name': service.user.display_name if service.user else None,
                'service_type': service.service_type,
                'status': service.status,
                'created_at': service.created_at,
            }
            for service in recent_services
        ],
    }


@api_view(['GET'])
@permission_classes([IsDashboardUser])
def admin_stats(request):
    return Response(get_dashboard_stats())
