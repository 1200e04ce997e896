"""
Cache invalidation signals
Automatically invalidate dashboard caches when data changes
"""
from django.db import transaction
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging

from .cache_utils import invalidate_dashboard_cache, invalidate_service_stats_cache

logger = logging.getLogger(__name__)

DASHBOARD_MODELS = ['Product', 'QuoteRequest', 'ServiceRequest', 'Order']


@receiver([post_save, post_delete])
def invalidate_dashboard_stats(sender, instance, **kwargs):
    """Invalidate dashboard stats when products, quotes, services or orders change"""
    if sender.__name__ not in DASHBOARD_MODELS:
        return
    try:
        # Invalidate after commit so the cache is not repopulated with stale rows
        transaction.on_commit(invalidate_dashboard_cache)
    except Exception as e:
        logger.warning(f"Error in invalidate_dashboard_stats signal: {e}")


@receiver([post_save, post_delete])
def invalidate_service_stats(sender, instance, **kwargs):
    """Invalidate service stats when service requests change"""
    if sender.__name__ != 'ServiceRequest':
        return
    try:
        transaction.on_commit(invalidate_service_stats_cache)
    except Exception as e:
        logger.warning(f"Error in invalidate_service_stats signal: {e}")
