"""
Caching utilities for expensive dashboard queries
Uses the configured Django cache (Redis via django-redis in production)
"""
from django.core.cache import cache
from functools import wraps
import hashlib
import logging

logger = logging.getLogger(__name__)

# Cache TTLs (in seconds)
ADMIN_STATS_CACHE_TTL = 120  # 2 minutes
SERVICE_STATS_CACHE_TTL = 300  # 5 minutes

ADMIN_STATS_KEY_PREFIX = 'admin_stats'
SERVICE_STATS_KEY_PREFIX = 'service_stats'


def make_cache_key(prefix, *args, **kwargs):
    """Generate a unique cache key from arguments"""
    key_data = f"{prefix}:{args}:{sorted(kwargs.items())}"
    key_hash = hashlib.md5(key_data.encode()).hexdigest()
    return f"{prefix}:{key_hash}"


def cached_query(cache_ttl=60, key_prefix="query"):
    """
    Decorator to cache expensive queries

    Usage:
        @cached_query(cache_ttl=120, key_prefix="admin_stats")
        def get_expensive_data():
            return data
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            cache_key = make_cache_key(key_prefix, *args, **kwargs)

            cached_data = cache.get(cache_key)
            if cached_data is not None:
                logger.debug(f"Cache HIT for {key_prefix}: {cache_key}")
                return cached_data

            logger.debug(f"Cache MISS for {key_prefix}: {cache_key}")
            result = func(*args, **kwargs)
            cache.set(cache_key, result, cache_ttl)
            return result
        return wrapper
    return decorator


def invalidate_dashboard_cache():
    """Invalidate the admin dashboard stats"""
    cache.delete(make_cache_key(ADMIN_STATS_KEY_PREFIX))
    logger.info("Invalidated dashboard cache")


def invalidate_service_stats_cache():
    """Invalidate the service request stats"""
    cache.delete(make_cache_key(SERVICE_STATS_KEY_PREFIX))
    logger.info("Invalidated service stats cache")
