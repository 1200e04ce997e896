"""Utility functions for audit logging and list pagination"""
import logging

from django.core.paginator import Paginator, EmptyPage

from .models import AuditLog

logger = logging.getLogger(__name__)


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, user=None, object_name=None, object_reference=None):
    """
    Create an audit log entry

    Args:
        request: Django request object (for user and IP) - optional if user is provided
        action: Action type (create, update, delete, status_change, etc.)
        model_name: Name of the model being acted upon
        object_id: ID of the object (as string)
        changes: Dictionary of changes made
        user: Optional user override (defaults to request.user if request provided)
        object_name: Human-readable name of the object (e.g., product title)
        object_reference: Reference identifier (e.g., slug, Cloudinary public id)
    """
    try:
        audit_user = None
        if user:
            audit_user = user
        elif request and hasattr(request, 'user'):
            audit_user = request.user

        ip_address = get_client_ip(request) if request else None

        if not action or not model_name or not object_id:
            logger.warning(f"Audit log creation skipped: missing required fields (action={action}, model_name={model_name}, object_id={object_id})")
            return None

        return AuditLog.objects.create(
            user=audit_user if audit_user and audit_user.is_authenticated else None,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            object_name=object_name,
            object_reference=object_reference,
            changes=changes or {},
            ip_address=ip_address
        )
    except Exception as e:
        # Don't fail the main operation if audit logging fails
        logger.error(f"Failed to create audit log: {str(e)}")
        return None


def paginate_queryset(request, queryset, serializer_class, default_limit=25, context=None):
    """
    Serialize a queryset, paginated when the request asks for a page.

    Returns a plain list when no `page` query param is given, otherwise a dict
    with `results`, `count`, `page`, `limit` and `total_pages`.
    """
    page = request.query_params.get('page')
    if not page:
        return serializer_class(queryset, many=True, context=context or {}).data

    try:
        page_number = max(int(page), 1)
    except (TypeError, ValueError):
        page_number = 1
    try:
        limit = max(int(request.query_params.get('limit', default_limit)), 1)
    except (TypeError, ValueError):
        limit = default_limit

    paginator = Paginator(queryset, limit)
    try:
        page_obj = paginator.page(page_number)
    except EmptyPage:
        page_obj = paginator.page(paginator.num_pages or 1)

    return {
        'results': serializer_class(page_obj.object_list, many=True, context=context or {}).data,
        'count': paginator.count,
        'page': page_obj.number,
        'limit': limit,
        'total_pages': paginator.num_pages,
    }
