import logging
from datetime import datetime, time, timedelta

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.views.decorators.cache import never_cache

from sgtmake.core import cloudinary_service
from sgtmake.core.cache_utils import cached_query, SERVICE_STATS_CACHE_TTL, SERVICE_STATS_KEY_PREFIX
from sgtmake.core.cloudinary_service import MediaStorageError
from sgtmake.core.permissions import IsDashboardUser
from sgtmake.core.utils import create_audit_log
from sgtmake.notifications.email_service import send_service_status_email
from .filters import ServiceRequestFilter
from .models import ServiceRequest
from .serializers import ServiceRequestSerializer, ServiceRequestDetailSerializer

logger = logging.getLogger(__name__)

VALID_STATUSES = dict(ServiceRequest.STATUS_CHOICES)


@never_cache
@api_view(['GET'])
@permission_classes([IsDashboardUser])
def service_list(request):
    """All service requests, newest first, never cached by browsers or proxies"""
    services = ServiceRequest.objects.select_related('user').order_by('-created_at')
    return Response(ServiceRequestSerializer(services, many=True).data)


@api_view(['GET'])
@permission_classes([IsDashboardUser])
def service_detail(request, pk):
    service = get_object_or_404(ServiceRequest.objects.select_related('user'), pk=pk)
    return Response(ServiceRequestDetailSerializer(service).data)


@api_view(['PATCH'])
@permission_classes([IsDashboardUser])
def service_status_update(request, pk):
    """Change a service request's status and email the customer"""
    new_status = (request.data.get('status') or '').strip()
    if not new_status:
        return Response({'error': 'Status is required'}, status=status.HTTP_400_BAD_REQUEST)
    if new_status not in VALID_STATUSES:
        return Response({'error': 'Invalid status'}, status=status.HTTP_400_BAD_REQUEST)

    service = get_object_or_404(ServiceRequest.objects.select_related('user'), pk=pk)
    old_status = service.status
    service.status = new_status
    service.save(update_fields=['status', 'updated_at'])

    create_audit_log(
        request, 'status_change', 'ServiceRequest', service.id,
        changes={'status': {'old': old_status, 'new': new_status}},
        object_name=service.file_name,
        object_reference=service.service_type,
    )

    email_result = send_service_status_email(service, new_status)
    if not email_result['success']:
        logger.warning(f"Service status email not sent for request {service.pk}: {email_result['message']}")

    return Response({
        'message': 'Status updated successfully',
        'service': ServiceRequestDetailSerializer(service).data,
        'email': email_result,
    })


@api_view(['GET'])
@permission_classes([IsDashboardUser])
def service_download(request, pk):
    """Attachment URL for the uploaded design file"""
    service = get_object_or_404(ServiceRequest, pk=pk)
    if not service.file_public_id or not service.file_url:
        return Response({'error': 'No file available for download'}, status=status.HTTP_404_NOT_FOUND)

    try:
        download_url = cloudinary_service.build_download_url(service.file_public_id)
    except MediaStorageError as e:
        logger.error(f"Error generating download URL for service {service.pk}: {str(e)}")
        return Response({'error': 'Failed to generate download URL'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info(f"File download requested for service {service.pk} by user {request.user.pk}")
    return Response({
        'download_url': download_url,
        'file_type': service.file_type,
        'message': 'Download URL generated successfully',
    })


@api_view(['GET'])
@permission_classes([IsDashboardUser])
def service_filter(request):
    """Filter by `type`, `userId`, `startDate` and `endDate`"""
    queryset = ServiceRequest.objects.select_related('user').order_by('-created_at')
    service_filter_set = ServiceRequestFilter(request.query_params, queryset=queryset)
    if not service_filter_set.is_valid():
        return Response(service_filter_set.errors, status=status.HTTP_400_BAD_REQUEST)
    return Response(ServiceRequestSerializer(service_filter_set.qs, many=True).data)


@cached_query(cache_ttl=SERVICE_STATS_CACHE_TTL, key_prefix=SERVICE_STATS_KEY_PREFIX)
def get_service_stats():
    type_counts = {service_type: 0 for service_type in ServiceRequest.SERVICE_TYPES}
    type_counts['other'] = 0
    total_count = 0
    for form_details in ServiceRequest.objects.values_list('form_details', flat=True):
        total_count += 1
        service_type = form_details.get('type') if isinstance(form_details, dict) else None
        key = service_type if isinstance(service_type, str) and service_type in type_counts else 'other'
        type_counts[key] += 1

    now = timezone.now()
    today_start = timezone.make_aware(datetime.combine(timezone.localdate(), time.min))
    tomorrow_start = today_start + timedelta(days=1)

    return {
        'total_count': total_count,
        'type_counts': type_counts,
        'today_count': ServiceRequest.objects.filter(
            created_at__gte=today_start, created_at__lt=tomorrow_start
        ).count(),
        'last_week_count': ServiceRequest.objects.filter(created_at__gte=now - timedelta(days=7)).count(),
    }


@api_view(['GET'])
@permission_classes([IsDashboardUser])
def service_stats(request):
    """Totals by service type plus today's and the last seven days' counts"""
    return Response(get_service_stats())
