import logging
from datetime import timedelta

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Count, Q, Sum
from django.shortcuts import get_object_or_404
from django.utils import timezone

from sgtmake.core.permissions import IsDashboardUser
from sgtmake.core.utils import create_audit_log, paginate_queryset
from sgtmake.notifications.email_service import (
    send_quote_request_notification, send_quote_response_email,
    send_quote_status_email, send_quote_acceptance_notification,
)
from .filters import QuoteRequestFilter
from .models import QuoteRequest
from .serializers import (
    QuoteCreateSerializer, QuoteListSerializer, QuoteDetailSerializer, QuoteResponseSerializer,
)

logger = logging.getLogger(__name__)

QUOTE_VALIDITY_DAYS = 30
CLOSED_STATUSES = ('accepted', 'rejected')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def quote_create(request):
    """Submit a quote request for the current user and notify the admin team"""
    serializer = QuoteCreateSerializer(data=request.data)
    if serializer.is_valid():
        quote = serializer.save(user=request.user)
        logger.info(f"Quote request {quote.pk} submitted by user {request.user.pk} with {quote.total_items} items")
        send_quote_request_notification(quote)
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsDashboardUser])
def admin_quote_list(request):
    """All quote requests, newest first, with filters and optional pagination"""
    queryset = QuoteRequest.objects.select_related('user').order_by('-created_at')
    quote_filter = QuoteRequestFilter(request.query_params, queryset=queryset)
    if not quote_filter.is_valid():
        return Response(quote_filter.errors, status=status.HTTP_400_BAD_REQUEST)
    return Response(paginate_queryset(request, quote_filter.qs, QuoteListSerializer))


@api_view(['GET'])
@permission_classes([IsDashboardUser])
def admin_quote_detail(request, pk):
    quote = get_object_or_404(QuoteRequest.objects.select_related('user'), pk=pk)
    return Response(QuoteDetailSerializer(quote).data)


@api_view(['POST'])
@permission_classes([IsDashboardUser])
def admin_quote_respond(request, pk):
    """
    Price a quote request and email the customer.

    Expects `quotedPrice`, `adminResponse` and `status`. The quote stays valid
    for 30 days. An email failure is logged and leaves `email_sent` False.
    """
    quote = get_object_or_404(QuoteRequest.objects.select_related('user'), pk=pk)

    if not all(request.data.get(field) for field in ('quotedPrice', 'adminResponse', 'status')):
        return Response({'error': 'Missing required fields'}, status=status.HTTP_400_BAD_REQUEST)

    serializer = QuoteResponseSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    old_status = quote.status
    quote.quoted_price = serializer.validated_data['quotedPrice']
    quote.admin_response = serializer.validated_data['adminResponse']
    quote.status = serializer.validated_data['status']
    quote.valid_until = timezone.now() + timedelta(days=QUOTE_VALIDITY_DAYS)
    quote.save()

    create_audit_log(
        request, 'quote_response', 'QuoteRequest', quote.id,
        changes={
            'quoted_price': str(quote.quoted_price),
            'status': {'old': old_status, 'new': quote.status},
        },
        object_name=f"Quote #{quote.id}",
    )

    if send_quote_response_email(quote):
        quote.email_sent = True
        quote.save(update_fields=['email_sent', 'updated_at'])

    return Response({
        'message': 'Quote response sent successfully',
        'email_sent': quote.email_sent,
        'quote': QuoteDetailSerializer(quote).data,
    })


@api_view(['POST', 'PATCH'])
@permission_classes([IsDashboardUser])
def admin_quote_status(request, pk):
    """Change a quote's status and email the customer; acceptances also notify the admin team"""
    quote = get_object_or_404(QuoteRequest.objects.select_related('user'), pk=pk)

    new_status = (request.data.get('status') or '').strip().lower()
    if not new_status:
        return Response({'error': 'Status is required'}, status=status.HTTP_400_BAD_REQUEST)
    if new_status not in dict(QuoteRequest.STATUS_CHOICES):
        return Response({'error': 'Invalid status'}, status=status.HTTP_400_BAD_REQUEST)

    old_status = quote.status
    quote.status = new_status
    quote.response_received = new_status in CLOSED_STATUSES
    quote.save()

    create_audit_log(
        request, 'status_change', 'QuoteRequest', quote.id,
        changes={'status': {'old': old_status, 'new': new_status}},
        object_name=f"Quote #{quote.id}",
    )

    send_quote_status_email(quote)
    if new_status == 'accepted':
        send_quote_acceptance_notification(quote)

    return Response({
        'message': 'Quote status updated successfully',
        'quote': QuoteDetailSerializer(quote).data,
    })


@api_view(['GET'])
@permission_classes([IsDashboardUser])
def admin_quote_stats(request):
    """Totals per status and the summed value of all quoted prices"""
    stats = QuoteRequest.objects.aggregate(
        total=Count('id'),
        pending=Count('id', filter=Q(status='pending')),
        quoted=Count('id', filter=Q(status='quoted')),
        accepted=Count('id', filter=Q(status='accepted')),
        rejected=Count('id', filter=Q(status='rejected')),
        total_value=Sum('quoted_price'),
    )
    stats['total_value'] = stats['total_value'] or 0
    return Response(stats)
