import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from django.db.models import Count, Prefetch
from django.shortcuts import get_object_or_404

from sgtmake.catalog.models import ProductImage
from sgtmake.core.permissions import IsDashboardUser, IsSuperAdmin
from sgtmake.core.utils import create_audit_log, paginate_queryset
from sgtmake.notifications.email_service import send_order_status_email
from .filters import OrderFilter
from .models import Order, OrderItem
from .serializers import OrderListSerializer, OrderDetailSerializer

logger = logging.getLogger(__name__)

VALID_STATUSES = dict(Order.STATUS_CHOICES)


def order_detail_queryset():
    items = OrderItem.objects.select_related('product').prefetch_related(
        Prefetch('product__images', queryset=ProductImage.objects.order_by('color_variant', 'sequence'))
    )
    return Order.objects.select_related('user', 'address', 'payment').prefetch_related(
        Prefetch('items', queryset=items)
    )


def change_order_status(request, order_pk, new_status):
    """
    Apply a status change, email the customer and audit it.

    Returns a Response; email failures are reported in the body but never fail the change.
    """
    new_status = (new_status or '').strip().lower()
    if new_status not in VALID_STATUSES:
        return Response({'error': 'Invalid status'}, status=status.HTTP_400_BAD_REQUEST)

    order = get_object_or_404(order_detail_queryset(), pk=order_pk)
    old_status = order.status
    order.apply_status(new_status)
    order.save(update_fields=['status', 'packed_date', 'delivered_date'])

    create_audit_log(
        request, 'status_change', 'Order', order.id,
        changes={'status': {'old': old_status, 'new': new_status}},
        object_name=order.order_id,
        object_reference=order.order_id,
    )
    logger.info(f"Order {order.order_id} status changed from {old_status} to {new_status}")

    email_result = send_order_status_email(order, order.display_status)
    if not email_result['success']:
        logger.warning(f"Order status email not sent for {order.order_id}: {email_result['message']}")

    return Response({
        'message': 'Order status updated successfully',
        'order': OrderDetailSerializer(order).data,
        'email': email_result,
    })


@api_view(['GET', 'PATCH'])
@permission_classes([IsDashboardUser])
def order_list(request):
    """
    GET: orders newest first with item counts, filters and optional pagination.
    PATCH: `{id, status}` changes an order's status (super admins only).
    """
    if request.method == 'PATCH':
        if not IsSuperAdmin().has_permission(request, None):
            return Response({'error': IsSuperAdmin.message}, status=status.HTTP_403_FORBIDDEN)
        order_pk = request.data.get('id')
        if not order_pk or not request.data.get('status'):
            return Response({'error': 'Invalid data format.'}, status=status.HTTP_400_BAD_REQUEST)
        return change_order_status(request, order_pk, request.data.get('status'))

    queryset = Order.objects.annotate(items_count=Count('items')).order_by('-order_date')
    order_filter = OrderFilter(request.query_params, queryset=queryset)
    if not order_filter.is_valid():
        return Response(order_filter.errors, status=status.HTTP_400_BAD_REQUEST)
    return Response(paginate_queryset(request, order_filter.qs, OrderListSerializer))


@api_view(['GET'])
@permission_classes([IsDashboardUser])
def order_detail(request, pk):
    """Order with address, payment, customer and items"""
    order = get_object_or_404(order_detail_queryset(), pk=pk)
    return Response(OrderDetailSerializer(order).data)


@api_view(['PATCH'])
@permission_classes([IsSuperAdmin])
def order_status_update(request, pk):
    if not request.data.get('status'):
        return Response({'error': 'Status is required'}, status=status.HTTP_400_BAD_REQUEST)
    return change_order_status(request, pk, request.data.get('status'))
