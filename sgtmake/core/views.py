import logging
from pathlib import PurePosixPath

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, IsAdminUser
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError, AuthenticationFailed
from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from django.db.models import Q, Count

from . import cloudinary_service
from .cloudinary_service import MediaStorageError
from .filters import AuditLogFilter
from .models import AuditLog
from .permissions import IsDashboardUser
from .utils import create_audit_log, paginate_queryset
from .serializers import (
    UserSerializer, UserCreateSerializer, CustomerSerializer, AuditLogSerializer
)

logger = logging.getLogger(__name__)

User = get_user_model()

CATEGORY_UPLOAD_FOLDER = 'sgtmake/categories'
EDITOR_UPLOAD_FOLDER = 'sgtmake/editor'


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        data = super().validate(attrs)
        if not self.user.is_active:
            raise AuthenticationFailed('User account is disabled.')
        data['user'] = UserSerializer(self.user).data
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['role'] = user.role
        return token


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer


class CustomTokenRefreshSerializer(TokenRefreshSerializer):
    """Token refresh that reports deleted users as an invalid token"""
    def validate(self, attrs):
        try:
            return super().validate(attrs)
        except (InvalidToken, TokenError):
            raise InvalidToken('Token is invalid or expired.')
        except User.DoesNotExist:
            raise InvalidToken('Token is invalid. User no longer exists.')


class CustomTokenRefreshView(TokenRefreshView):
    serializer_class = CustomTokenRefreshSerializer


def can_see_all_logs(user):
    return user.is_staff or user.is_superadmin


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """The signed-in user plus the flags the dashboard uses to gate its screens"""
    user = request.user
    return Response({
        **UserSerializer(user).data,
        'is_superadmin': user.is_superadmin,
        'can_access_dashboard': user.is_staff or user.is_dashboard_user,
    })


# Staff user management
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminUser])
def user_list_create(request):
    """GET: users by username, optionally one `role`. POST: create a user with a confirmed password."""
    if request.method == 'POST':
        serializer = UserCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        user = serializer.save()
        create_audit_log(request, 'create', 'User', user.id, object_name=user.username, object_reference=user.role)
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)

    users = User.objects.order_by('username')
    role = request.query_params.get('role')
    if role:
        users = users.filter(role=role)
    return Response(paginate_queryset(request, users, UserSerializer))


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminUser])
def user_detail(request, pk):
    user = get_object_or_404(User, pk=pk)

    if request.method == 'DELETE':
        if user.pk == request.user.pk:
            return Response({'error': 'You cannot delete your own account'}, status=status.HTTP_400_BAD_REQUEST)
        username = user.username
        user.delete()
        create_audit_log(request, 'delete', 'User', pk, object_name=username)
        return Response(status=status.HTTP_204_NO_CONTENT)

    if request.method == 'PATCH':
        old_role = user.role
        serializer = UserSerializer(user, data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        serializer.save()
        if user.role != old_role:
            create_audit_log(request, 'update', 'User', user.id, changes={'role': {'old': old_role, 'new': user.role}},
                             object_name=user.username)
        return Response(serializer.data)

    return Response(UserSerializer(user).data)


# Customer views
@api_view(['GET'])
@permission_classes([IsDashboardUser])
def customer_list(request):
    """List customers with their order counts"""
    customers = User.objects.filter(role='customer').annotate(
        orders_count=Count('orders')
    ).order_by('-date_joined')

    search = request.query_params.get('search', '').strip()
    if search:
        customers = customers.filter(
            Q(username__icontains=search) |
            Q(first_name__icontains=search) |
            Q(last_name__icontains=search) |
            Q(email__icontains=search) |
            Q(phone__icontains=search)
        )

    serializer = CustomerSerializer(customers, many=True)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsDashboardUser])
def customer_detail(request, pk):
    """Customer profile with the orders they placed"""
    from sgtmake.orders.models import Order

    customer = get_object_or_404(User, pk=pk, role='customer')
    orders = Order.objects.filter(user=customer).select_related('payment').order_by('-order_date')

    customer_data = CustomerSerializer(customer).data
    customer_data['orders_count'] = orders.count()
    customer_data['orders'] = [
        {
            'oid': order.order_id,
            'amount': order.total,
            'date': order.order_date,
            'payment': order.payment_label,
            'status': order.display_status,
            'address_id': order.address_id,
        }
        for order in orders
    ]
    return Response(customer_data)


@api_view(['GET'])
@permission_classes([IsDashboardUser])
def customer_addresses(request, pk):
    """Saved addresses of a customer"""
    from sgtmake.orders.models import Address
    from sgtmake.orders.serializers import AddressSerializer

    customer = get_object_or_404(User, pk=pk, role='customer')
    addresses = Address.objects.filter(user=customer).order_by('-created_at')
    return Response(AddressSerializer(addresses, many=True).data)


# Audit trail (read-only)
@api_view(['GET'])
@permission_classes([IsDashboardUser])
def audit_log_list(request):
    """Audit entries newest first; admins without staff status only see their own"""
    queryset = AuditLog.objects.select_related('user').order_by('-created_at')
    if not can_see_all_logs(request.user):
        queryset = queryset.filter(user=request.user)

    log_filter = AuditLogFilter(request.query_params, queryset=queryset)
    if not log_filter.is_valid():
        return Response(log_filter.errors, status=status.HTTP_400_BAD_REQUEST)
    return Response(paginate_queryset(request, log_filter.qs, AuditLogSerializer, default_limit=50))


@api_view(['GET'])
@permission_classes([IsDashboardUser])
def audit_log_detail(request, pk):
    audit_log = get_object_or_404(AuditLog.objects.select_related('user'), pk=pk)
    if not can_see_all_logs(request.user) and audit_log.user_id != request.user.pk:
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
    return Response(AuditLogSerializer(audit_log).data)


# Media upload views
def _parse_dimension(value):
    try:
        return int(value) if value not in (None, '') else None
    except (TypeError, ValueError):
        return None


@api_view(['POST', 'DELETE'])
@permission_classes([IsDashboardUser])
def image_upload(request):
    """
    POST: upload a category image (converted to webp)
    DELETE: remove an uploaded image by `publicId`
    """
    if request.method == 'DELETE':
        public_id = request.query_params.get('publicId')
        if not public_id:
            return Response({'error': 'Public ID is required'}, status=status.HTTP_400_BAD_REQUEST)
        try:
            cloudinary_service.destroy_image(public_id)
        except MediaStorageError:
            return Response({'error': 'Delete failed'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        create_audit_log(request, 'image_delete', 'Image', public_id, object_reference=public_id)
        return Response({'message': 'Image deleted successfully'})

    upload = request.FILES.get('file')
    if not upload:
        return Response({'error': 'No file provided'}, status=status.HTTP_400_BAD_REQUEST)

    transformation = {'quality': request.data.get('quality') or 'auto'}
    width = _parse_dimension(request.data.get('width'))
    height = _parse_dimension(request.data.get('height'))
    if width:
        transformation['width'] = width
    if height:
        transformation['height'] = height
    if width or height:
        transformation['crop'] = 'fill'

    try:
        result = cloudinary_service.upload_image(
            upload,
            CATEGORY_UPLOAD_FOLDER,
            format='webp',
            transformation=[transformation],
        )
    except MediaStorageError:
        return Response({'error': 'Upload failed'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    create_audit_log(request, 'image_upload', 'Image', result.get('public_id'), object_reference=result.get('public_id'))
    return Response(result, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsDashboardUser])
def editor_image_upload(request):
    """Upload an image posted as the raw request body by the rich text editor"""
    body = request.body
    if not body:
        return Response({'error': 'No file provided'}, status=status.HTTP_400_BAD_REQUEST)

    filename = request.headers.get('X-Vercel-Filename') or 'image.png'
    public_id = PurePosixPath(filename).stem or 'image'

    try:
        result = cloudinary_service.upload_image(
            body,
            EDITOR_UPLOAD_FOLDER,
            public_id=public_id,
            format='webp',
            quality='auto',
        )
    except MediaStorageError:
        return Response({'error': 'Upload failed'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    create_audit_log(request, 'image_upload', 'Image', result.get('public_id'), object_name=filename,
                     object_reference=result.get('public_id'))
    result['content_type'] = request.content_type or 'application/octet-stream'
    return Response(result, status=status.HTTP_201_CREATED)
