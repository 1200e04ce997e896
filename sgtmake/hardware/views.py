"""
Admin endpoints for fastener, connector and wire categories and their options.

Fasteners have their own routes; connectors and wires share one set of
routes and are told apart by the `type` query parameter or form field.
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from django.db import transaction
from django.shortcuts import get_object_or_404

from sgtmake.core import cloudinary_service
from sgtmake.core.cloudinary_service import MediaStorageError
from sgtmake.core.permissions import IsDashboardUser
from sgtmake.core.utils import create_audit_log
from .models import PartCategory, PartOption
from .serializers import PartCategorySerializer, PartOptionSerializer, option_payload

logger = logging.getLogger(__name__)

CONNECTOR_KINDS = ('connector', 'wire')


def parse_bool(value, default=False):
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == 'true'


def resolve_connector_kind(request):
    """`type=wires` selects wires, anything else connectors"""
    requested = request.query_params.get('type') or request.data.get('type')
    return 'wire' if requested in ('wires', 'wire') else 'connector'


def upload_category_image(category, image_file):
    """Upload a category image; failures are logged and leave the image unchanged"""
    try:
        result = cloudinary_service.upload_image(image_file, category.image_folder)
    except MediaStorageError as e:
        logger.error(f"Error uploading image for {category.kind} category '{category.name}': {str(e)}")
        return None
    return result['public_id']


def part_categories(kind):
    kinds = CONNECTOR_KINDS if kind in CONNECTOR_KINDS else (kind,)
    return PartCategory.objects.filter(kind__in=kinds).prefetch_related('options')


# Shared handlers
def list_create_categories(request, kind):
    if request.method == 'GET':
        categories = PartCategory.objects.filter(kind=kind).prefetch_related('options').order_by('-created_at')
        return Response(PartCategorySerializer(categories, many=True).data)

    name = (request.data.get('name') or '').strip()
    if not name:
        message = 'Name and type are required' if kind in CONNECTOR_KINDS else 'Name is required'
        return Response({'error': message}, status=status.HTTP_400_BAD_REQUEST)

    category = PartCategory(
        kind=kind,
        name=name,
        description=request.data.get('description') or None,
        is_active=parse_bool(request.data.get('isActive', request.data.get('is_active')), default=True),
    )
    image_file = request.FILES.get('image')
    if image_file:
        category.image = upload_category_image(category, image_file)
    category.save()

    create_audit_log(request, 'create', 'PartCategory', category.id, object_name=category.name,
                     object_reference=category.kind)
    return Response(PartCategorySerializer(category).data, status=status.HTTP_201_CREATED)


def category_detail_handler(request, kind, pk):
    category = get_object_or_404(part_categories(kind), pk=pk)

    if request.method == 'GET':
        return Response(PartCategorySerializer(category).data)

    if request.method == 'PUT':
        if 'name' in request.data:
            name = (request.data.get('name') or '').strip()
            if not name:
                return Response({'error': 'Name is required'}, status=status.HTTP_400_BAD_REQUEST)
            category.name = name
        if 'description' in request.data:
            category.description = request.data.get('description') or None
        if 'isActive' in request.data or 'is_active' in request.data:
            category.is_active = parse_bool(request.data.get('isActive', request.data.get('is_active')))

        image_file = request.FILES.get('image')
        if image_file:
            old_image = category.image
            new_image = upload_category_image(category, image_file)
            if new_image:
                category.image = new_image
                cloudinary_service.safe_destroy(old_image)
        category.save()

        create_audit_log(request, 'update', 'PartCategory', category.id, object_name=category.name,
                         object_reference=category.kind)
        return Response(PartCategorySerializer(category).data)

    # DELETE
    cloudinary_service.safe_destroy(category.image)
    category_id, category_name = category.id, category.name
    with transaction.atomic():
        category.options.all().delete()
        category.delete()
    create_audit_log(request, 'delete', 'PartCategory', category_id, object_name=category_name, object_reference=kind)
    return Response({'message': 'Category deleted successfully'})


def list_create_options(request, kind, pk):
    category = get_object_or_404(part_categories(kind), pk=pk)

    if request.method == 'GET':
        return Response(PartOptionSerializer(category.options.order_by('created_at'), many=True).data)

    payload = option_payload(request.data)
    if not payload.get('name') or not payload.get('label'):
        return Response({'error': 'Name and label are required'}, status=status.HTTP_400_BAD_REQUEST)

    serializer = PartOptionSerializer(data=payload)
    if serializer.is_valid():
        option = serializer.save(category=category)
        return Response(PartOptionSerializer(option).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


def option_detail_handler(request, kind, pk):
    kinds = CONNECTOR_KINDS if kind in CONNECTOR_KINDS else (kind,)
    option = get_object_or_404(PartOption.objects.select_related('category'), pk=pk, category__kind__in=kinds)

    if request.method == 'GET':
        return Response(PartOptionSerializer(option).data)

    if request.method == 'PUT':
        serializer = PartOptionSerializer(option, data=option_payload(request.data), partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    # DELETE: remove value images first
    for public_id in option.image_public_ids():
        cloudinary_service.safe_destroy(public_id)
    option.delete()
    return Response({'message': 'Option deleted successfully'})


# Fastener endpoints
@api_view(['GET', 'POST'])
@permission_classes([IsDashboardUser])
def fastener_category_list_create(request):
    """List fastener categories with options or create one (multipart, optional image)"""
    return list_create_categories(request, 'fastener')


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsDashboardUser])
def fastener_category_detail(request, pk):
    """Retrieve, update or delete a fastener category"""
    return category_detail_handler(request, 'fastener', pk)


@api_view(['GET', 'POST'])
@permission_classes([IsDashboardUser])
def fastener_option_list_create(request, pk):
    """List or add options of a fastener category"""
    return list_create_options(request, 'fastener', pk)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsDashboardUser])
def fastener_option_detail(request, pk):
    """Retrieve, update or delete a fastener option"""
    return option_detail_handler(request, 'fastener', pk)


# Connector / wire endpoints
@api_view(['GET', 'POST'])
@permission_classes([IsDashboardUser])
def connector_category_list_create(request):
    """List or create connector categories (`?type=wires` for wires)"""
    if request.method == 'POST' and not request.data.get('type') and not request.query_params.get('type'):
        return Response({'error': 'Name and type are required'}, status=status.HTTP_400_BAD_REQUEST)
    return list_create_categories(request, resolve_connector_kind(request))


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsDashboardUser])
def connector_category_detail(request, pk):
    """Retrieve, update or delete a connector or wire category"""
    return category_detail_handler(request, resolve_connector_kind(request), pk)


@api_view(['GET', 'POST'])
@permission_classes([IsDashboardUser])
def connector_option_list_create(request, pk):
    """List or add options of a connector or wire category"""
    return list_create_options(request, resolve_connector_kind(request), pk)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsDashboardUser])
def connector_option_detail(request, pk):
    """Retrieve, update or delete a connector or wire option"""
    return option_detail_handler(request, resolve_connector_kind(request), pk)
