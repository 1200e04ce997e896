import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from django.db import transaction
from django.db.models import Count, Q, ProtectedError, Prefetch
from django.shortcuts import get_object_or_404

from sgtmake.core.permissions import IsDashboardUser, IsSuperAdminOrReadOnly
from sgtmake.core.utils import create_audit_log, paginate_queryset
from .filters import CategoryFilter, ProductFilter
from .image_sync import sync_product_images, create_product_images, delete_all_product_images
from .models import Category, Product, ProductImage
from .serializers import (
    CategorySerializer, ProductSerializer, ProductListSerializer, ProductWriteSerializer,
    product_field_values,
)

logger = logging.getLogger(__name__)


def annotated_categories():
    return Category.objects.filter(is_deleted=False).select_related('parent').annotate(
        product_count=Count('products', filter=Q(products__is_deleted=False))
    )


def category_payload(data):
    """Accepts `{category, parentId, description}` or `{values: {...}}` as well as model field names"""
    values = data.get('values') if isinstance(data.get('values'), dict) else data
    payload = {}
    name = values.get('category', values.get('name'))
    if name is not None:
        payload['name'] = name.strip() if isinstance(name, str) else name
    if 'parentId' in values or 'parent' in values:
        parent = values.get('parentId', values.get('parent'))
        payload['parent'] = parent or None
    if 'description' in values:
        payload['description'] = values.get('description') or ''
    return payload


# Category views
@api_view(['GET', 'POST'])
@permission_classes([IsSuperAdminOrReadOnly])
def category_list_create(request):
    """List categories with product counts or create a category"""
    if request.method == 'GET':
        queryset = annotated_categories().order_by('-created_at')
        category_filter = CategoryFilter(request.query_params, queryset=queryset)
        if not category_filter.is_valid():
            return Response(category_filter.errors, status=status.HTTP_400_BAD_REQUEST)
        data = paginate_queryset(request, category_filter.qs, CategorySerializer)
        return Response(data)

    payload = category_payload(request.data)
    if not payload.get('name'):
        return Response({'error': 'Category name is required'}, status=status.HTTP_400_BAD_REQUEST)
    serializer = CategorySerializer(data=payload)
    if serializer.is_valid():
        category = serializer.save()
        create_audit_log(request, 'create', 'Category', category.id, object_name=category.name)
        return Response(CategorySerializer(category).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsSuperAdminOrReadOnly])
def category_detail(request, pk):
    """Retrieve, update or delete a category"""
    category = get_object_or_404(annotated_categories(), pk=pk)

    if request.method == 'GET':
        return Response(CategorySerializer(category).data)

    if request.method == 'PUT':
        serializer = CategorySerializer(category, data=category_payload(request.data), partial=True)
        if serializer.is_valid():
            serializer.save()
            create_audit_log(request, 'update', 'Category', category.id, object_name=category.name,
                             changes={k: str(v) for k, v in serializer.validated_data.items()})
            return Response(CategorySerializer(get_object_or_404(annotated_categories(), pk=pk)).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    # DELETE: hard delete when nothing references the category, otherwise soft delete
    try:
        with transaction.atomic():
            Category.objects.filter(pk=category.pk).delete()
    except ProtectedError:
        Category.objects.filter(pk=category.pk).update(is_deleted=True)
        create_audit_log(request, 'soft_delete', 'Category', category.id, object_name=category.name)
        return Response({'message': 'Soft deleted due to constraints', 'soft_deleted': True})

    create_audit_log(request, 'delete', 'Category', pk, object_name=category.name)
    return Response({'message': 'Category hard deleted.', 'soft_deleted': False})


@api_view(['GET'])
@permission_classes([IsDashboardUser])
def category_end_child(request):
    """Categories without live subcategories (the ones products can be assigned to)"""
    categories = Category.objects.filter(is_deleted=False).exclude(
        children__is_deleted=False
    ).order_by('name')
    return Response([
        {'id': category.id, 'name': category.name, 'parent_id': category.parent_id}
        for category in categories
    ])


# Product views
def product_queryset():
    return Product.objects.select_related('category').prefetch_related(
        Prefetch('images', queryset=ProductImage.objects.order_by('color_variant', 'sequence'))
    )


@api_view(['GET', 'POST'])
@permission_classes([IsSuperAdminOrReadOnly])
def product_list_create(request):
    """List products or create a product with its colour variants"""
    if request.method == 'GET':
        queryset = product_queryset().filter(is_deleted=False).order_by('-created_at')
        product_filter = ProductFilter(request.query_params, queryset=queryset)
        if not product_filter.is_valid():
            return Response(product_filter.errors, status=status.HTTP_400_BAD_REQUEST)
        return Response(paginate_queryset(request, product_filter.qs, ProductListSerializer))

    serializer = ProductWriteSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    incoming_colors = [v['color'].strip() for v in data['colors'] if v.get('color', '').strip()]
    with transaction.atomic():
        product = Product.objects.create(**product_field_values(data, incoming_colors))
        create_product_images(product, data['colors'])

    create_audit_log(request, 'create', 'Product', product.id, object_name=product.title, object_reference=product.slug)
    return Response(ProductSerializer(product_queryset().get(pk=product.pk)).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsSuperAdminOrReadOnly])
def product_detail(request, pk):
    """Retrieve, edit or delete a product"""
    product = get_object_or_404(product_queryset(), pk=pk)

    if request.method == 'GET':
        if product.is_deleted:
            return Response({'error': 'Product has been deleted and is no longer accessible'},
                            status=status.HTTP_400_BAD_REQUEST)
        return Response(ProductSerializer(product).data)

    if product.is_deleted:
        message = 'Cannot edit a deleted product' if request.method == 'PUT' else 'Product has already been deleted'
        return Response({'error': message}, status=status.HTTP_400_BAD_REQUEST)

    if request.method == 'PUT':
        return product_edit(request, product)

    if product.purchases == 0:
        deleted_images = delete_all_product_images(product)
        product_id, title, slug = product.id, product.title, product.slug
        product.delete()
        create_audit_log(request, 'delete', 'Product', product_id, object_name=title, object_reference=slug,
                         changes={'images_deleted': deleted_images})
        return Response({'message': 'Product permanently deleted.', 'soft_deleted': False})

    product.is_deleted = True
    product.save(update_fields=['is_deleted', 'updated_at'])
    create_audit_log(request, 'soft_delete', 'Product', product.id, object_name=product.title, object_reference=product.slug)
    return Response({'message': 'Product soft deleted successfully.', 'soft_deleted': True})


def product_edit(request, product):
    """Apply an edit, moving Cloudinary images when the slug or colours change"""
    serializer = ProductWriteSerializer(data=request.data, context={'product': product})
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    old_slug, old_color = product.slug, product.color

    with transaction.atomic():
        summary = sync_product_images(product, data['slug'], data['colors'], request=request)
        for field, value in product_field_values(data, summary['incoming_colors']).items():
            setattr(product, field, value)
        product.save()

    changes = {}
    if old_slug != product.slug:
        changes['slug'] = {'from': old_slug, 'to': product.slug}
    if old_color != product.color:
        changes['color'] = {'from': old_color, 'to': product.color}
    create_audit_log(request, 'update', 'Product', product.id, object_name=product.title,
                     object_reference=product.slug, changes=changes)

    return Response({
        'message': 'Product updated successfully',
        'processed_colors': summary['processed_colors'],
        'color_changes': summary['color_changes'],
        'colors_deleted': summary['colors_deleted'],
        'colors_added': summary['colors_added'],
        'image_updates': summary['image_updates'],
    })


@api_view(['GET'])
@permission_classes([IsDashboardUser])
def product_orders(request, pk):
    """Orders that contain this product"""
    from sgtmake.orders.models import OrderItem

    product = get_object_or_404(Product, pk=pk)
    items = OrderItem.objects.filter(product=product).select_related('order', 'order__user').order_by('-order__order_date')
    return Response([
        {
            'order_id': item.order.order_id,
            'order_pk': item.order.id,
            'customer': item.order.user.display_name if item.order.user else None,
            'quantity': item.quantity,
            'price': item.line_total,
            'status': item.order.display_status,
            'order_date': item.order.order_date,
        }
        for item in items
    ])
