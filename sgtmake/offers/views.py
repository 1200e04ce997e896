"""
Storefront merchandising: the best deal, hero banners and marquee offers.

Images arrive as data URIs from the dashboard and are stored in Cloudinary;
rows keep only the public ids.
"""
import logging
import uuid

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from django.shortcuts import get_object_or_404

from sgtmake.core import cloudinary_service
from sgtmake.core.cloudinary_service import MediaStorageError
from sgtmake.core.permissions import IsDashboardUser, IsSuperAdmin
from sgtmake.core.utils import create_audit_log
from .models import BestDeal, HeroBanner, MarqueeOffer
from .serializers import (
    BestDealSerializer, HeroBannerSerializer, MarqueeOfferSerializer,
    BestDealValuesSerializer, HeroBannerValuesSerializer,
)

logger = logging.getLogger(__name__)

BEST_DEAL_FOLDER = 'banner'
HERO_BANNER_FOLDER = 'hero-banner'


def is_data_uri(value):
    return isinstance(value, str) and value.startswith('data:')


def upload_banner(data_uri, folder, public_id=None):
    """Returns the public id of the uploaded image"""
    return cloudinary_service.upload_image(data_uri, folder, public_id=public_id)['public_id']


def banner_name():
    return uuid.uuid4().hex[:11]


def invalid_data():
    return Response({'error': 'Invalid data format.'}, status=status.HTTP_400_BAD_REQUEST)


def upload_failed(e):
    logger.error(f"Banner image upload failed: {str(e)}")
    return Response({'error': 'Upload failed'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET'])
@permission_classes([IsDashboardUser])
def offer_list(request):
    """The current best deal, marquee offers and hero banners"""
    deal = BestDeal.objects.order_by('-created_at').first()
    return Response({
        'deal': BestDealSerializer(deal).data if deal else None,
        'offers': MarqueeOfferSerializer(MarqueeOffer.objects.all(), many=True).data,
        'banners': HeroBannerSerializer(HeroBanner.objects.all(), many=True).data,
    })


@api_view(['POST', 'PUT', 'DELETE'])
@permission_classes([IsSuperAdmin])
def best_deal(request):
    """
    POST `{values, imageUrl}` creates the deal, PUT `{id, values, imageUrl}` updates it
    and DELETE `?id=` removes it along with its image.
    """
    if request.method == 'DELETE':
        deal_id = request.query_params.get('id')
        if not deal_id:
            return Response({'error': 'Deal Id missing or invalid'}, status=status.HTTP_400_BAD_REQUEST)
        deal = get_object_or_404(BestDeal, pk=deal_id)
        cloudinary_service.safe_destroy(deal.image_public_id)
        deal.delete()
        create_audit_log(request, 'delete', 'BestDeal', deal_id, object_name=deal.title)
        return Response({'message': 'Best deal deleted successfully'})

    image = request.data.get('imageUrl')
    values = BestDealValuesSerializer(data=request.data.get('values') or {})
    if not image or not values.is_valid():
        return invalid_data()

    payload = {
        'title': values.validated_data['title'],
        'description': values.validated_data['description'],
        'price': values.validated_data['price'],
        'url': values.store_url(),
    }

    if request.method == 'POST':
        try:
            payload['image_public_id'] = upload_banner(image, BEST_DEAL_FOLDER)
        except MediaStorageError as e:
            return upload_failed(e)
        deal = BestDeal.objects.create(**payload)
        create_audit_log(request, 'create', 'BestDeal', deal.id, object_name=deal.title)
        return Response(BestDealSerializer(deal).data, status=status.HTTP_201_CREATED)

    # PUT
    if not request.data.get('id'):
        return invalid_data()
    deal = get_object_or_404(BestDeal, pk=request.data.get('id'))
    if is_data_uri(image):
        cloudinary_service.safe_destroy(deal.image_public_id)
        try:
            payload['image_public_id'] = upload_banner(image, BEST_DEAL_FOLDER)
        except MediaStorageError as e:
            return upload_failed(e)

    for field, value in payload.items():
        setattr(deal, field, value)
    deal.save()
    create_audit_log(request, 'update', 'BestDeal', deal.id, object_name=deal.title)
    return Response(BestDealSerializer(deal).data)


@api_view(['POST', 'PUT', 'DELETE'])
@permission_classes([IsSuperAdmin])
def hero_banner(request):
    """
    POST `{values, images: {image, imageSm}}` creates a banner, PUT `{id, values, images}`
    replaces whichever image is a new data URI and DELETE `?id=` removes both images.
    """
    if request.method == 'DELETE':
        banner_id = request.query_params.get('id')
        if not banner_id:
            return Response({'error': 'Banner Id missing or invalid'}, status=status.HTTP_400_BAD_REQUEST)
        banner = get_object_or_404(HeroBanner, pk=banner_id)
        cloudinary_service.safe_destroy(banner.image_public_id)
        cloudinary_service.safe_destroy(banner.image_public_id_sm)
        banner.delete()
        create_audit_log(request, 'delete', 'HeroBanner', banner_id, object_name=banner.title)
        return Response({'message': 'Hero banner deleted successfully'})

    images = request.data.get('images')
    values = HeroBannerValuesSerializer(data=request.data.get('values') or {})
    if not isinstance(images, dict) or not values.is_valid():
        return invalid_data()
    payload = values.model_values()

    if request.method == 'POST':
        if not images.get('image') or not images.get('imageSm'):
            return invalid_data()
        name = banner_name()
        try:
            payload['image_public_id'] = upload_banner(images['image'], HERO_BANNER_FOLDER, name)
            payload['image_public_id_sm'] = upload_banner(images['imageSm'], HERO_BANNER_FOLDER, name + 'Sm')
        except MediaStorageError as e:
            cloudinary_service.safe_destroy(payload.get('image_public_id'))
            return upload_failed(e)
        banner = HeroBanner.objects.create(**payload)
        create_audit_log(request, 'create', 'HeroBanner', banner.id, object_name=banner.title)
        return Response(HeroBannerSerializer(banner).data, status=status.HTTP_201_CREATED)

    # PUT
    if not request.data.get('id'):
        return invalid_data()
    banner = get_object_or_404(HeroBanner, pk=request.data.get('id'))
    name = banner_name()
    try:
        if is_data_uri(images.get('image')):
            cloudinary_service.safe_destroy(banner.image_public_id)
            payload['image_public_id'] = upload_banner(images['image'], HERO_BANNER_FOLDER, name)
        if is_data_uri(images.get('imageSm')):
            cloudinary_service.safe_destroy(banner.image_public_id_sm)
            payload['image_public_id_sm'] = upload_banner(images['imageSm'], HERO_BANNER_FOLDER, name + 'Sm')
    except MediaStorageError as e:
        return upload_failed(e)

    for field, value in payload.items():
        setattr(banner, field, value)
    banner.save()
    create_audit_log(request, 'update', 'HeroBanner', banner.id, object_name=banner.title)
    return Response(HeroBannerSerializer(banner).data)


@api_view(['POST'])
@permission_classes([IsSuperAdmin])
def marquee_offer_create(request):
    serializer = MarqueeOfferSerializer(data=request.data)
    if serializer.is_valid():
        offer = serializer.save()
        create_audit_log(request, 'create', 'MarqueeOffer', offer.id, object_name=offer.title)
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['DELETE'])
@permission_classes([IsSuperAdmin])
def marquee_offer_delete(request, pk):
    offer = get_object_or_404(MarqueeOffer, pk=pk)
    offer.delete()
    create_audit_log(request, 'delete', 'MarqueeOffer', pk, object_name=offer.title)
    return Response({'message': 'Offer deleted successfully'})
