"""
Test suite for the offers module
Tests: best deal, hero banners and marquee offers
"""
from unittest import mock

from django.test import TestCase
from rest_framework import status

from sgtmake.core.cloudinary_service import MediaStorageError
from sgtmake.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import BestDeal, HeroBanner, MarqueeOffer

DATA_URI = 'data:image/png;base64,iVBORw0KGgo='


def fake_upload(file, folder, public_id=None, **options):
    name = public_id or 'generated'
    return {'public_id': f'{folder}/{name}', 'url': f'https://res.cloudinary.com/demo/{folder}/{name}'}


@mock.patch('sgtmake.core.cloudinary_service.destroy_image')
@mock.patch('sgtmake.core.cloudinary_service.upload_image', side_effect=fake_upload)
class BestDealTests(TestCase):
    """Test the storefront best deal"""

    def setUp(self):
        self.superadmin = TestDataFactory.create_superadmin()
        self.client = AuthenticatedAPIClient().authenticate_user(self.superadmin)
        self.values = {
            'title': 'Festive Motor Deal',
            'description': 'Flat 20% off',
            'price': '4999.00',
            'slug': 'bldc-hub-motor',
            'id': '42',
        }

    def test_create_best_deal(self, mock_upload, mock_destroy):
        """Test the deal links to the product page and stores the image id"""
        response = self.client.post('/api/v1/offers/best-deal/', {
            'values': self.values, 'imageUrl': DATA_URI,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        deal = BestDeal.objects.get()
        self.assertEqual(deal.url, '/store/bldc-hub-motor?pid=42')
        self.assertEqual(deal.image_public_id, 'banner/generated')
        self.assertEqual(mock_upload.call_args[0][1], 'banner')

    def test_create_requires_image_and_values(self, mock_upload, mock_destroy):
        response = self.client.post('/api/v1/offers/best-deal/', {'values': self.values}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid data format.')
        mock_upload.assert_not_called()

    def test_update_keeps_existing_image_url(self, mock_upload, mock_destroy):
        """Test an unchanged image URL is not uploaded again"""
        deal = BestDeal.objects.create(title='Old', description='Old', price=100, url='/store/x?pid=1',
                                       image_public_id='banner/old')
        response = self.client.put('/api/v1/offers/best-deal/', {
            'id': deal.id, 'values': self.values, 'imageUrl': 'https://res.cloudinary.com/demo/banner/old',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        deal.refresh_from_db()
        self.assertEqual(deal.title, 'Festive Motor Deal')
        self.assertEqual(deal.image_public_id, 'banner/old')
        mock_upload.assert_not_called()
        mock_destroy.assert_not_called()

    def test_update_replaces_new_image(self, mock_upload, mock_destroy):
        """Test a new data URI replaces the old image"""
        deal = BestDeal.objects.create(title='Old', description='Old', price=100, url='/store/x?pid=1',
                                       image_public_id='banner/old')
        response = self.client.put('/api/v1/offers/best-deal/', {
            'id': deal.id, 'values': self.values, 'imageUrl': DATA_URI,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        mock_destroy.assert_called_once_with('banner/old')
        deal.refresh_from_db()
        self.assertEqual(deal.image_public_id, 'banner/generated')

    def test_upload_failure(self, mock_upload, mock_destroy):
        mock_upload.side_effect = MediaStorageError('quota exceeded')
        response = self.client.post('/api/v1/offers/best-deal/', {
            'values': self.values, 'imageUrl': DATA_URI,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['error'], 'Upload failed')
        self.assertFalse(BestDeal.objects.exists())

    def test_delete_best_deal(self, mock_upload, mock_destroy):
        deal = BestDeal.objects.create(title='Old', description='Old', price=100, url='/store/x?pid=1',
                                       image_public_id='banner/old')
        response = self.client.delete(f'/api/v1/offers/best-deal/?id={deal.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(BestDeal.objects.exists())
        mock_destroy.assert_called_once_with('banner/old')

    def test_delete_requires_id(self, mock_upload, mock_destroy):
        response = self.client.delete('/api/v1/offers/best-deal/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Deal Id missing or invalid')

    def test_admin_cannot_edit_deal(self, mock_upload, mock_destroy):
        """Test only super admins manage offers"""
        client = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_user(role='admin'))
        response = client.post('/api/v1/offers/best-deal/', {
            'values': self.values, 'imageUrl': DATA_URI,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


@mock.patch('sgtmake.core.cloudinary_service.destroy_image')
@mock.patch('sgtmake.core.cloudinary_service.upload_image', side_effect=fake_upload)
class HeroBannerTests(TestCase):
    """Test hero banners with desktop and mobile images"""

    def setUp(self):
        self.superadmin = TestDataFactory.create_superadmin()
        self.client = AuthenticatedAPIClient().authenticate_user(self.superadmin)
        self.values = {
            'title': 'E-Cycle Conversion Kit',
            'description': 'Convert any cycle',
            'basePrice': '15000',
            'offerPrice': '12999',
            'url': '/store/e-cycle-kit',
        }

    def test_create_banner_names_both_images(self, mock_upload, mock_destroy):
        """Test the small image shares the large image's name with an Sm suffix"""
        response = self.client.post('/api/v1/offers/hero-banner/', {
            'values': self.values, 'images': {'image': DATA_URI, 'imageSm': DATA_URI},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        banner = HeroBanner.objects.get()
        self.assertTrue(banner.image_public_id.startswith('hero-banner/'))
        self.assertEqual(banner.image_public_id_sm, banner.image_public_id + 'Sm')
        self.assertEqual(len(banner.image_public_id.split('/')[1]), 11)
        self.assertEqual(banner.offer_price, 12999)

    def test_create_requires_both_images(self, mock_upload, mock_destroy):
        response = self.client.post('/api/v1/offers/hero-banner/', {
            'values': self.values, 'images': {'image': DATA_URI},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(HeroBanner.objects.exists())

    def test_update_replaces_only_small_image(self, mock_upload, mock_destroy):
        """Test each image is replaced independently"""
        banner = HeroBanner.objects.create(title='Old', description='Old', base_price=1, offer_price=1,
                                           url='/store/x', image_public_id='hero-banner/abc',
                                           image_public_id_sm='hero-banner/abcSm')
        response = self.client.put('/api/v1/offers/hero-banner/', {
            'id': banner.id,
            'values': self.values,
            'images': {'image': 'https://res.cloudinary.com/demo/hero-banner/abc', 'imageSm': DATA_URI},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        banner.refresh_from_db()
        self.assertEqual(banner.image_public_id, 'hero-banner/abc')
        self.assertNotEqual(banner.image_public_id_sm, 'hero-banner/abcSm')
        mock_destroy.assert_called_once_with('hero-banner/abcSm')

    def test_update_replacing_both_images_keeps_sm_naming(self, mock_upload, mock_destroy):
        """Test replacing both images gives the small one the large one's name plus Sm"""
        banner = HeroBanner.objects.create(title='Old', description='Old', base_price=1, offer_price=1,
                                           url='/store/x', image_public_id='hero-banner/abc',
                                           image_public_id_sm='hero-banner/abcSm')
        response = self.client.put('/api/v1/offers/hero-banner/', {
            'id': banner.id,
            'values': self.values,
            'images': {'image': DATA_URI, 'imageSm': DATA_URI},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        banner.refresh_from_db()
        self.assertNotEqual(banner.image_public_id, 'hero-banner/abc')
        self.assertEqual(banner.image_public_id_sm, banner.image_public_id + 'Sm')
        self.assertEqual(mock_destroy.call_count, 2)

    def test_delete_banner_removes_both_images(self, mock_upload, mock_destroy):
        banner = HeroBanner.objects.create(title='Old', description='Old', base_price=1, offer_price=1,
                                           url='/store/x', image_public_id='hero-banner/abc',
                                           image_public_id_sm='hero-banner/abcSm')
        response = self.client.delete(f'/api/v1/offers/hero-banner/?id={banner.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_destroy.call_count, 2)
        self.assertFalse(HeroBanner.objects.exists())


class MarqueeOfferTests(TestCase):
    """Test marquee offers and the combined offers payload"""

    def setUp(self):
        self.superadmin = TestDataFactory.create_superadmin()
        self.client = AuthenticatedAPIClient().authenticate_user(self.superadmin)

    def test_create_and_delete_marquee_offer(self):
        response = self.client.post('/api/v1/offers/marquee/', {'title': 'Free shipping above ₹999'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        offer_id = response.data['id']
        response = self.client.delete(f'/api/v1/offers/marquee/{offer_id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(MarqueeOffer.objects.exists())

    def test_marquee_title_required(self):
        response = self.client.post('/api/v1/offers/marquee/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_offer_list(self):
        """Test dashboard users see the latest deal, offers and banners"""
        BestDeal.objects.create(title='Deal', description='d', price=10, url='/store/a?pid=1',
                                image_public_id='banner/a')
        MarqueeOffer.objects.create(title='Monsoon sale')
        client = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_user(role='guest'))
        response = client.get('/api/v1/offers/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['deal']['title'], 'Deal')
        self.assertEqual(len(response.data['offers']), 1)
        self.assertEqual(response.data['banners'], [])

    def test_offer_list_without_deal(self):
        response = self.client.get('/api/v1/offers/')
        self.assertIsNone(response.data['deal'])
