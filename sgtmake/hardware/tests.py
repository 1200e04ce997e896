"""
Test suite for the hardware module
Tests: fastener, connector and wire categories and their options
"""
from unittest import mock

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from rest_framework import status

from sgtmake.core import cloudinary_service
from sgtmake.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import PartCategory, PartOption


class FastenerCategoryTests(TestCase):
    """Test fastener category endpoints"""

    def setUp(self):
        self.admin = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.admin)

    def test_list_fastener_categories_with_options(self):
        """Test only fastener categories are listed, with their options"""
        category = TestDataFactory.create_part_category(kind='fastener', name='Screws')
        TestDataFactory.create_part_option(category)
        TestDataFactory.create_part_category(kind='wire', name='Silicone Wire')
        response = self.client.get('/api/v1/admin/fasteners/categories/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['name'], 'Screws')
        self.assertEqual(len(response.data[0]['options']), 1)

    @mock.patch('sgtmake.core.cloudinary_service.upload_image')
    def test_create_fastener_category_with_image(self, mock_upload):
        """Test creating a category uploads its image to the fastener folder"""
        mock_upload.return_value = {'public_id': 'fastener-categories/abc', 'url': 'https://cdn/abc'}
        image = SimpleUploadedFile('nuts.png', b'png-bytes', content_type='image/png')
        response = self.client.post('/api/v1/admin/fasteners/categories/', {
            'name': 'Nuts',
            'description': 'Hex and lock nuts',
            'isActive': 'true',
            'image': image,
        }, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['image'], 'fastener-categories/abc')
        self.assertEqual(mock_upload.call_args.args[1], 'fastener-categories')

    @mock.patch('sgtmake.core.cloudinary_service.upload_image')
    def test_failed_image_upload_still_creates_category(self, mock_upload):
        """Test an upload failure leaves the category without an image"""
        mock_upload.side_effect = cloudinary_service.MediaStorageError('down')
        image = SimpleUploadedFile('nuts.png', b'png-bytes', content_type='image/png')
        response = self.client.post('/api/v1/admin/fasteners/categories/', {'name': 'Nuts', 'image': image},
                                    format='multipart')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(response.data['image'])

    def test_create_requires_name(self):
        """Test a fastener category needs a name"""
        response = self.client.post('/api/v1/admin/fasteners/categories/', {'name': '  '}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Name is required')

    @mock.patch('sgtmake.core.cloudinary_service.destroy_image')
    def test_delete_category_removes_image_and_options(self, mock_destroy):
        """Test deleting a category deletes its image and options"""
        category = TestDataFactory.create_part_category(kind='fastener', image='fastener-categories/old')
        TestDataFactory.create_part_option(category)
        response = self.client.delete(f'/api/v1/admin/fasteners/categories/{category.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Category deleted successfully')
        mock_destroy.assert_called_once_with('fastener-categories/old')
        self.assertFalse(PartOption.objects.exists())
        self.assertFalse(PartCategory.objects.filter(pk=category.id).exists())

    def test_fastener_route_does_not_serve_connectors(self):
        """Test a connector category is not reachable through fastener routes"""
        connector = TestDataFactory.create_part_category(kind='connector')
        response = self.client.get(f'/api/v1/admin/fasteners/categories/{connector.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_customer_is_forbidden(self):
        """Test customers cannot manage hardware categories"""
        client = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_customer())
        response = client.get('/api/v1/admin/fasteners/categories/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class ConnectorCategoryTests(TestCase):
    """Test connector and wire category endpoints"""

    def setUp(self):
        self.admin = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.admin)

    def test_create_wire_category(self):
        """Test `type=wires` creates a wire category"""
        response = self.client.post('/api/v1/admin/connectors/categories/', {
            'name': 'Silicone Wire',
            'type': 'wires',
        }, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['kind'], 'wire')

    def test_create_requires_type(self):
        """Test connector categories need a type"""
        response = self.client.post('/api/v1/admin/connectors/categories/', {'name': 'XT60'}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Name and type are required')

    def test_list_by_type(self):
        """Test listing connectors and wires separately"""
        TestDataFactory.create_part_category(kind='connector', name='XT60')
        TestDataFactory.create_part_category(kind='wire', name='PVC Wire')
        response = self.client.get('/api/v1/admin/connectors/categories/?type=wires')
        self.assertEqual([c['name'] for c in response.data], ['PVC Wire'])
        response = self.client.get('/api/v1/admin/connectors/categories/?type=connectors')
        self.assertEqual([c['name'] for c in response.data], ['XT60'])

    def test_update_category(self):
        """Test updating a connector category's fields"""
        category = TestDataFactory.create_part_category(kind='connector', name='XT60')
        response = self.client.put(f'/api/v1/admin/connectors/categories/{category.id}/', {
            'name': 'XT90',
            'isActive': 'false',
        }, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        category.refresh_from_db()
        self.assertEqual(category.name, 'XT90')
        self.assertFalse(category.is_active)


class PartOptionTests(TestCase):
    """Test part option endpoints"""

    def setUp(self):
        self.admin = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.admin)
        self.category = TestDataFactory.create_part_category(kind='fastener', name='Screws')

    def test_create_option(self):
        """Test adding an option with values"""
        response = self.client.post(f'/api/v1/admin/fasteners/categories/{self.category.id}/options/', {
            'name': 'thread',
            'label': 'Thread Size',
            'type': 'select',
            'required': True,
            'helpText': 'Metric thread',
            'values': [{'value': 'M3'}, {'value': 'M4'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        option = PartOption.objects.get(pk=response.data['id'])
        self.assertEqual(option.category, self.category)
        self.assertEqual(option.help_text, 'Metric thread')
        self.assertEqual(len(option.values), 2)

    def test_create_option_requires_name_and_label(self):
        """Test options need a name and a label"""
        response = self.client.post(f'/api/v1/admin/fasteners/categories/{self.category.id}/options/',
                                    {'name': 'thread'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Name and label are required')

    def test_create_option_rejects_blank_values(self):
        """Test each option value needs a non-empty value"""
        response = self.client.post(f'/api/v1/admin/fasteners/categories/{self.category.id}/options/', {
            'name': 'thread',
            'label': 'Thread Size',
            'values': [{'value': ''}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    @mock.patch('sgtmake.core.cloudinary_service.destroy_image')
    def test_delete_option_removes_value_images(self, mock_destroy):
        """Test deleting an option deletes the images of its values"""
        option = TestDataFactory.create_part_option(self.category, values=[
            {'value': 'Pan', 'image': 'https://cdn/pan.png', 'publicId': 'fastener-options/pan'},
            {'value': 'Flat'},
        ])
        response = self.client.delete(f'/api/v1/admin/fasteners/options/{option.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        mock_destroy.assert_called_once_with('fastener-options/pan')
        self.assertFalse(PartOption.objects.filter(pk=option.id).exists())

    def test_update_option(self):
        """Test partially updating an option"""
        option = TestDataFactory.create_part_option(self.category)
        response = self.client.put(f'/api/v1/admin/fasteners/options/{option.id}/', {'label': 'Size (mm)'},
                                   format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        option.refresh_from_db()
        self.assertEqual(option.label, 'Size (mm)')
