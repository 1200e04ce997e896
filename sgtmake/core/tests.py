"""
Test suite for the core module
Tests: authentication, roles, customers, audit logs, uploads, Cloudinary helpers, cache utilities
"""
from io import StringIO
from unittest import mock

from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import call_command
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from sgtmake.catalog.models import Category
from sgtmake.hardware.models import PartCategory
from sgtmake.core import cloudinary_service
from sgtmake.core.cache_utils import cached_query, make_cache_key
from sgtmake.core.models import AuditLog
from sgtmake.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from sgtmake.core.utils import create_audit_log


class AuthenticationTests(TestCase):
    """Test JWT login, refresh and the current user endpoint"""

    def setUp(self):
        self.user = TestDataFactory.create_user(username='dashboard_admin', password='testpass123')
        self.client = APIClient()

    def test_login_returns_token_pair_and_user(self):
        """Test login returns access/refresh tokens with the user payload"""
        response = self.client.post('/api/v1/auth/login/', {
            'username': 'dashboard_admin',
            'password': 'testpass123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['role'], 'admin')

    def test_login_rejects_wrong_password(self):
        """Test login with a wrong password"""
        response = self.client.post('/api/v1/auth/login/', {
            'username': 'dashboard_admin',
            'password': 'wrong',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_rejects_inactive_user(self):
        """Test inactive users cannot log in"""
        self.user.is_active = False
        self.user.save()
        response = self.client.post('/api/v1/auth/login/', {
            'username': 'dashboard_admin',
            'password': 'testpass123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh_token(self):
        """Test a refresh token yields a new access token"""
        login = self.client.post('/api/v1/auth/login/', {
            'username': 'dashboard_admin',
            'password': 'testpass123',
        }, format='json')
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': login.data['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_refresh_with_garbage_token(self):
        """Test an invalid refresh token is rejected"""
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': 'not-a-token'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_reports_dashboard_access(self):
        """Test the current user endpoint includes access flags"""
        client = AuthenticatedAPIClient().authenticate_user(self.user)
        response = client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], 'dashboard_admin')
        self.assertTrue(response.data['can_access_dashboard'])
        self.assertFalse(response.data['is_superadmin'])

    def test_me_requires_authentication(self):
        """Test anonymous requests are rejected"""
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class RoleTests(TestCase):
    """Test role properties and dashboard permissions"""

    def test_superuser_counts_as_superadmin(self):
        """Test Django superusers are super admins regardless of role"""
        user = TestDataFactory.create_user(role='customer', is_superuser=True)
        self.assertTrue(user.is_superadmin)
        self.assertTrue(user.is_dashboard_user)

    def test_customer_is_not_dashboard_user(self):
        """Test customers have no dashboard access"""
        customer = TestDataFactory.create_customer()
        self.assertFalse(customer.is_dashboard_user)
        client = AuthenticatedAPIClient().authenticate_user(customer)
        response = client.get('/api/v1/customers/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_guest_can_read_dashboard(self):
        """Test the guest role can use read-only dashboard endpoints"""
        guest = TestDataFactory.create_user(role='guest')
        client = AuthenticatedAPIClient().authenticate_user(guest)
        response = client.get('/api/v1/customers/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_display_name_falls_back_to_username(self):
        """Test display name uses the full name when present"""
        user = TestDataFactory.create_user(username='plainuser')
        self.assertEqual(user.display_name, 'plainuser')
        named = TestDataFactory.create_user(first_name='Asha', last_name='Rao')
        self.assertEqual(named.display_name, 'Asha Rao')


class UserManagementTests(TestCase):
    """Test staff-only user management"""

    def setUp(self):
        self.staff = TestDataFactory.create_user(is_staff=True)
        self.client = AuthenticatedAPIClient().authenticate_user(self.staff)

    def test_list_users_filtered_by_role(self):
        """Test listing users by role"""
        TestDataFactory.create_customer()
        response = self.client.get('/api/v1/users/?role=customer')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['role'], 'customer')

    def test_create_user(self):
        """Test creating a dashboard user"""
        response = self.client.post('/api/v1/users/', {
            'username': 'new_guest',
            'email': 'guest@test.com',
            'password': 'Sgt!Make#2025x',
            'password_confirm': 'Sgt!Make#2025x',
            'role': 'guest',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['role'], 'guest')

    def test_non_staff_cannot_manage_users(self):
        """Test admins without staff status cannot manage users"""
        client = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_user())
        response = client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_role_change_is_audited(self):
        guest = TestDataFactory.create_user(role='guest')
        response = self.client.patch(f'/api/v1/users/{guest.id}/', {'role': 'admin'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        log = AuditLog.objects.get(model_name='User', object_id=str(guest.id))
        self.assertEqual(log.changes['role'], {'old': 'guest', 'new': 'admin'})

    def test_cannot_delete_own_account(self):
        response = self.client.delete(f'/api/v1/users/{self.staff.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.delete(f'/api/v1/users/{TestDataFactory.create_customer().id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)


class CustomerTests(TestCase):
    """Test customer endpoints"""

    def setUp(self):
        self.admin = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.admin)
        self.customer = TestDataFactory.create_customer(first_name='Meera', last_name='Iyer')

    def test_list_customers_with_order_counts(self):
        """Test customers are listed with their order counts"""
        TestDataFactory.create_order(user=self.customer)
        TestDataFactory.create_order(user=self.customer)
        response = self.client.get('/api/v1/customers/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['orders_count'], 2)

    def test_search_customers(self):
        """Test customer search by name"""
        TestDataFactory.create_customer(first_name='Arjun', last_name='Shah')
        response = self.client.get('/api/v1/customers/?search=meera')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_customer_detail_lists_orders(self):
        """Test customer detail includes the orders they placed"""
        order = TestDataFactory.create_order(user=self.customer, status='placed')
        response = self.client.get(f'/api/v1/customers/{self.customer.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['orders_count'], 1)
        self.assertEqual(response.data['orders'][0]['oid'], order.order_id)
        self.assertEqual(response.data['orders'][0]['status'], 'pending')

    def test_customer_addresses(self):
        """Test listing a customer's addresses"""
        TestDataFactory.create_address(self.customer)
        response = self.client.get(f'/api/v1/customers/{self.customer.id}/addresses/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['city'], 'Bengaluru')

    def test_staff_addresses_not_listed_as_customer(self):
        """Test the customer address lookup ignores staff accounts"""
        TestDataFactory.create_address(self.admin)
        response = self.client.get(f'/api/v1/customers/{self.admin.id}/addresses/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        response = self.client.get(f'/api/v1/customers/{self.admin.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class AuditLogTests(TestCase):
    """Test audit log helper and endpoints"""

    def setUp(self):
        self.admin = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.admin)

    def test_create_audit_log_skips_missing_fields(self):
        """Test audit logs need an action, model and object id"""
        self.assertIsNone(create_audit_log(action='update', model_name='Product'))
        self.assertEqual(AuditLog.objects.count(), 0)

    def test_create_audit_log_with_user(self):
        """Test creating an audit log for a user"""
        log = create_audit_log(action='delete', model_name='Product', object_id=5, user=self.admin,
                               object_name='Cell Holder')
        self.assertEqual(log.object_id, '5')
        self.assertEqual(log.user, self.admin)

    def test_non_staff_only_see_own_logs(self):
        """Test admins without staff status only see their own entries"""
        other = TestDataFactory.create_user()
        create_audit_log(action='create', model_name='Category', object_id=1, user=self.admin)
        create_audit_log(action='create', model_name='Category', object_id=2, user=other)
        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_filter_logs_by_action(self):
        """Test filtering audit logs by action"""
        superadmin = TestDataFactory.create_superadmin()
        create_audit_log(action='create', model_name='Category', object_id=1, user=superadmin)
        create_audit_log(action='delete', model_name='Category', object_id=1, user=superadmin)
        client = AuthenticatedAPIClient().authenticate_user(superadmin)
        response = client.get('/api/v1/audit-logs/?action=delete')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['action'], 'delete')

    def test_logs_filtered_by_model_and_paginated(self):
        """Test filtering by model name with a paginated response"""
        superadmin = TestDataFactory.create_superadmin()
        for object_id in range(3):
            create_audit_log(action='update', model_name='Product', object_id=object_id + 1, user=superadmin)
        create_audit_log(action='update', model_name='Order', object_id=9, user=superadmin)
        client = AuthenticatedAPIClient().authenticate_user(superadmin)
        response = client.get('/api/v1/audit-logs/?model=Product&page=1&limit=2')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 3)
        self.assertEqual(len(response.data['results']), 2)

    def test_invalid_action_filter(self):
        response = self.client.get('/api/v1/audit-logs/?action=explode')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class UploadTests(TestCase):
    """Test the category and editor image upload endpoints"""

    def setUp(self):
        self.admin = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.admin)

    @mock.patch('sgtmake.core.cloudinary_service.upload_image')
    def test_upload_category_image(self, mock_upload):
        """Test uploading converts to webp with the requested size"""
        mock_upload.return_value = {'public_id': 'sgtmake/categories/abc', 'url': 'https://cdn/abc.webp'}
        image = SimpleUploadedFile('photo.jpg', b'fake-image-bytes', content_type='image/jpeg')
        response = self.client.post('/api/v1/upload/', {'file': image, 'width': '400', 'height': '300'},
                                    format='multipart')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['public_id'], 'sgtmake/categories/abc')
        kwargs = mock_upload.call_args.kwargs
        self.assertEqual(kwargs['format'], 'webp')
        self.assertEqual(kwargs['transformation'][0]['width'], 400)
        self.assertEqual(kwargs['transformation'][0]['crop'], 'fill')
        log = AuditLog.objects.get(action='image_upload')
        self.assertEqual(log.object_reference, 'sgtmake/categories/abc')
        self.assertEqual(log.user, self.admin)

    def test_upload_without_file(self):
        """Test uploading without a file"""
        response = self.client.post('/api/v1/upload/', {}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    @mock.patch('sgtmake.core.cloudinary_service.upload_image')
    def test_upload_failure_returns_500(self, mock_upload):
        """Test a Cloudinary failure is reported as an upload failure"""
        mock_upload.side_effect = cloudinary_service.MediaStorageError('boom')
        image = SimpleUploadedFile('photo.jpg', b'fake-image-bytes', content_type='image/jpeg')
        response = self.client.post('/api/v1/upload/', {'file': image}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['error'], 'Upload failed')

    @mock.patch('sgtmake.core.cloudinary_service.destroy_image')
    def test_delete_uploaded_image(self, mock_destroy):
        """Test deleting an uploaded image by public id"""
        response = self.client.delete('/api/v1/upload/?publicId=sgtmake/categories/abc')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        mock_destroy.assert_called_once_with('sgtmake/categories/abc')
        self.assertTrue(AuditLog.objects.filter(action='image_delete', object_reference='sgtmake/categories/abc').exists())

    def test_delete_requires_public_id(self):
        """Test deleting without a public id"""
        response = self.client.delete('/api/v1/upload/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    @mock.patch('sgtmake.core.cloudinary_service.upload_image')
    def test_editor_upload_uses_filename_stem(self, mock_upload):
        """Test the editor upload names the image after the sent filename"""
        mock_upload.return_value = {'public_id': 'sgtmake/editor/diagram', 'url': 'https://cdn/diagram.webp'}
        response = self.client.post('/api/v1/editor/upload/', data=b'raw-bytes', content_type='image/png',
                                    HTTP_X_VERCEL_FILENAME='diagram.png')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(mock_upload.call_args.kwargs['public_id'], 'diagram')
        self.assertEqual(response.data['content_type'], 'image/png')
        self.assertEqual(AuditLog.objects.get(action='image_upload').object_name, 'diagram.png')


class CloudinaryServiceTests(TestCase):
    """Test Cloudinary wrapper helpers"""

    def test_is_raw_file(self):
        """Test documents and archives are raw resources"""
        self.assertTrue(cloudinary_service.is_raw_file('services/design.PDF'))
        self.assertTrue(cloudinary_service.is_raw_file('services/bom.xlsx'))
        self.assertFalse(cloudinary_service.is_raw_file('services/photo.png'))
        self.assertFalse(cloudinary_service.is_raw_file(None))

    def test_safe_destroy_without_public_id(self):
        """Test nothing is deleted for an empty public id"""
        self.assertFalse(cloudinary_service.safe_destroy(None))

    @mock.patch('sgtmake.core.cloudinary_service.destroy_image')
    def test_safe_destroy_swallows_errors(self, mock_destroy):
        """Test failures are logged instead of raised"""
        mock_destroy.side_effect = cloudinary_service.MediaStorageError('gone')
        self.assertFalse(cloudinary_service.safe_destroy('products/x/red/0'))

    @mock.patch('sgtmake.core.cloudinary_service.cloudinary.api.delete_resources')
    def test_delete_resources_in_batches(self, mock_delete):
        """Test bulk deletes are sent in batches of 100"""
        mock_delete.return_value = {'deleted': {}}
        cloudinary_service.delete_resources([f'id{i}' for i in range(250)])
        self.assertEqual(mock_delete.call_count, 3)
        self.assertEqual(len(mock_delete.call_args_list[0].args[0]), 100)
        self.assertEqual(len(mock_delete.call_args_list[2].args[0]), 50)


class CacheUtilsTests(TestCase):
    """Test the cached_query decorator"""

    def setUp(self):
        cache.clear()

    def test_cached_query_reuses_result(self):
        """Test the wrapped function only runs on a cache miss"""
        calls = []

        @cached_query(cache_ttl=60, key_prefix='test_stats')
        def expensive():
            calls.append(1)
            return {'value': len(calls)}

        self.assertEqual(expensive(), {'value': 1})
        self.assertEqual(expensive(), {'value': 1})
        self.assertEqual(len(calls), 1)

        cache.delete(make_cache_key('test_stats'))
        self.assertEqual(expensive(), {'value': 2})


class SeedCatalogCommandTests(TestCase):
    """Test the seed_catalog management command"""

    def test_seed_is_idempotent(self):
        """Test running the seed twice creates nothing new"""
        call_command('seed_catalog', stdout=StringIO())
        categories = Category.objects.count()
        parts = PartCategory.objects.count()
        self.assertGreater(categories, 0)
        self.assertTrue(PartCategory.objects.filter(kind='wire').exists())

        call_command('seed_catalog', stdout=StringIO())
        self.assertEqual(Category.objects.count(), categories)
        self.assertEqual(PartCategory.objects.count(), parts)

    def test_clear_keeps_categories_with_products(self):
        """Test --clear keeps categories still referenced by products"""
        category = TestDataFactory.create_category(name='Legacy')
        TestDataFactory.create_product(category=category)
        TestDataFactory.create_part_category(name='Old Part')
        call_command('seed_catalog', '--clear', stdout=StringIO())
        self.assertTrue(Category.objects.filter(name='Legacy').exists())
        self.assertFalse(PartCategory.objects.filter(name='Old Part').exists())
