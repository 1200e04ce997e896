"""
Test suite for the service requests module
Tests: listing, filtering, status changes, file downloads, stats
"""
from datetime import timedelta
from unittest import mock

from django.core import mail
from django.core.cache import cache
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework import status

from sgtmake.core.cloudinary_service import MediaStorageError
from sgtmake.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import ServiceRequest


class ServiceListTests(TestCase):
    """Test listing and filtering service requests"""

    def setUp(self):
        self.admin = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.admin)
        self.customer = TestDataFactory.create_customer()

    def test_list_is_never_cached(self):
        """Test the list response disables caching"""
        TestDataFactory.create_service_request(user=self.customer)
        response = self.client.get('/api/v1/services/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['service_type'], 'batteryPack')
        self.assertIn('no-cache', response['Cache-Control'])

    def test_unknown_type_shown_as_other(self):
        """Test requests without a known type report 'other'"""
        service = TestDataFactory.create_service_request(service_type=None)
        self.assertEqual(service.service_type, 'other')

    def test_detail_includes_customer(self):
        service = TestDataFactory.create_service_request(user=self.customer)
        response = self.client.get(f'/api/v1/services/{service.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['user']['name'], 'Ravi Kumar')

    def test_filter_by_type_and_user(self):
        """Test filtering by service type and customer"""
        TestDataFactory.create_service_request(user=self.customer, service_type='batteryPack')
        TestDataFactory.create_service_request(user=self.customer, service_type='cnc-machining')
        TestDataFactory.create_service_request(service_type='batteryPack')

        response = self.client.get('/api/v1/services/filter/?type=batteryPack')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

        response = self.client.get(f'/api/v1/services/filter/?type=batteryPack&userId={self.customer.id}')
        self.assertEqual(len(response.data), 1)

    def test_filter_dates_are_inclusive(self):
        """Test start and end dates include the whole day"""
        old = TestDataFactory.create_service_request(user=self.customer)
        ServiceRequest.objects.filter(pk=old.pk).update(created_at=timezone.now() - timedelta(days=10))
        recent = TestDataFactory.create_service_request(user=self.customer)

        today = timezone.localdate().isoformat()
        response = self.client.get(f'/api/v1/services/filter/?startDate={today}&endDate={today}')
        self.assertEqual([s['id'] for s in response.data], [recent.id])

    def test_invalid_filter_date(self):
        response = self.client.get('/api/v1/services/filter/?startDate=yesterday')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_customer_cannot_list_services(self):
        client = AuthenticatedAPIClient().authenticate_user(self.customer)
        response = client.get('/api/v1/services/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


@override_settings(EMAIL_HOST_USER='services@sgtmake.com', EMAIL_HOST_PASSWORD='app-password')
class ServiceStatusTests(TestCase):
    """Test service request status changes"""

    def setUp(self):
        self.admin = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.admin)
        self.customer = TestDataFactory.create_customer(email='ravi@example.com')
        self.service = TestDataFactory.create_service_request(user=self.customer, service_type='wiringHarness')

    def test_status_update_emails_customer(self):
        """Test a status change saves and emails the customer"""
        response = self.client.patch(f'/api/v1/services/{self.service.id}/status/', {'status': 'production'},
                                     format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Status updated successfully')
        self.assertTrue(response.data['email']['success'])
        self.service.refresh_from_db()
        self.assertEqual(self.service.status, 'production')

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].subject, 'Your wiringHarness Is Now In Production - SGTMake')
        self.assertIn('SGTMAKE Services', mail.outbox[0].from_email)

    def test_status_required(self):
        response = self.client.patch(f'/api/v1/services/{self.service.id}/status/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Status is required')

    def test_invalid_status(self):
        response = self.client.patch(f'/api/v1/services/{self.service.id}/status/', {'status': 'placed'},
                                     format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid status')
        self.assertEqual(len(mail.outbox), 0)


class ServiceDownloadTests(TestCase):
    """Test download links for uploaded design files"""

    def setUp(self):
        self.admin = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.admin)

    def test_no_file(self):
        service = TestDataFactory.create_service_request()
        response = self.client.get(f'/api/v1/services/{service.id}/download/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'No file available for download')

    @mock.patch('sgtmake.core.cloudinary_service.build_download_url')
    def test_download_url(self, mock_build):
        """Test an attachment URL is generated for the file"""
        mock_build.return_value = 'https://res.cloudinary.com/demo/raw/upload/fl_attachment/services/design.pdf'
        service = TestDataFactory.create_service_request(file_public_id='services/design.pdf')
        response = self.client.get(f'/api/v1/services/{service.id}/download/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['download_url'], mock_build.return_value)
        self.assertEqual(response.data['file_type'], 'application/pdf')
        mock_build.assert_called_once_with('services/design.pdf')

    @mock.patch('sgtmake.core.cloudinary_service.build_download_url')
    def test_download_url_failure(self, mock_build):
        mock_build.side_effect = MediaStorageError('Cloudinary is not configured')
        service = TestDataFactory.create_service_request(file_public_id='services/design.pdf')
        response = self.client.get(f'/api/v1/services/{service.id}/download/')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['error'], 'Failed to generate download URL')


class ServiceStatsTests(TestCase):
    """Test service request statistics"""

    def setUp(self):
        cache.clear()
        self.admin = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.admin)

    def test_stats_by_type(self):
        """Test counts per type with unknown types counted as other"""
        TestDataFactory.create_service_request(service_type='batteryPack')
        TestDataFactory.create_service_request(service_type='batteryPack')
        TestDataFactory.create_service_request(service_type='laser-cutting')
        TestDataFactory.create_service_request(service_type='3d-printing')
        old = TestDataFactory.create_service_request(service_type=None)
        ServiceRequest.objects.filter(pk=old.pk).update(created_at=timezone.now() - timedelta(days=30))

        response = self.client.get('/api/v1/services/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_count'], 5)
        self.assertEqual(response.data['type_counts']['batteryPack'], 2)
        self.assertEqual(response.data['type_counts']['laser-cutting'], 1)
        self.assertEqual(response.data['type_counts']['designing'], 0)
        self.assertEqual(response.data['type_counts']['other'], 2)
        self.assertEqual(response.data['last_week_count'], 4)

    def test_stats_count_malformed_types_as_other(self):
        """Test list or dict types are counted as other"""
        TestDataFactory.create_service_request(service_type=['batteryPack', 'designing'])
        TestDataFactory.create_service_request(service_type={'name': 'pcb'})
        TestDataFactory.create_service_request(service_type='designing')

        response = self.client.get('/api/v1/services/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['type_counts']['other'], 2)
        self.assertEqual(response.data['type_counts']['designing'], 1)

    def test_stats_refresh_after_new_request(self):
        """Test a new request invalidates the cached stats"""
        TestDataFactory.create_service_request()
        response = self.client.get('/api/v1/services/stats/')
        self.assertEqual(response.data['total_count'], 1)

        with self.captureOnCommitCallbacks(execute=True):
            TestDataFactory.create_service_request()
        response = self.client.get('/api/v1/services/stats/')
        self.assertEqual(response.data['total_count'], 2)
