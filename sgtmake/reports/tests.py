"""
Test suite for the dashboard statistics endpoint
"""
from django.core.cache import cache
from django.test import TestCase
from rest_framework import status

from sgtmake.core.test_utils import TestDataFactory, AuthenticatedAPIClient


class AdminStatsTests(TestCase):
    """Test headline counts and recent activity"""

    def setUp(self):
        cache.clear()
        self.admin = TestDataFactory.create_user(role='guest')
        self.client = AuthenticatedAPIClient().authenticate_user(self.admin)

    def test_stats_counts(self):
        """Test counts skip deleted products and non-pending requests"""
        TestDataFactory.create_product()
        deleted = TestDataFactory.create_product()
        deleted.is_deleted = True
        deleted.save()
        customer = TestDataFactory.create_customer(first_name='Sana', last_name='Shaikh')
        TestDataFactory.create_quote(user=customer)
        TestDataFactory.create_quote(user=customer, status='quoted')
        TestDataFactory.create_service_request(user=customer, service_type='designing')
        TestDataFactory.create_order(user=customer)

        response = self.client.get('/api/v1/admin/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_products'], 1)
        self.assertEqual(response.data['pending_quotes'], 1)
        self.assertEqual(response.data['pending_services'], 1)
        self.assertEqual(response.data['total_orders'], 1)
        self.assertEqual(len(response.data['recent_quotes']), 2)
        self.assertEqual(response.data['recent_quotes'][0]['customer_name'], 'Sana Shaikh')
        self.assertEqual(response.data['recent_services'][0]['service_type'], 'designing')

    def test_recent_activity_is_limited(self):
        for _ in range(7):
            TestDataFactory.create_service_request()
        response = self.client.get('/api/v1/admin/stats/')
        self.assertEqual(len(response.data['recent_services']), 5)

    def test_stats_cache_invalidated_on_change(self):
        """Test a new quote drops the cached stats once committed"""
        response = self.client.get('/api/v1/admin/stats/')
        self.assertEqual(response.data['pending_quotes'], 0)

        TestDataFactory.create_quote()
        response = self.client.get('/api/v1/admin/stats/')
        self.assertEqual(response.data['pending_quotes'], 0)

        with self.captureOnCommitCallbacks(execute=True):
            TestDataFactory.create_quote()
        response = self.client.get('/api/v1/admin/stats/')
        self.assertEqual(response.data['pending_quotes'], 2)

    def test_customer_forbidden(self):
        client = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_customer())
        response = client.get('/api/v1/admin/stats/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
