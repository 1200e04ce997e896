"""
Test suite for the quotes module
Tests: quote submission, admin listing, responses, status changes, stats
"""
from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.core import mail
from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from sgtmake.core.models import AuditLog
from sgtmake.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import QuoteRequest


class QuoteSubmissionTests(TestCase):
    """Test customers submitting quote requests"""

    def setUp(self):
        self.customer = TestDataFactory.create_customer(first_name='Ravi', last_name='Kumar')
        self.client = AuthenticatedAPIClient().authenticate_user(self.customer)

    def test_submit_quote_notifies_admin(self):
        """Test a quote request sums quantities and emails the admin team"""
        response = self.client.post('/api/v1/quotes/', {
            'items': [
                {'type': 'fastener', 'categoryId': '1', 'categoryName': 'Screws', 'title': 'Hex Screw',
                 'quantity': 100, 'specifications': {'size': 'M6'}},
                {'type': 'connector', 'categoryName': 'XT', 'title': 'XT60 Pair', 'quantity': 5},
            ],
            'notes': 'Need by next week',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        quote = QuoteRequest.objects.get()
        self.assertEqual(quote.user, self.customer)
        self.assertEqual(quote.total_items, 105)
        self.assertEqual(quote.status, 'pending')
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['admin@sgtmake.com'])
        self.assertIn('Ravi Kumar', mail.outbox[0].subject)

    def test_submit_requires_items(self):
        """Test an empty item list is rejected"""
        response = self.client.post('/api/v1/quotes/', {'items': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_submit_rejects_bad_items(self):
        """Test items need a known type and a positive quantity"""
        response = self.client.post('/api/v1/quotes/', {
            'items': [{'type': 'bolt', 'title': 'Bolt', 'quantity': 1}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post('/api/v1/quotes/', {
            'items': [{'type': 'wire', 'title': 'Wire', 'quantity': 0}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(QuoteRequest.objects.count(), 0)

    def test_customer_cannot_list_quotes(self):
        """Test the admin quote list is closed to customers"""
        response = self.client.get('/api/v1/admin/quotes/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class AdminQuoteListTests(TestCase):
    """Test the admin quote table"""

    def setUp(self):
        self.admin = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.admin)
        self.customer = TestDataFactory.create_customer(first_name='Meera', last_name='Iyer',
                                                        email='meera@example.com')

    def test_list_quotes_newest_first(self):
        """Test quotes are listed newest first with customer details"""
        older = TestDataFactory.create_quote(user=self.customer)
        QuoteRequest.objects.filter(pk=older.pk).update(created_at=timezone.now() - timedelta(days=2))
        newer = TestDataFactory.create_quote(user=self.customer)
        response = self.client.get('/api/v1/admin/quotes/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([q['id'] for q in response.data], [newer.id, older.id])
        self.assertEqual(response.data[0]['user_name'], 'Meera Iyer')
        self.assertEqual(response.data[0]['user_email'], 'meera@example.com')

    def test_filter_by_status_case_insensitive(self):
        """Test status filtering ignores case"""
        TestDataFactory.create_quote(user=self.customer, status='quoted')
        TestDataFactory.create_quote(user=self.customer, status='pending')
        response = self.client.get('/api/v1/admin/quotes/?status=QUOTED')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['status'], 'quoted')

    def test_search_by_email_and_id(self):
        """Test searching by customer email or quote id"""
        quote = TestDataFactory.create_quote(user=self.customer)
        TestDataFactory.create_quote()
        response = self.client.get('/api/v1/admin/quotes/?search=meera@')
        self.assertEqual(len(response.data), 1)
        response = self.client.get(f'/api/v1/admin/quotes/?search={quote.id}')
        self.assertIn(quote.id, [q['id'] for q in response.data])

    def test_paginated_list(self):
        """Test optional pagination"""
        for _ in range(3):
            TestDataFactory.create_quote(user=self.customer)
        response = self.client.get('/api/v1/admin/quotes/?page=2&limit=2')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 3)
        self.assertEqual(response.data['page'], 2)
        self.assertEqual(len(response.data['results']), 1)

    def test_quote_detail(self):
        """Test the detail view includes items and the customer's phone"""
        quote = TestDataFactory.create_quote(user=self.customer)
        response = self.client.get(f'/api/v1/admin/quotes/{quote.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['user_phone'], '9876543210')
        self.assertEqual(len(response.data['items']), 2)

    def test_quote_stats(self):
        """Test per-status counts and the total quoted value"""
        TestDataFactory.create_quote(user=self.customer, status='pending')
        TestDataFactory.create_quote(user=self.customer, status='quoted', quoted_price=Decimal('1500.00'))
        TestDataFactory.create_quote(user=self.customer, status='accepted', quoted_price=Decimal('2500.50'))
        response = self.client.get('/api/v1/admin/quotes/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total'], 3)
        self.assertEqual(response.data['pending'], 1)
        self.assertEqual(response.data['accepted'], 1)
        self.assertEqual(response.data['rejected'], 0)
        self.assertEqual(response.data['total_value'], Decimal('4000.50'))


class QuoteResponseTests(TestCase):
    """Test the admin responding to a quote"""

    def setUp(self):
        self.admin = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.admin)
        self.customer = TestDataFactory.create_customer(email='ravi@example.com')
        self.quote = TestDataFactory.create_quote(user=self.customer)

    def test_respond_sends_quote_email(self):
        """Test responding prices the quote, sets validity and emails the customer"""
        response = self.client.post(f'/api/v1/admin/quotes/{self.quote.id}/respond/', {
            'quotedPrice': '123456',
            'adminResponse': 'Bulk pricing applied',
            'status': 'QUOTED',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Quote response sent successfully')

        self.quote.refresh_from_db()
        self.assertEqual(self.quote.status, 'quoted')
        self.assertEqual(self.quote.quoted_price, Decimal('123456'))
        self.assertTrue(self.quote.email_sent)
        self.assertAlmostEqual(self.quote.valid_until, timezone.now() + timedelta(days=30),
                               delta=timedelta(minutes=1))

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['ravi@example.com'])
        self.assertEqual(mail.outbox[0].subject, 'Your Quote is Ready - ₹1,23,456 | SGTMake')
        self.assertTrue(AuditLog.objects.filter(action='quote_response', object_id=str(self.quote.id)).exists())

    def test_respond_requires_all_fields(self):
        """Test missing fields are rejected"""
        response = self.client.post(f'/api/v1/admin/quotes/{self.quote.id}/respond/', {
            'quotedPrice': '1000',
            'status': 'quoted',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Missing required fields')

    @mock.patch('sgtmake.notifications.email_service.send_html_email')
    def test_email_failure_does_not_fail_response(self, mock_send):
        """Test an SMTP failure leaves email_sent unset but saves the response"""
        mock_send.side_effect = OSError('SMTP down')
        response = self.client.post(f'/api/v1/admin/quotes/{self.quote.id}/respond/', {
            'quotedPrice': '999.99',
            'adminResponse': 'Price includes shipping',
            'status': 'quoted',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.quote.refresh_from_db()
        self.assertEqual(self.quote.status, 'quoted')
        self.assertFalse(self.quote.email_sent)

    def test_respond_to_missing_quote(self):
        """Test responding to an unknown quote"""
        response = self.client.post('/api/v1/admin/quotes/99999/respond/', {
            'quotedPrice': '1', 'adminResponse': 'x', 'status': 'quoted',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class QuoteStatusTests(TestCase):
    """Test quote status changes"""

    def setUp(self):
        self.admin = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.admin)
        self.customer = TestDataFactory.create_customer(email='ravi@example.com')
        self.quote = TestDataFactory.create_quote(user=self.customer, status='quoted',
                                                  quoted_price=Decimal('4500.00'))

    def test_accepting_notifies_customer_and_admin(self):
        """Test acceptance emails both the customer and the admin team"""
        response = self.client.post(f'/api/v1/admin/quotes/{self.quote.id}/status/', {'status': 'ACCEPTED'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Quote status updated successfully')
        self.quote.refresh_from_db()
        self.assertEqual(self.quote.status, 'accepted')
        self.assertTrue(self.quote.response_received)

        subjects = [message.subject for message in mail.outbox]
        self.assertIn('Quote Status Update - ACCEPTED | SGTMake', subjects)
        self.assertIn('Quote Accepted - ₹4,500 | Ravi Kumar', subjects)

    def test_pending_does_not_mark_response_received(self):
        """Test only accepted or rejected count as a customer response"""
        self.client.post(f'/api/v1/admin/quotes/{self.quote.id}/status/', {'status': 'pending'}, format='json')
        self.quote.refresh_from_db()
        self.assertFalse(self.quote.response_received)
        self.assertEqual(len(mail.outbox), 1)

    def test_status_required(self):
        """Test a status must be given"""
        response = self.client.post(f'/api/v1/admin/quotes/{self.quote.id}/status/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Status is required')

    def test_invalid_status(self):
        """Test unknown statuses are rejected"""
        response = self.client.post(f'/api/v1/admin/quotes/{self.quote.id}/status/', {'status': 'shipped'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid status')
