"""
Test suite for email formatting, status copy and the notification helpers
"""
from datetime import date
from decimal import Decimal

from django.core import mail
from django.test import TestCase, override_settings

from sgtmake.core.test_utils import TestDataFactory
from .email_service import send_order_status_email, send_service_status_email, build_order_summary
from .formatting import format_amount, format_inr, format_long_date, group_indian
from .status_info import (
    get_order_status_info, get_service_status_info, get_quote_status_info, get_order_timeline,
)


class FormattingTests(TestCase):
    """Test Indian currency and date formatting"""

    def test_group_indian(self):
        self.assertEqual(group_indian('999'), '999')
        self.assertEqual(group_indian('1000'), '1,000')
        self.assertEqual(group_indian('123456'), '1,23,456')
        self.assertEqual(group_indian('12345678'), '1,23,45,678')

    def test_format_amount(self):
        """Test trailing zero decimals are dropped"""
        self.assertEqual(format_amount(4500), '4,500')
        self.assertEqual(format_amount(Decimal('4500.50')), '4,500.5')
        self.assertEqual(format_amount(None), '0')
        self.assertEqual(format_amount(-1250), '-1,250')

    def test_format_inr(self):
        self.assertEqual(format_inr(Decimal('123456')), '₹1,23,456.00')
        self.assertEqual(format_inr('99.999'), '₹100.00')
        self.assertEqual(format_inr('not a number'), '₹0.00')

    def test_format_long_date(self):
        self.assertEqual(format_long_date(date(2025, 3, 5)), '5 March 2025')
        self.assertEqual(format_long_date(None), '')


class StatusInfoTests(TestCase):
    """Test the status copy used in emails"""

    def test_order_status_info(self):
        info = get_order_status_info('shipped', 'SGT250305ABC123')
        self.assertEqual(info['label'], 'Shipped')
        self.assertEqual(info['progress'], 75)
        self.assertEqual(info['subject'], 'Your Order #SGT250305ABC123 Has Been Shipped - SGTMake')

    def test_unknown_order_status_falls_back(self):
        info = get_order_status_info('returned', 'SGT1')
        self.assertEqual(info['label'], 'returned')
        self.assertEqual(info['subject'], 'Update on Your Order #SGT1 - SGTMake')
        self.assertEqual(info['color'], '#757575')

    def test_service_status_info(self):
        info = get_service_status_info('approved', 'batteryPack')
        self.assertEqual(info['label'], 'Review & Approved')
        self.assertIn('batteryPack', info['message'])

    def test_quote_status_info(self):
        self.assertEqual(get_quote_status_info('accepted')['title'], 'Quote Accepted')
        self.assertEqual(get_quote_status_info('expired')['title'], 'Quote Updated')

    def test_order_timeline(self):
        """Test timeline steps complete as the order progresses"""
        self.assertEqual(get_order_timeline('cancelled'), [])
        pending = [step['completed'] for step in get_order_timeline('pending')]
        self.assertEqual(pending, [True, False, False, False])
        shipped = [step['completed'] for step in get_order_timeline('shipped')]
        self.assertEqual(shipped, [True, True, True, False])


class NotificationEmailTests(TestCase):
    """Test the preconditions of customer status emails"""

    def test_order_email_without_user_email(self):
        order = TestDataFactory.create_order(user=TestDataFactory.create_customer(email=''))
        result = send_order_status_email(order, 'shipped')
        self.assertEqual(result, {'success': False, 'message': 'No email address found for user'})

    @override_settings(EMAIL_HOST_USER='', EMAIL_HOST_PASSWORD='')
    def test_order_email_not_configured(self):
        order = TestDataFactory.create_order()
        result = send_order_status_email(order, 'shipped')
        self.assertEqual(result['message'], 'Email service not configured')
        self.assertEqual(len(mail.outbox), 0)

    @override_settings(EMAIL_HOST_USER='services@sgtmake.com', EMAIL_HOST_PASSWORD='app-password')
    def test_service_email_html_body(self):
        """Test the service email is sent with an HTML alternative"""
        service = TestDataFactory.create_service_request(service_type='laser-cutting')
        result = send_service_status_email(service, 'shipped')
        self.assertTrue(result['success'])
        message = mail.outbox[0]
        self.assertEqual(message.subject, 'Your laser-cutting Has Been Shipped - SGTMake')
        self.assertEqual(message.alternatives[0][1], 'text/html')

    def test_order_summary_discount(self):
        """Test the subtotal uses base prices and the discount is the saving"""
        order = TestDataFactory.create_order(total=Decimal('1600.00'))
        TestDataFactory.create_order_item(order, quantity=2)
        summary = build_order_summary(order)
        self.assertEqual(summary['subtotal'], '₹2,000.00')
        self.assertEqual(summary['discount'], '₹400.00')
        self.assertEqual(summary['total'], '₹1,600.00')
        self.assertEqual(summary['items'][0]['price'], '₹1,600.00')
