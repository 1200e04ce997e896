"""
Test suite for the orders module
Tests: status transitions, listing, detail, status changes and customer emails
"""
from datetime import timedelta
from decimal import Decimal

from django.core import mail
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework import status

from sgtmake.catalog.models import ProductImage
from sgtmake.core.models import AuditLog
from sgtmake.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import Order, generate_order_id

EMAIL_SETTINGS = {'EMAIL_HOST_USER': 'store@sgtmake.com', 'EMAIL_HOST_PASSWORD': 'app-password'}


class OrderModelTests(TestCase):
    """Test order status transitions and derived values"""

    def setUp(self):
        self.order = TestDataFactory.create_order()

    def test_order_id_format(self):
        """Test generated order ids carry the prefix and date"""
        order_id = generate_order_id()
        self.assertTrue(order_id.startswith(f"SGT{timezone.now():%y%m%d}"))
        self.assertEqual(len(order_id), 15)
        self.assertNotEqual(self.order.order_id, TestDataFactory.create_order().order_id)

    def test_ongoing_sets_packed_date(self):
        """Test processing stamps the packed date and clears delivery"""
        self.order.delivered_date = timezone.now()
        self.order.apply_status('ongoing')
        self.assertIsNotNone(self.order.packed_date)
        self.assertIsNone(self.order.delivered_date)

    def test_shipped_keeps_packed_date(self):
        """Test shipping keeps an existing packed date"""
        packed = timezone.now() - timedelta(days=1)
        self.order.packed_date = packed
        self.order.apply_status('shipped')
        self.assertEqual(self.order.packed_date, packed)
        self.assertIsNone(self.order.delivered_date)

    def test_delivered_sets_delivered_date(self):
        """Test delivery stamps the delivered date"""
        self.order.apply_status('delivered')
        self.assertEqual(self.order.status, 'delivered')
        self.assertIsNotNone(self.order.delivered_date)

    def test_cancel_clears_dates(self):
        """Test cancelling or reverting clears both dates"""
        self.order.apply_status('ongoing')
        self.order.apply_status('cancelled')
        self.assertIsNone(self.order.packed_date)
        self.assertIsNone(self.order.delivered_date)

    def test_display_status_and_payment_label(self):
        """Test placed orders display as pending"""
        self.assertEqual(self.order.display_status, 'pending')
        self.assertEqual(self.order.payment_label, 'Unpaid')
        self.order.payment_verified = True
        self.assertEqual(self.order.payment_label, 'Paid')

    def test_line_total_and_variant(self):
        """Test line totals use the unit price and custom options form the variant"""
        item = TestDataFactory.create_order_item(self.order, quantity=3, offer_price=Decimal('250.50'))
        self.assertEqual(item.line_total, Decimal('751.50'))
        custom = TestDataFactory.create_order_item(self.order, custom_product={
            'title': 'Custom 48V Pack', 'image': 'custom/pack', 'options': {'cells': '13S4P'},
        })
        self.assertEqual(custom.title, 'Custom 48V Pack')
        self.assertEqual(custom.image, 'custom/pack')
        self.assertEqual(custom.variant, 'cells: 13S4P')


class OrderListTests(TestCase):
    """Test the admin orders table"""

    def setUp(self):
        self.admin = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.admin)
        self.customer = TestDataFactory.create_customer(first_name='Anita', last_name='Desai')

    def test_list_orders_with_item_counts(self):
        """Test placed orders are shown as pending with their item count"""
        order = TestDataFactory.create_order(user=self.customer)
        TestDataFactory.create_order_item(order)
        TestDataFactory.create_order_item(order)
        response = self.client.get('/api/v1/orders/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        row = response.data[0]
        self.assertEqual(row['order_id'], order.order_id)
        self.assertEqual(row['status'], 'pending')
        self.assertEqual(row['items_count'], 2)
        self.assertEqual(row['user_id'], self.customer.id)

    def test_pending_filter_matches_placed(self):
        """Test the pending filter includes placed orders"""
        TestDataFactory.create_order(user=self.customer, status='placed')
        TestDataFactory.create_order(user=self.customer, status='pending')
        TestDataFactory.create_order(user=self.customer, status='shipped')
        response = self.client.get('/api/v1/orders/?status=pending')
        self.assertEqual(len(response.data), 2)
        response = self.client.get('/api/v1/orders/?status=shipped')
        self.assertEqual(len(response.data), 1)

    def test_search_by_customer_name(self):
        """Test searching orders by customer name"""
        TestDataFactory.create_order(user=self.customer)
        TestDataFactory.create_order()
        response = self.client.get('/api/v1/orders/?search=anita')
        self.assertEqual(len(response.data), 1)

    def test_customer_cannot_list_orders(self):
        """Test customers are kept out of the dashboard"""
        client = AuthenticatedAPIClient().authenticate_user(self.customer)
        response = client.get('/api/v1/orders/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_unauthenticated_access(self):
        """Test anonymous requests are rejected"""
        client = AuthenticatedAPIClient()
        response = client.get('/api/v1/orders/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class OrderDetailTests(TestCase):
    """Test the order detail view"""

    def setUp(self):
        self.admin = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.admin)

    def test_order_detail(self):
        """Test detail includes address, payment, customer and items"""
        order = TestDataFactory.create_order(status='shipped')
        product = TestDataFactory.create_product(title='BLDC Hub Motor')
        TestDataFactory.create_product_image(product, sequence=ProductImage.THUMBNAIL_SEQUENCE)
        TestDataFactory.create_product_image(product, sequence=0)
        TestDataFactory.create_order_item(order, product=product, quantity=2)
        payment = TestDataFactory.create_payment(order)

        response = self.client.get(f'/api/v1/orders/{order.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'shipped')
        self.assertEqual(response.data['address']['city'], 'Bengaluru')
        self.assertEqual(response.data['payment']['rzr_payment_id'], payment.rzr_payment_id)
        self.assertEqual(response.data['user']['id'], order.user_id)
        item = response.data['items'][0]
        self.assertEqual(item['title'], 'BLDC Hub Motor')
        self.assertEqual(item['image'], f'{product.image_folder}red/thumbnail')
        self.assertEqual(Decimal(item['line_total']), Decimal('1600.00'))

    def test_order_without_payment(self):
        """Test unpaid orders report no payment"""
        order = TestDataFactory.create_order()
        response = self.client.get(f'/api/v1/orders/{order.id}/')
        self.assertIsNone(response.data['payment'])

    def test_missing_order(self):
        response = self.client.get('/api/v1/orders/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class OrderStatusTests(TestCase):
    """Test order status changes"""

    def setUp(self):
        self.superadmin = TestDataFactory.create_superadmin()
        self.client = AuthenticatedAPIClient().authenticate_user(self.superadmin)
        self.customer = TestDataFactory.create_customer(email='anita@example.com')
        self.order = TestDataFactory.create_order(user=self.customer)
        TestDataFactory.create_order_item(self.order)

    @override_settings(**EMAIL_SETTINGS)
    def test_status_update_emails_customer(self):
        """Test a status change updates dates, audits and emails the customer"""
        response = self.client.patch(f'/api/v1/orders/{self.order.id}/status/', {'status': 'ongoing'},
                                     format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Order status updated successfully')
        self.assertTrue(response.data['email']['success'])

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, 'ongoing')
        self.assertIsNotNone(self.order.packed_date)

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['anita@example.com'])
        self.assertEqual(mail.outbox[0].subject, f'Your Order #{self.order.order_id} Is Being Processed - SGTMake')
        self.assertIn('SGTMAKE Store', mail.outbox[0].from_email)
        self.assertTrue(AuditLog.objects.filter(action='status_change', model_name='Order').exists())

    def test_status_update_without_email_config(self):
        """Test the change succeeds when email is not configured"""
        with self.settings(EMAIL_HOST_USER='', EMAIL_HOST_PASSWORD=''):
            response = self.client.patch(f'/api/v1/orders/{self.order.id}/status/', {'status': 'delivered'},
                                         format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['email']['success'])
        self.assertEqual(response.data['email']['message'], 'Email service not configured')
        self.assertEqual(len(mail.outbox), 0)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, 'delivered')

    def test_status_required(self):
        response = self.client.patch(f'/api/v1/orders/{self.order.id}/status/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Status is required')

    def test_invalid_status(self):
        response = self.client.patch(f'/api/v1/orders/{self.order.id}/status/', {'status': 'lost'},
                                     format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid status')

    @override_settings(**EMAIL_SETTINGS)
    def test_bulk_patch_on_order_list(self):
        """Test PATCH on the order list changes the given order"""
        response = self.client.patch('/api/v1/orders/', {'id': self.order.id, 'status': 'shipped'},
                                     format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, 'shipped')
        self.assertIsNotNone(self.order.packed_date)

    def test_bulk_patch_requires_id_and_status(self):
        response = self.client.patch('/api/v1/orders/', {'status': 'shipped'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid data format.')

    def test_admin_cannot_change_status(self):
        """Test only super admins change order status"""
        admin_client = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_user(role='admin'))
        response = admin_client.patch('/api/v1/orders/', {'id': self.order.id, 'status': 'shipped'},
                                      format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = admin_client.patch(f'/api/v1/orders/{self.order.id}/status/', {'status': 'shipped'},
                                      format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, 'placed')

    @override_settings(**EMAIL_SETTINGS)
    def test_order_without_customer_email(self):
        """Test orders whose customer has no email still change status"""
        self.customer.email = ''
        self.customer.save(update_fields=['email'])
        response = self.client.patch(f'/api/v1/orders/{self.order.id}/status/', {'status': 'cancelled'},
                                     format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['email']['message'], 'No email address found for user')
        self.assertEqual(Order.objects.get(pk=self.order.pk).status, 'cancelled')
