"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from sgtmake.catalog.models import Category, Product, ProductImage
from sgtmake.hardware.models import PartCategory, PartOption
from sgtmake.orders.models import Address, Order, OrderItem, Payment
from sgtmake.quotes.models import QuoteRequest
from sgtmake.service_requests.models import ServiceRequest
from decimal import Decimal
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', role='admin',
                    is_staff=False, is_superuser=False, first_name='', last_name=''):
        """Create a test user (a dashboard admin unless another role is given)"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if email is None:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            role=role,
            is_staff=is_staff,
            is_superuser=is_superuser,
            first_name=first_name,
            last_name=last_name,
        )

    @staticmethod
    def create_superadmin(**kwargs):
        return TestDataFactory.create_user(role='superadmin', **kwargs)

    @staticmethod
    def create_customer(first_name='Ravi', last_name='Kumar', email=None, phone='9876543210'):
        """Create a storefront customer"""
        username = f'customer_{TestDataFactory.random_string(6)}'
        user = TestDataFactory.create_user(
            username=username,
            email=email,
            role='customer',
            first_name=first_name,
            last_name=last_name,
        )
        user.phone = phone
        user.save(update_fields=['phone'])
        return user

    @staticmethod
    def create_category(name=None, parent=None, description=None):
        """Create a test category"""
        if not name:
            name = f'Category_{TestDataFactory.random_string(6)}'
        return Category.objects.create(
            name=name,
            parent=parent,
            description=description or f'Test category {name}'
        )

    @staticmethod
    def create_product(title=None, slug=None, category=None, color='red', base_price=None,
                       offer_price=None, stock=10, purchases=0):
        """Create a test product"""
        if not title:
            title = f'Product {TestDataFactory.random_string(6)}'
        if not slug:
            slug = f'product-{TestDataFactory.random_string(8).lower()}'
        if not category:
            category = TestDataFactory.create_category()
        return Product.objects.create(
            title=title,
            slug=slug,
            category=category,
            color=color,
            stock=stock,
            base_price=base_price if base_price is not None else Decimal('1000.00'),
            offer_price=offer_price if offer_price is not None else Decimal('800.00'),
            purchases=purchases,
        )

    @staticmethod
    def create_product_image(product, color_variant='red', sequence=0, public_id=None):
        """Create a test product image"""
        if not public_id:
            suffix = 'thumbnail' if sequence == ProductImage.THUMBNAIL_SEQUENCE else str(sequence)
            public_id = f'{product.image_folder}{color_variant}/{suffix}'
        return ProductImage.objects.create(
            product=product,
            image_public_id=public_id,
            color_variant=color_variant,
            sequence=sequence,
        )

    @staticmethod
    def create_part_category(kind='fastener', name=None, image=None):
        """Create a test fastener, connector or wire category"""
        if not name:
            name = f'Part_{TestDataFactory.random_string(6)}'
        return PartCategory.objects.create(kind=kind, name=name, image=image)

    @staticmethod
    def create_part_option(category, name='size', label='Size', values=None):
        """Create a test part option"""
        return PartOption.objects.create(
            category=category,
            name=name,
            label=label,
            values=values if values is not None else [{'value': 'M6'}, {'value': 'M8'}],
        )

    @staticmethod
    def create_quote(user=None, items=None, status='pending', quoted_price=None):
        """Create a test quote request"""
        if user is None:
            user = TestDataFactory.create_customer()
        if items is None:
            items = [
                {
                    'type': 'fastener',
                    'categoryId': '1',
                    'categoryName': 'Screws',
                    'title': 'Hex Screw',
                    'quantity': 100,
                    'specifications': {'size': 'M6', 'finish': ['Zinc', 'Black']},
                },
                {
                    'type': 'wire',
                    'categoryId': '2',
                    'categoryName': 'Silicone Wire',
                    'title': 'Silicone Wire 12AWG',
                    'quantity': 5,
                    'specifications': {'gauge': '12AWG'},
                },
            ]
        return QuoteRequest.objects.create(
            user=user,
            items=items,
            total_items=QuoteRequest.count_items(items),
            status=status,
            quoted_price=quoted_price,
        )

    @staticmethod
    def create_address(user):
        """Create a test address"""
        return Address.objects.create(
            user=user,
            name=user.display_name,
            phone='9876543210',
            address_line_1='12 MG Road',
            city='Bengaluru',
            state='Karnataka',
            pincode='560001',
        )

    @staticmethod
    def create_order(user=None, status='placed', total=None, address=None):
        """Create a test order"""
        if user is None:
            user = TestDataFactory.create_customer()
        if address is None:
            address = TestDataFactory.create_address(user)
        return Order.objects.create(
            user=user,
            address=address,
            status=status,
            total=total if total is not None else Decimal('1600.00'),
        )

    @staticmethod
    def create_order_item(order, product=None, quantity=2, base_price=None, offer_price=None, custom_product=None):
        """Create a test order item"""
        if product is None and custom_product is None:
            product = TestDataFactory.create_product()
        return OrderItem.objects.create(
            order=order,
            product=product,
            custom_product=custom_product,
            quantity=quantity,
            base_price=base_price if base_price is not None else Decimal('1000.00'),
            offer_price=offer_price if offer_price is not None else Decimal('800.00'),
        )

    @staticmethod
    def create_payment(order, method='upi', via='razorpay'):
        """Create a test payment"""
        return Payment.objects.create(
            order=order,
            rzr_order_id=f'order_{TestDataFactory.random_string(10)}',
            rzr_payment_id=f'pay_{TestDataFactory.random_string(10)}',
            amount=order.total,
            method=method,
            via=via,
        )

    @staticmethod
    def create_service_request(user=None, service_type='batteryPack', status='pending', file_public_id=None):
        """Create a test service request"""
        if user is None:
            user = TestDataFactory.create_customer()
        form_details = {'type': service_type} if service_type else {}
        return ServiceRequest.objects.create(
            user=user,
            file_name='design.pdf',
            file_url='https://res.cloudinary.com/demo/raw/upload/services/design.pdf' if file_public_id else None,
            file_type='application/pdf',
            file_public_id=file_public_id,
            form_details=form_details,
            status=status,
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
