"""
Test suite for the catalog module
Tests: categories, products, colour/slug image synchronisation, filters
"""
from decimal import Decimal
from unittest import mock

from django.test import TestCase
from rest_framework import status

from sgtmake.core.models import AuditLog
from sgtmake.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from sgtmake.core.cloudinary_service import MediaStorageError
from .image_sync import STAGING_SUFFIX, diff_colors, merge_renames, parse_color_list
from .models import Category, Product, ProductImage


class ColorDiffTests(TestCase):
    """Test positional colour comparison"""

    def test_parse_color_list(self):
        """Test colour strings are split and trimmed"""
        self.assertEqual(parse_color_list(' red, blue ,,green'), ['red', 'blue', 'green'])
        self.assertEqual(parse_color_list(None), [])

    def test_rename_delete_and_add(self):
        """Test renamed, removed and new positions are reported"""
        diff = diff_colors(['red', 'blue', 'black'], ['green', 'blue'])
        self.assertEqual(diff['color_changes'], [{'from': 'red', 'to': 'green', 'position': 0}])
        self.assertEqual(diff['colors_to_delete'], ['black'])
        self.assertEqual(diff['colors_to_add'], [])

        diff = diff_colors(['red'], ['red', 'white'])
        self.assertEqual(diff['color_changes'], [])
        self.assertEqual(diff['colors_to_add'], [{'color': 'white', 'position': 1}])


class CategoryTests(TestCase):
    """Test category endpoints"""

    def setUp(self):
        self.superadmin = TestDataFactory.create_superadmin()
        self.client = AuthenticatedAPIClient().authenticate_user(self.superadmin)

    def test_create_category_with_parent(self):
        """Test creating a subcategory from the dashboard form payload"""
        parent = TestDataFactory.create_category(name='Batteries')
        response = self.client.post('/api/v1/categories/', {
            'values': {'category': '  Li-ion Cells ', 'parentId': parent.id, 'description': '18650 and 21700'},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Li-ion Cells')
        self.assertEqual(response.data['parent_name'], 'Batteries')

    def test_create_category_requires_name(self):
        """Test a category needs a name"""
        response = self.client.post('/api/v1/categories/', {'description': 'no name'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_categories_with_product_counts(self):
        """Test product counts ignore deleted products"""
        category = TestDataFactory.create_category(name='Chargers')
        TestDataFactory.create_product(category=category)
        deleted = TestDataFactory.create_product(category=category)
        deleted.is_deleted = True
        deleted.save()
        response = self.client.get('/api/v1/categories/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        row = next(c for c in response.data if c['id'] == category.id)
        self.assertEqual(row['product_count'], 1)

    def test_list_categories_paginated(self):
        """Test optional page/limit pagination"""
        for _ in range(3):
            TestDataFactory.create_category()
        response = self.client.get('/api/v1/categories/?page=1&limit=2')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 3)
        self.assertEqual(len(response.data['results']), 2)
        self.assertEqual(response.data['total_pages'], 2)

    def test_filter_parent_categories(self):
        """Test filtering top-level categories"""
        parent = TestDataFactory.create_category(name='Tools')
        TestDataFactory.create_category(name='Soldering', parent=parent)
        response = self.client.get('/api/v1/categories/?type=parent')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([c['name'] for c in response.data], ['Tools'])

    def test_delete_unused_category_is_hard_delete(self):
        """Test deleting a category nothing references"""
        category = TestDataFactory.create_category()
        response = self.client.delete(f'/api/v1/categories/{category.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['soft_deleted'])
        self.assertFalse(Category.objects.filter(pk=category.id).exists())

    def test_delete_category_with_products_is_soft_delete(self):
        """Test categories with products are only flagged as deleted"""
        category = TestDataFactory.create_category()
        TestDataFactory.create_product(category=category)
        response = self.client.delete(f'/api/v1/categories/{category.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Soft deleted due to constraints')
        category.refresh_from_db()
        self.assertTrue(category.is_deleted)
        self.assertTrue(AuditLog.objects.filter(action='soft_delete', model_name='Category').exists())

    def test_end_child_categories(self):
        """Test only categories without live subcategories are returned"""
        parent = TestDataFactory.create_category(name='Electronics')
        child = TestDataFactory.create_category(name='Sensors', parent=parent)
        response = self.client.get('/api/v1/categories/end-child/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        ids = [c['id'] for c in response.data]
        self.assertIn(child.id, ids)
        self.assertNotIn(parent.id, ids)

    def test_admin_cannot_write_categories(self):
        """Test category writes need a super admin"""
        client = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_user(role='admin'))
        response = client.post('/api/v1/categories/', {'name': 'Blocked'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = client.get('/api/v1/categories/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_update_category_from_form_values(self):
        """Test updating a category with the dashboard's {id, values} body"""
        parent = TestDataFactory.create_category(name='Power')
        category = TestDataFactory.create_category(name='Adapters')
        response = self.client.put(f'/api/v1/categories/{category.id}/', {
            'id': category.id,
            'values': {'category': ' Wall Adapters ', 'parentId': parent.id, 'description': 'SMPS units'},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'Wall Adapters')
        self.assertEqual(response.data['parent_name'], 'Power')
        self.assertEqual(response.data['description'], 'SMPS units')
        self.assertTrue(AuditLog.objects.filter(action='update', model_name='Category',
                                                object_id=str(category.id)).exists())

    def test_update_category_from_flat_body(self):
        """Test updating with plain field names and clearing the parent"""
        parent = TestDataFactory.create_category(name='Power')
        category = TestDataFactory.create_category(name='Adapters', parent=parent)
        response = self.client.put(f'/api/v1/categories/{category.id}/',
                                   {'name': 'Chargers', 'parentId': None}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        category.refresh_from_db()
        self.assertEqual(category.name, 'Chargers')
        self.assertIsNone(category.parent)

    def test_category_cannot_be_its_own_parent(self):
        """Test a category cannot be made its own parent"""
        category = TestDataFactory.create_category(name='Loops')
        response = self.client.put(f'/api/v1/categories/{category.id}/',
                                   {'values': {'parentId': category.id}}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('parent', response.data)

    def test_deleted_category_cannot_be_parent(self):
        """Test a soft deleted category cannot be chosen as parent"""
        deleted = TestDataFactory.create_category(name='Retired')
        deleted.is_deleted = True
        deleted.save()
        category = TestDataFactory.create_category(name='Fuses')
        response = self.client.put(f'/api/v1/categories/{category.id}/',
                                   {'parentId': deleted.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('parent', response.data)

    def test_search_categories(self):
        """Test search matches names and descriptions"""
        TestDataFactory.create_category(name='Relays', description='Switching modules')
        TestDataFactory.create_category(name='Heat Sinks', description='Aluminium relay mounts')
        TestDataFactory.create_category(name='Fans', description='Cooling')
        response = self.client.get('/api/v1/categories/?search=relay')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(sorted(c['name'] for c in response.data), ['Heat Sinks', 'Relays'])

    def test_filter_categories_with_products(self):
        """Test has_products splits categories by live product count"""
        stocked = TestDataFactory.create_category(name='Motors')
        TestDataFactory.create_product(category=stocked)
        empty = TestDataFactory.create_category(name='Empty')

        response = self.client.get('/api/v1/categories/?has_products=true')
        self.assertEqual([c['id'] for c in response.data], [stocked.id])
        response = self.client.get('/api/v1/categories/?has_products=false')
        self.assertEqual([c['id'] for c in response.data], [empty.id])

    def test_order_categories_by_product_count(self):
        """Test ordering by product count"""
        few = TestDataFactory.create_category(name='Few')
        many = TestDataFactory.create_category(name='Many')
        TestDataFactory.create_product(category=few)
        for _ in range(3):
            TestDataFactory.create_product(category=many)

        response = self.client.get('/api/v1/categories/?ordering=-product_count')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([c['name'] for c in response.data], ['Many', 'Few'])
        self.assertEqual(response.data[0]['product_count'], 3)


class ProductTests(TestCase):
    """Test product endpoints"""

    def setUp(self):
        self.superadmin = TestDataFactory.create_superadmin()
        self.client = AuthenticatedAPIClient().authenticate_user(self.superadmin)
        self.category = TestDataFactory.create_category(name='Accessories')

    def product_payload(self, **overrides):
        payload = {
            'title': 'Cell Holder',
            'slug': 'cell-holder',
            'description': '<p>Holds 18650 cells</p>',
            'base_price': '250.00',
            'offer_price': '199.00',
            'stock': 40,
            'category': self.category.id,
            'keywords': 'cell, holder , 18650',
            'colors': [
                {
                    'color': 'red',
                    'thumbnail': 'products/cell-holder/red/thumbnail',
                    'others': ['products/cell-holder/red/0', 'products/cell-holder/red/1'],
                },
            ],
        }
        payload.update(overrides)
        return payload

    def test_create_product_with_images(self):
        """Test creating a product stores its colour images"""
        response = self.client.post('/api/v1/products/', self.product_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        product = Product.objects.get(slug='cell-holder')
        self.assertEqual(product.color, 'red')
        self.assertEqual(product.keywords, ['cell', 'holder', '18650'])
        self.assertEqual(product.images.count(), 3)
        self.assertTrue(product.images.filter(sequence=ProductImage.THUMBNAIL_SEQUENCE).exists())

    def test_create_product_rejects_duplicate_slug(self):
        """Test slugs must be unique"""
        TestDataFactory.create_product(slug='cell-holder', category=self.category)
        response = self.client.post('/api/v1/products/', self.product_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('slug', response.data)

    def test_offer_price_cannot_exceed_base_price(self):
        """Test offer price validation"""
        response = self.client.post('/api/v1/products/', self.product_payload(offer_price='300.00'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_products_uses_thumbnail(self):
        """Test product rows carry the thumbnail image"""
        product = TestDataFactory.create_product(category=self.category)
        TestDataFactory.create_product_image(product, sequence=0)
        thumbnail = TestDataFactory.create_product_image(product, sequence=ProductImage.THUMBNAIL_SEQUENCE)
        response = self.client.get('/api/v1/products/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['image'], thumbnail.image_public_id)

    def test_filter_products_by_parent_category(self):
        """Test filtering by a parent category includes its subcategories"""
        child = TestDataFactory.create_category(parent=self.category)
        TestDataFactory.create_product(category=child)
        TestDataFactory.create_product()
        response = self.client.get(f'/api/v1/products/?category={self.category.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_get_deleted_product(self):
        """Test soft deleted products are not accessible"""
        product = TestDataFactory.create_product(category=self.category)
        product.is_deleted = True
        product.save()
        response = self.client.get(f'/api/v1/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Product has been deleted and is no longer accessible')

    @mock.patch('sgtmake.core.cloudinary_service.delete_folder_resources', return_value=3)
    def test_delete_unsold_product_removes_it(self, mock_delete_folder):
        """Test products never purchased are deleted along with their images"""
        product = TestDataFactory.create_product(slug='spot-welder', category=self.category)
        response = self.client.delete(f'/api/v1/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Product permanently deleted.')
        self.assertFalse(Product.objects.filter(pk=product.id).exists())
        mock_delete_folder.assert_called_once_with('products/spot-welder/')

    def test_delete_sold_product_is_soft_delete(self):
        """Test purchased products are soft deleted"""
        product = TestDataFactory.create_product(category=self.category, purchases=4)
        response = self.client.delete(f'/api/v1/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['soft_deleted'])
        product.refresh_from_db()
        self.assertTrue(product.is_deleted)

    def test_product_orders(self):
        """Test listing the orders that contain a product"""
        product = TestDataFactory.create_product(category=self.category)
        order = TestDataFactory.create_order()
        TestDataFactory.create_order_item(order, product=product, quantity=3, offer_price=Decimal('199.00'))
        response = self.client.get(f'/api/v1/products/{product.id}/orders/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['order_id'], order.order_id)
        self.assertEqual(response.data[0]['price'], Decimal('597.00'))

    def test_filter_products_by_stock_range(self):
        """Test min_stock and max_stock bound the stock level"""
        for stock in (0, 5, 20, 60):
            TestDataFactory.create_product(category=self.category, stock=stock)
        response = self.client.get('/api/v1/products/?min_stock=5&max_stock=20')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(sorted(p['stock'] for p in response.data), [5, 20])

    def test_order_products(self):
        """Test ordering products by stock"""
        for stock in (7, 30, 1):
            TestDataFactory.create_product(category=self.category, stock=stock)
        response = self.client.get('/api/v1/products/?ordering=-stock')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['stock'] for p in response.data], [30, 7, 1])
        response = self.client.get('/api/v1/products/?ordering=stock')
        self.assertEqual([p['stock'] for p in response.data], [1, 7, 30])


class ProductEditImageSyncTests(TestCase):
    """Test image moves when a product's colours or slug change"""

    def setUp(self):
        self.superadmin = TestDataFactory.create_superadmin()
        self.client = AuthenticatedAPIClient().authenticate_user(self.superadmin)
        self.category = TestDataFactory.create_category()
        self.product = TestDataFactory.create_product(
            title='Cell Holder', slug='cell-holder', category=self.category, color='red,blue'
        )
        for color in ('red', 'blue'):
            TestDataFactory.create_product_image(self.product, color, ProductImage.THUMBNAIL_SEQUENCE)
            TestDataFactory.create_product_image(self.product, color, 0)

    def edit_payload(self, slug, colors):
        return {
            'title': 'Cell Holder',
            'slug': slug,
            'base_price': '250.00',
            'offer_price': '199.00',
            'stock': 10,
            'category': self.category.id,
            'colors': colors,
        }

    @mock.patch('sgtmake.core.cloudinary_service.destroy_image')
    @mock.patch('sgtmake.core.cloudinary_service.rename_resource')
    @mock.patch('sgtmake.core.cloudinary_service.list_resources')
    def test_rename_colour_and_drop_another(self, mock_list, mock_rename, mock_destroy):
        """Test a renamed colour moves its images and a removed colour deletes them"""
        mock_list.return_value = [
            {'public_id': 'products/cell-holder/red/thumbnail'},
            {'public_id': 'products/cell-holder/red/0'},
        ]
        response = self.client.put(f'/api/v1/products/{self.product.id}/', self.edit_payload('cell-holder', [
            {
                'color': 'green',
                'thumbnail': 'products/cell-holder/red/thumbnail',
                'others': ['products/cell-holder/red/0'],
            },
        ]), format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['color_changes'], [{'from': 'red', 'to': 'green', 'position': 0}])
        self.assertEqual(response.data['colors_deleted'], ['blue'])
        mock_list.assert_called_once_with('products/cell-holder/red/')
        mock_rename.assert_any_call('products/cell-holder/red/0', 'products/cell-holder/green/0')
        self.assertEqual(mock_destroy.call_count, 2)

        self.product.refresh_from_db()
        self.assertEqual(self.product.color, 'green')
        self.assertEqual(
            sorted(self.product.images.values_list('image_public_id', flat=True)),
            ['products/cell-holder/green/0', 'products/cell-holder/green/thumbnail'],
        )
        self.assertFalse(self.product.images.exclude(color_variant='green').exists())

    @mock.patch('sgtmake.core.cloudinary_service.destroy_image')
    @mock.patch('sgtmake.core.cloudinary_service.rename_resource')
    def test_slug_change_moves_images(self, mock_rename, mock_destroy):
        """Test changing the slug moves every image to the new folder"""
        colors = [
            {'color': color, 'thumbnail': f'products/cell-holder/{color}/thumbnail',
             'others': [f'products/cell-holder/{color}/0']}
            for color in ('red', 'blue')
        ]
        response = self.client.put(f'/api/v1/products/{self.product.id}/',
                                   self.edit_payload('battery-holder', colors), format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_rename.call_count, 4)
        mock_destroy.assert_not_called()
        self.product.refresh_from_db()
        self.assertEqual(self.product.slug, 'battery-holder')
        self.assertEqual(self.product.images.count(), 4)
        self.assertFalse(self.product.images.filter(image_public_id__startswith='products/cell-holder/').exists())

    @mock.patch('sgtmake.core.cloudinary_service.destroy_image')
    def test_removed_gallery_image_is_deleted(self, mock_destroy):
        """Test images dropped from a colour's gallery are removed"""
        colors = [
            {'color': 'red', 'thumbnail': 'products/cell-holder/red/thumbnail', 'others': []},
            {'color': 'blue', 'thumbnail': 'products/cell-holder/blue/thumbnail',
             'others': ['products/cell-holder/blue/0']},
        ]
        response = self.client.put(f'/api/v1/products/{self.product.id}/',
                                   self.edit_payload('cell-holder', colors), format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        mock_destroy.assert_called_once_with('products/cell-holder/red/0')
        self.assertEqual(self.product.images.count(), 3)

    def test_cannot_edit_deleted_product(self):
        """Test deleted products cannot be edited"""
        self.product.is_deleted = True
        self.product.save()
        response = self.client.put(f'/api/v1/products/{self.product.id}/',
                                   self.edit_payload('cell-holder', []), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Cannot edit a deleted product')


class FakeMediaStore:
    """In-memory stand-in for the Cloudinary folders of one product"""

    def __init__(self, public_ids):
        self.public_ids = set(public_ids)

    def list_resources(self, prefix):
        return [{'public_id': public_id} for public_id in sorted(self.public_ids) if public_id.startswith(prefix)]

    def rename_resource(self, from_public_id, to_public_id):
        if from_public_id not in self.public_ids:
            raise MediaStorageError(f'Resource not found - {from_public_id}')
        if to_public_id in self.public_ids:
            raise MediaStorageError(f'Resource already exists - {to_public_id}')
        self.public_ids.remove(from_public_id)
        self.public_ids.add(to_public_id)
        return {'public_id': to_public_id}

    def destroy_image(self, public_id):
        self.public_ids.discard(public_id)
        return {'result': 'ok'}

    def patch(self, test_case):
        for name in ('list_resources', 'rename_resource', 'destroy_image'):
            patcher = mock.patch(f'sgtmake.core.cloudinary_service.{name}', side_effect=getattr(self, name))
            patcher.start()
            test_case.addCleanup(patcher.stop)


class ColourSwapTests(TestCase):
    """Test reordering colours keeps every stored image"""

    def setUp(self):
        self.superadmin = TestDataFactory.create_superadmin()
        self.client = AuthenticatedAPIClient().authenticate_user(self.superadmin)
        self.category = TestDataFactory.create_category()
        self.product = TestDataFactory.create_product(
            title='Cell Holder', slug='cell-holder', category=self.category, color='red,blue'
        )

    def edit(self, slug, colors):
        return self.client.put(f'/api/v1/products/{self.product.id}/', {
            'title': 'Cell Holder',
            'slug': slug,
            'base_price': '250.00',
            'offer_price': '199.00',
            'stock': 10,
            'category': self.category.id,
            'colors': colors,
        }, format='json')

    def assert_rows_match_store(self, store):
        row_ids = set(self.product.images.values_list('image_public_id', flat=True))
        self.assertEqual(row_ids, store.public_ids)

    def test_swap_colours_with_distinct_names(self):
        """Test swapping two colours moves both images without losing either"""
        TestDataFactory.create_product_image(self.product, 'red', ProductImage.THUMBNAIL_SEQUENCE,
                                             public_id='products/cell-holder/red/r1')
        TestDataFactory.create_product_image(self.product, 'blue', ProductImage.THUMBNAIL_SEQUENCE,
                                             public_id='products/cell-holder/blue/b1')
        store = FakeMediaStore(['products/cell-holder/red/r1', 'products/cell-holder/blue/b1'])
        store.patch(self)

        response = self.edit('cell-holder', [
            {'color': 'blue', 'thumbnail': 'products/cell-holder/blue/b1', 'others': []},
            {'color': 'red', 'thumbnail': 'products/cell-holder/red/r1', 'others': []},
        ])

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(store.public_ids, {'products/cell-holder/blue/r1', 'products/cell-holder/red/b1'})
        self.assert_rows_match_store(store)
        self.assertEqual(
            sorted(self.product.images.values_list('image_public_id', 'color_variant')),
            [('products/cell-holder/blue/r1', 'red'), ('products/cell-holder/red/b1', 'blue')],
        )

    def test_swap_colours_with_matching_names(self):
        """Test a swap whose targets are occupied moves through staging ids"""
        for color in ('red', 'blue'):
            TestDataFactory.create_product_image(self.product, color, ProductImage.THUMBNAIL_SEQUENCE)
            TestDataFactory.create_product_image(self.product, color, 0)
        store = FakeMediaStore(self.product.images.values_list('image_public_id', flat=True))
        store.patch(self)

        response = self.edit('cell-holder', [
            {'color': color, 'thumbnail': f'products/cell-holder/{color}/thumbnail',
             'others': [f'products/cell-holder/{color}/0']}
            for color in ('blue', 'red')
        ])

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(store.public_ids), 4)
        self.assertFalse(any(public_id.endswith(STAGING_SUFFIX) for public_id in store.public_ids))
        self.assert_rows_match_store(store)
        self.product.refresh_from_db()
        self.assertEqual(self.product.color, 'blue,red')

    def test_swap_with_slug_change(self):
        """Test a swap combined with a slug change lands every image in the new folder"""
        TestDataFactory.create_product_image(self.product, 'red', ProductImage.THUMBNAIL_SEQUENCE,
                                             public_id='products/cell-holder/red/r1')
        TestDataFactory.create_product_image(self.product, 'blue', ProductImage.THUMBNAIL_SEQUENCE,
                                             public_id='products/cell-holder/blue/b1')
        store = FakeMediaStore(['products/cell-holder/red/r1', 'products/cell-holder/blue/b1'])
        store.patch(self)

        response = self.edit('battery-holder', [
            {'color': 'blue', 'thumbnail': 'products/cell-holder/blue/b1', 'others': []},
            {'color': 'red', 'thumbnail': 'products/cell-holder/red/r1', 'others': []},
        ])

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(store.public_ids, {'products/battery-holder/blue/r1', 'products/battery-holder/red/b1'})
        self.assert_rows_match_store(store)

    def test_renames_are_audited(self):
        """Test each moved image gets an image_rename audit entry"""
        TestDataFactory.create_product_image(self.product, 'red', ProductImage.THUMBNAIL_SEQUENCE,
                                             public_id='products/cell-holder/red/r1')
        TestDataFactory.create_product_image(self.product, 'blue', ProductImage.THUMBNAIL_SEQUENCE,
                                             public_id='products/cell-holder/blue/b1')
        store = FakeMediaStore(['products/cell-holder/red/r1', 'products/cell-holder/blue/b1'])
        store.patch(self)

        self.edit('cell-holder', [
            {'color': 'green', 'thumbnail': 'products/cell-holder/red/r1', 'others': []},
            {'color': 'blue', 'thumbnail': 'products/cell-holder/blue/b1', 'others': []},
        ])

        log = AuditLog.objects.get(action='image_rename')
        self.assertEqual(log.model_name, 'ProductImage')
        self.assertEqual(log.object_reference, 'products/cell-holder/green/r1')
        self.assertEqual(log.changes, {'from': 'products/cell-holder/red/r1', 'to': 'products/cell-holder/green/r1'})
        self.assertEqual(log.user, self.superadmin)
        image = self.product.images.get(image_public_id='products/cell-holder/green/r1')
        self.assertEqual(log.object_id, str(image.pk))


class RenameMapTests(TestCase):
    """Test combining colour and slug rename passes"""

    def test_merge_renames_chains_later_pass(self):
        """Test a later pass is applied to the earlier pass's targets"""
        first = {'a/red/1': 'a/blue/1'}
        second = {'a/blue/1': 'b/blue/1', 'a/green/2': 'b/green/2'}
        self.assertEqual(merge_renames(first, second), {'a/red/1': 'b/blue/1', 'a/green/2': 'b/green/2'})
