from django.db import models
from decimal import Decimal


class Category(models.Model):
    """Product categories (two-level: parent categories and subcategories)"""
    name = models.CharField(max_length=200, db_index=True)
    parent = models.ForeignKey('self', on_delete=models.PROTECT, null=True, blank=True, related_name='children')
    description = models.TextField(blank=True)
    is_deleted = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'categories'
        verbose_name_plural = 'categories'


class Product(models.Model):
    """Storefront product with per-colour image galleries"""
    title = models.CharField(max_length=255, db_index=True)
    slug = models.SlugField(max_length=255, unique=True)
    short_description = models.TextField(blank=True, null=True)
    description = models.TextField(blank=True)
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name='products')
    stock = models.IntegerField(default=0)
    base_price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    offer_price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    # Ordered, comma-separated colour names; position matters when colours are renamed
    color = models.CharField(max_length=500, blank=True, null=True)
    variant_name = models.CharField(max_length=100, blank=True, null=True)
    variant_values = models.CharField(max_length=500, blank=True, null=True)
    keywords = models.JSONField(default=list, blank=True)
    purchases = models.IntegerField(default=0)
    is_deleted = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.title

    @property
    def colors(self):
        return [c.strip() for c in (self.color or '').split(',') if c.strip()]

    @property
    def image_folder(self):
        return f'products/{self.slug}/'

    class Meta:
        db_table = 'products'


class ProductImage(models.Model):
    """
    A Cloudinary image of a product colour.

    Sequence -1 is the colour's thumbnail; 0..n are the gallery images in order.
    """
    THUMBNAIL_SEQUENCE = -1

    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='images')
    image_public_id = models.CharField(max_length=500, db_index=True)
    color_variant = models.CharField(max_length=100)
    sequence = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.image_public_id

    @property
    def is_thumbnail(self):
        return self.sequence == self.THUMBNAIL_SEQUENCE

    class Meta:
        db_table = 'product_images'
        ordering = ['color_variant', 'sequence']
