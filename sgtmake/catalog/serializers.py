from rest_framework import serializers
from .models import Category, Product, ProductImage


class CategorySerializer(serializers.ModelSerializer):
    parent_name = serializers.CharField(source='parent.name', read_only=True, default=None)
    product_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = Category
        fields = ['id', 'name', 'parent', 'parent_name', 'description', 'product_count', 'is_deleted', 'created_at', 'updated_at']
        read_only_fields = ['is_deleted', 'created_at', 'updated_at']

    def validate_parent(self, value):
        if value is None:
            return value
        if value.is_deleted:
            raise serializers.ValidationError("Parent category has been deleted.")
        if self.instance and value.pk == self.instance.pk:
            raise serializers.ValidationError("A category cannot be its own parent.")
        return value


class ProductImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductImage
        fields = ['id', 'image_public_id', 'color_variant', 'sequence']


class ProductListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for product tables"""
    category_name = serializers.CharField(source='category.name', read_only=True)
    image = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = ['id', 'title', 'slug', 'category', 'category_name', 'stock', 'base_price', 'offer_price',
                  'color', 'purchases', 'image', 'created_at']

    def get_image(self, obj):
        """First colour's thumbnail, falling back to the first image"""
        images = list(obj.images.all())
        for image in images:
            if image.is_thumbnail:
                return image.image_public_id
        return images[0].image_public_id if images else None


class ProductSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source='category.name', read_only=True)
    images = ProductImageSerializer(many=True, read_only=True)
    colors = serializers.ListField(read_only=True)

    class Meta:
        model = Product
        fields = ['id', 'title', 'slug', 'short_description', 'description', 'category', 'category_name',
                  'stock', 'base_price', 'offer_price', 'color', 'colors', 'variant_name', 'variant_values',
                  'keywords', 'purchases', 'is_deleted', 'images', 'created_at', 'updated_at']


class ColorVariantSerializer(serializers.Serializer):
    """One colour of a product: thumbnail plus ordered gallery images (Cloudinary public ids)"""
    color = serializers.CharField(allow_blank=True)
    thumbnail = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    others = serializers.ListField(child=serializers.JSONField(), required=False, default=list)


class ProductWriteSerializer(serializers.Serializer):
    """Validates product create/edit payloads"""
    title = serializers.CharField(max_length=255)
    slug = serializers.SlugField(max_length=255)
    short_description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    base_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    offer_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    stock = serializers.IntegerField(min_value=0)
    category = serializers.PrimaryKeyRelatedField(queryset=Category.objects.filter(is_deleted=False))
    variant_name = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    variant_values = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    keywords = serializers.CharField(required=False, allow_blank=True, default='')
    colors = ColorVariantSerializer(many=True)

    def validate_slug(self, value):
        queryset = Product.objects.filter(slug=value)
        product = self.context.get('product')
        if product is not None:
            queryset = queryset.exclude(pk=product.pk)
        if queryset.exists():
            raise serializers.ValidationError("A product with this slug already exists.")
        return value

    def validate(self, attrs):
        if attrs['offer_price'] > attrs['base_price']:
            raise serializers.ValidationError({'offer_price': "Offer price cannot exceed base price."})
        return attrs


def strip_whitespace(value):
    return ''.join(value.split()) if value else value


def product_field_values(data, incoming_colors):
    """Map validated write data onto Product model fields"""
    keywords = strip_whitespace(data.get('keywords') or '')
    return {
        'title': data['title'],
        'slug': data['slug'],
        'short_description': data.get('short_description') or None,
        'description': data.get('description') or '',
        'base_price': data['base_price'],
        'offer_price': data['offer_price'],
        'stock': data['stock'],
        'category': data['category'],
        'color': ','.join(incoming_colors) if incoming_colors else None,
        'variant_name': data.get('variant_name'),
        'variant_values': strip_whitespace(data.get('variant_values')),
        'keywords': [keyword for keyword in keywords.split(',') if keyword],
    }
