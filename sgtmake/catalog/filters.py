import django_filters
from django.db.models import Q
from .models import Category, Product


class CategoryFilter(django_filters.FilterSet):
    """Filters for the category table"""
    TYPE_CHOICES = [
        ('parent', 'Parent'),
        ('subcategory', 'Subcategory'),
    ]

    search = django_filters.CharFilter(method='filter_search')
    type = django_filters.ChoiceFilter(choices=TYPE_CHOICES, method='filter_type')
    has_products = django_filters.BooleanFilter(method='filter_has_products')
    parent = django_filters.NumberFilter(field_name='parent_id')
    ordering = django_filters.OrderingFilter(
        fields=(
            ('name', 'name'),
            ('id', 'id'),
            ('product_count', 'product_count'),
            ('created_at', 'created_at'),
        )
    )

    class Meta:
        model = Category
        fields = []

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(Q(name__icontains=value) | Q(description__icontains=value))

    def filter_type(self, queryset, name, value):
        if value == 'parent':
            return queryset.filter(parent__isnull=True)
        if value == 'subcategory':
            return queryset.filter(parent__isnull=False)
        return queryset

    def filter_has_products(self, queryset, name, value):
        """Requires the queryset to be annotated with product_count"""
        if value is None:
            return queryset
        return queryset.filter(product_count__gt=0) if value else queryset.filter(product_count=0)


class ProductFilter(django_filters.FilterSet):
    """Filters for the product table"""
    search = django_filters.CharFilter(method='filter_search')
    category = django_filters.NumberFilter(method='filter_category')
    min_stock = django_filters.NumberFilter(field_name='stock', lookup_expr='gte')
    max_stock = django_filters.NumberFilter(field_name='stock', lookup_expr='lte')
    in_stock = django_filters.BooleanFilter(method='filter_in_stock')
    ordering = django_filters.OrderingFilter(
        fields=(
            ('created_at', 'created_at'),
            ('title', 'title'),
            ('offer_price', 'offer_price'),
            ('stock', 'stock'),
            ('purchases', 'purchases'),
        )
    )

    class Meta:
        model = Product
        fields = []

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(title__icontains=value) |
            Q(slug__icontains=value) |
            Q(keywords__icontains=value)
        )

    def filter_category(self, queryset, name, value):
        """Matches the category itself and its subcategories"""
        return queryset.filter(Q(category_id=value) | Q(category__parent_id=value))

    def filter_in_stock(self, queryset, name, value):
        if value is None:
            return queryset
        return queryset.filter(stock__gt=0) if value else queryset.filter(stock__lte=0)
