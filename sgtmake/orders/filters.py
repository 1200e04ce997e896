import django_filters
from django.db.models import Q
from .models import Order


class OrderFilter(django_filters.FilterSet):
    """Filters for the orders table; `pending` also matches placed orders"""
    status = django_filters.CharFilter(method='filter_status')
    search = django_filters.CharFilter(method='filter_search')
    payment_verified = django_filters.BooleanFilter()
    user = django_filters.NumberFilter(field_name='user_id')
    start_date = django_filters.DateFilter(field_name='order_date', lookup_expr='date__gte')
    end_date = django_filters.DateFilter(field_name='order_date', lookup_expr='date__lte')
    ordering = django_filters.OrderingFilter(
        fields=(
            ('order_date', 'order_date'),
            ('total', 'total'),
            ('status', 'status'),
        )
    )

    class Meta:
        model = Order
        fields = []

    def filter_status(self, queryset, name, value):
        value = value.strip().lower()
        if not value or value == 'all':
            return queryset
        if value == 'pending':
            return queryset.filter(status__in=['placed', 'pending'])
        return queryset.filter(status=value)

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(order_id__icontains=value) |
            Q(user__first_name__icontains=value) |
            Q(user__last_name__icontains=value) |
            Q(user__email__icontains=value)
        )
