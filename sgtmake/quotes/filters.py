import django_filters
from django.db.models import Q
from .models import QuoteRequest


class QuoteRequestFilter(django_filters.FilterSet):
    """Filters for the admin quote table"""
    status = django_filters.CharFilter(method='filter_status')
    search = django_filters.CharFilter(method='filter_search')
    ordering = django_filters.OrderingFilter(
        fields=(
            ('created_at', 'created_at'),
            ('total_items', 'total_items'),
            ('quoted_price', 'quoted_price'),
        )
    )

    class Meta:
        model = QuoteRequest
        fields = []

    def filter_status(self, queryset, name, value):
        value = value.strip().lower()
        if not value or value == 'all':
            return queryset
        return queryset.filter(status=value)

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        query = (
            Q(user__first_name__icontains=value) |
            Q(user__last_name__icontains=value) |
            Q(user__username__icontains=value) |
            Q(user__email__icontains=value)
        )
        if value.lstrip('#').isdigit():
            query |= Q(pk=int(value.lstrip('#')))
        return queryset.filter(query)
