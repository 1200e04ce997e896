import django_filters
from .models import ServiceRequest


class ServiceRequestFilter(django_filters.FilterSet):
    """Query params of the services filter endpoint; both dates are inclusive"""
    type = django_filters.CharFilter(field_name='form_details__type')
    userId = django_filters.NumberFilter(field_name='user_id')
    startDate = django_filters.DateFilter(field_name='created_at', lookup_expr='date__gte')
    endDate = django_filters.DateFilter(field_name='created_at', lookup_expr='date__lte')
    status = django_filters.ChoiceFilter(choices=ServiceRequest.STATUS_CHOICES)

    class Meta:
        model = ServiceRequest
        fields = []
