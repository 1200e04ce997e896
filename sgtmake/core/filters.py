import django_filters
from .models import AuditLog


class AuditLogFilter(django_filters.FilterSet):
    """Filters for the audit trail; `model` matches the audited model name"""
    action = django_filters.ChoiceFilter(choices=AuditLog.ACTION_CHOICES)
    model = django_filters.CharFilter(field_name='model_name')
    reference = django_filters.CharFilter(field_name='object_reference')
    user = django_filters.NumberFilter(field_name='user_id')
    date_from = django_filters.DateFilter(field_name='created_at', lookup_expr='date__gte')
    date_to = django_filters.DateFilter(field_name='created_at', lookup_expr='date__lte')

    class Meta:
        model = AuditLog
        fields = []
