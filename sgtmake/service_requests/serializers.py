from rest_framework import serializers

from sgtmake.core.serializers import UserSummarySerializer
from .models import ServiceRequest


class ServiceRequestSerializer(serializers.ModelSerializer):
    service_type = serializers.CharField(read_only=True)

    class Meta:
        model = ServiceRequest
        fields = [
            'id', 'user', 'service_type', 'file_name', 'file_url', 'file_type', 'file_public_id',
            'form_details', 'status', 'created_at', 'updated_at',
        ]


class ServiceRequestDetailSerializer(ServiceRequestSerializer):
    user = UserSummarySerializer(read_only=True)
