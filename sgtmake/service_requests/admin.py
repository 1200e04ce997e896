from django.contrib import admin
from .models import ServiceRequest


@admin.register(ServiceRequest)
class ServiceRequestAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'service_type', 'file_name', 'status', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['file_name', 'user__username', 'user__email']
    readonly_fields = ['created_at', 'updated_at']
