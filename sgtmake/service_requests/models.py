from django.conf import settings
from django.db import models


class ServiceRequest(models.Model):
    """A customer's service job (battery pack, wiring harness, machining ...) with its uploaded design file"""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('approved', 'Approved'),
        ('testing', 'Testing'),
        ('production', 'Production'),
        ('cancelled', 'Cancelled'),
        ('cancel_requested', 'Cancel Requested'),
        ('shipped', 'Shipped'),
        ('delivered', 'Delivered'),
    ]
    SERVICE_TYPES = ('batteryPack', 'wiringHarness', 'cnc-machining', 'laser-cutting', 'designing')

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='service_requests'
    )
    file_name = models.CharField(max_length=255, blank=True, null=True)
    file_url = models.URLField(max_length=500, blank=True, null=True)
    file_type = models.CharField(max_length=100, blank=True, null=True)
    file_public_id = models.CharField(max_length=500, blank=True, null=True)
    form_details = models.JSONField(default=dict, blank=True, help_text="Service form answers; `type` holds the service type")
    status = models.CharField(max_length=30, choices=STATUS_CHOICES, default='pending', db_index=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'service_requests'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.service_type} request #{self.pk}"

    @property
    def service_type(self):
        details = self.form_details if isinstance(self.form_details, dict) else {}
        return details.get('type') or 'other'
