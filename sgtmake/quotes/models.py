from django.conf import settings
from django.db import models


class QuoteRequest(models.Model):
    """A customer's request for pricing on custom hardware items"""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('quoted', 'Quoted'),
        ('accepted', 'Accepted'),
        ('rejected', 'Rejected'),
    ]
    ITEM_TYPES = ('fastener', 'connector', 'wire')

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='quote_requests'
    )
    items = models.JSONField(default=list, help_text="List of {type, categoryId, categoryName, title, quantity, specifications, image}")
    notes = models.TextField(blank=True, null=True)
    total_items = models.PositiveIntegerField(default=0)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending', db_index=True)
    email_sent = models.BooleanField(default=False)
    email_opened = models.BooleanField(default=False)
    response_received = models.BooleanField(default=False)
    admin_response = models.TextField(blank=True, null=True)
    quoted_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    valid_until = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'quote_requests'
        ordering = ['-created_at']

    def __str__(self):
        return f"Quote #{self.pk} ({self.status})"

    @staticmethod
    def count_items(items):
        return sum(int(item.get('quantity') or 0) for item in items or [])
