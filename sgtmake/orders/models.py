from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.crypto import get_random_string


def generate_order_id():
    return f"SGT{timezone.now():%y%m%d}{get_random_string(6, allowed_chars='ABCDEFGHJKLMNPQRSTUVWXYZ23456789')}"


class Address(models.Model):
    """Shipping address saved by a customer"""
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='addresses')
    name = models.CharField(max_length=200)
    phone = models.CharField(max_length=20)
    alt_phone = models.CharField(max_length=20, blank=True, null=True)
    address_line_1 = models.CharField(max_length=255)
    address_line_2 = models.CharField(max_length=255, blank=True, null=True)
    landmark = models.CharField(max_length=255, blank=True, null=True)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    pincode = models.CharField(max_length=10)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'addresses'
        verbose_name_plural = 'addresses'

    def __str__(self):
        return f"{self.name}, {self.city}"


class Order(models.Model):
    STATUS_CHOICES = [
        ('placed', 'Placed'),
        ('pending', 'Pending'),
        ('ongoing', 'Ongoing'),
        ('shipped', 'Shipped'),
        ('delivered', 'Delivered'),
        ('cancelled', 'Cancelled'),
    ]

    order_id = models.CharField(max_length=50, unique=True, default=generate_order_id)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders')
    address = models.ForeignKey(Address, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='placed', db_index=True)
    payment_verified = models.BooleanField(default=False)
    total = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    order_date = models.DateTimeField(default=timezone.now, db_index=True)
    packed_date = models.DateTimeField(null=True, blank=True)
    delivered_date = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'orders'
        ordering = ['-order_date']

    def __str__(self):
        return self.order_id

    @property
    def display_status(self):
        """A placed order is shown as pending"""
        return 'pending' if self.status == 'placed' else self.status

    @property
    def payment_label(self):
        return 'Paid' if self.payment_verified else 'Unpaid'

    def apply_status(self, new_status):
        """Set the status and move the packed/delivered dates along with it"""
        now = timezone.now()
        self.status = new_status
        if new_status == 'ongoing':
            self.packed_date = now
            self.delivered_date = None
        elif new_status == 'shipped':
            self.packed_date = self.packed_date or now
            self.delivered_date = None
        elif new_status == 'delivered':
            self.delivered_date = now
        else:
            self.packed_date = None
            self.delivered_date = None


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey('catalog.Product', on_delete=models.SET_NULL, null=True, blank=True, related_name='order_items')
    custom_product = models.JSONField(null=True, blank=True, help_text="{title, base_price, offer_price, image, options} for custom builds")
    quantity = models.PositiveIntegerField(default=1)
    base_price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    offer_price = models.DecimalField(max_digits=10, decimal_places=2, default=0, help_text="Unit price paid")
    color = models.CharField(max_length=100, blank=True, null=True)

    class Meta:
        db_table = 'order_items'

    def __str__(self):
        return f"{self.title} x {self.quantity}"

    @property
    def title(self):
        if self.product_id and self.product:
            return self.product.title
        return (self.custom_product or {}).get('title') or 'Custom product'

    @property
    def image(self):
        if self.product_id and self.product:
            thumbnail = next((img for img in self.product.images.all() if img.is_thumbnail), None)
            return thumbnail.image_public_id if thumbnail else None
        return (self.custom_product or {}).get('image')

    @property
    def variant(self):
        if self.color:
            return self.color
        options = (self.custom_product or {}).get('options')
        if isinstance(options, dict):
            return ', '.join(f"{key}: {value}" for key, value in options.items())
        return None

    @property
    def line_total(self):
        return Decimal(str(self.offer_price or 0)) * self.quantity


class Payment(models.Model):
    order = models.OneToOneField(Order, on_delete=models.CASCADE, related_name='payment')
    rzr_order_id = models.CharField(max_length=100, blank=True, null=True)
    rzr_payment_id = models.CharField(max_length=100, blank=True, null=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    method = models.CharField(max_length=50, blank=True, null=True)
    via = models.CharField(max_length=50, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'payments'

    def __str__(self):
        return f"Payment for {self.order_id}"
