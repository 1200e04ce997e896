from rest_framework import serializers
from django.utils import timezone

from sgtmake.core.serializers import UserSummarySerializer
from sgtmake.notifications.formatting import format_long_date
from .models import Address, Order, OrderItem, Payment


class AddressSerializer(serializers.ModelSerializer):
    class Meta:
        model = Address
        fields = [
            'id', 'user', 'name', 'phone', 'alt_phone', 'address_line_1', 'address_line_2',
            'landmark', 'city', 'state', 'pincode', 'created_at',
        ]


class PaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        fields = ['id', 'rzr_order_id', 'rzr_payment_id', 'amount', 'method', 'via', 'created_at']


class OrderItemSerializer(serializers.ModelSerializer):
    title = serializers.CharField(read_only=True)
    image = serializers.CharField(read_only=True)
    variant = serializers.CharField(read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            'id', 'product', 'custom_product', 'title', 'image', 'variant',
            'quantity', 'base_price', 'offer_price', 'line_total',
        ]


class OrderListSerializer(serializers.ModelSerializer):
    """Row of the orders table; expects `items_count` to be annotated"""
    status = serializers.CharField(source='display_status', read_only=True)
    user_id = serializers.IntegerField(read_only=True)
    address_id = serializers.IntegerField(read_only=True)
    items_count = serializers.IntegerField(read_only=True, default=0)
    order_date = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'order_id', 'payment_verified', 'status', 'total',
            'user_id', 'address_id', 'items_count', 'order_date',
        ]

    def get_order_date(self, obj):
        return format_long_date(timezone.localtime(obj.order_date))


class OrderDetailSerializer(serializers.ModelSerializer):
    status = serializers.CharField(source='display_status', read_only=True)
    user = UserSummarySerializer(read_only=True)
    address = AddressSerializer(read_only=True)
    payment = serializers.SerializerMethodField()
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'order_id', 'status', 'payment_verified', 'total', 'order_date',
            'packed_date', 'delivered_date', 'user', 'address', 'payment', 'items',
        ]

    def get_payment(self, obj):
        try:
            return PaymentSerializer(obj.payment).data
        except Payment.DoesNotExist:
            return None
