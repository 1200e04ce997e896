from django.contrib import admin
from .models import Address, Order, OrderItem, Payment


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ['product', 'custom_product', 'quantity', 'base_price', 'offer_price', 'color']


class PaymentInline(admin.StackedInline):
    model = Payment
    extra = 0


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['order_id', 'user', 'status', 'payment_verified', 'total', 'order_date']
    list_filter = ['status', 'payment_verified', 'order_date']
    search_fields = ['order_id', 'user__username', 'user__email']
    readonly_fields = ['order_id', 'packed_date', 'delivered_date']
    inlines = [OrderItemInline, PaymentInline]


@admin.register(Address)
class AddressAdmin(admin.ModelAdmin):
    list_display = ['name', 'user', 'city', 'state', 'pincode', 'created_at']
    search_fields = ['name', 'phone', 'city', 'pincode']
