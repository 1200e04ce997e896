from django.contrib import admin
from .models import Category, Product, ProductImage


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'parent', 'is_deleted', 'created_at']
    list_filter = ['is_deleted', 'created_at']
    search_fields = ['name', 'description']
    ordering = ['name']


class ProductImageInline(admin.TabularInline):
    model = ProductImage
    extra = 0
    fields = ['image_public_id', 'color_variant', 'sequence']
    ordering = ['color_variant', 'sequence']


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['title', 'slug', 'category', 'stock', 'base_price', 'offer_price', 'purchases', 'is_deleted', 'created_at']
    list_filter = ['is_deleted', 'category', 'created_at']
    search_fields = ['title', 'slug']
    readonly_fields = ['purchases', 'created_at', 'updated_at']
    inlines = [ProductImageInline]
