from django.contrib import admin
from .models import PartCategory, PartOption


class PartOptionInline(admin.StackedInline):
    model = PartOption
    extra = 0
    fields = ['name', 'label', 'input_type', 'required', 'help_text', 'values']


@admin.register(PartCategory)
class PartCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'kind', 'is_active', 'created_at']
    list_filter = ['kind', 'is_active']
    search_fields = ['name', 'description']
    inlines = [PartOptionInline]


@admin.register(PartOption)
class PartOptionAdmin(admin.ModelAdmin):
    list_display = ['label', 'name', 'category', 'input_type', 'required']
    list_filter = ['input_type', 'required', 'category__kind']
    search_fields = ['name', 'label', 'category__name']
