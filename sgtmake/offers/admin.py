from django.contrib import admin
from .models import BestDeal, HeroBanner, MarqueeOffer


@admin.register(BestDeal)
class BestDealAdmin(admin.ModelAdmin):
    list_display = ['title', 'price', 'url', 'created_at']
    search_fields = ['title']


@admin.register(HeroBanner)
class HeroBannerAdmin(admin.ModelAdmin):
    list_display = ['title', 'base_price', 'offer_price', 'url', 'created_at']
    search_fields = ['title']


@admin.register(MarqueeOffer)
class MarqueeOfferAdmin(admin.ModelAdmin):
    list_display = ['title', 'created_at']
