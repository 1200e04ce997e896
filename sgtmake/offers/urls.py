from django.urls import path
from .views import offer_list, best_deal, hero_banner, marquee_offer_create, marquee_offer_delete

urlpatterns = [
    path('offers/', offer_list, name='offer-list'),
    path('offers/best-deal/', best_deal, name='best-deal'),
    path('offers/hero-banner/', hero_banner, name='hero-banner'),
    path('offers/marquee/', marquee_offer_create, name='marquee-offer-create'),
    path('offers/marquee/<int:pk>/', marquee_offer_delete, name='marquee-offer-delete'),
]
