from django.urls import path
from .views import (
    quote_create, admin_quote_list, admin_quote_detail,
    admin_quote_respond, admin_quote_status, admin_quote_stats,
)

urlpatterns = [
    path('quotes/', quote_create, name='quote-create'),
    path('admin/quotes/', admin_quote_list, name='admin-quote-list'),
    path('admin/quotes/stats/', admin_quote_stats, name='admin-quote-stats'),
    path('admin/quotes/<int:pk>/', admin_quote_detail, name='admin-quote-detail'),
    path('admin/quotes/<int:pk>/respond/', admin_quote_respond, name='admin-quote-respond'),
    path('admin/quotes/<int:pk>/status/', admin_quote_status, name='admin-quote-status'),
]
