"""
URL configuration for the SGTMake admin backend.

Every app contributes its routes under the shared `api/v1/` prefix.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "SGTMake Admin Panel"
admin.site.site_title = "SGTMake Admin Portal"
admin.site.index_title = "Welcome to SGTMake Admin Portal"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('sgtmake.core.urls')),
    path('api/v1/', include('sgtmake.catalog.urls')),
    path('api/v1/', include('sgtmake.hardware.urls')),
    path('api/v1/', include('sgtmake.quotes.urls')),
    path('api/v1/', include('sgtmake.orders.urls')),
    path('api/v1/', include('sgtmake.service_requests.urls')),
    path('api/v1/', include('sgtmake.offers.urls')),
    path('api/v1/', include('sgtmake.reports.urls')),
]
