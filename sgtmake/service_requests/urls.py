from django.urls import path
from .views import (
    service_list, service_detail, service_status_update,
    service_download, service_filter, service_stats,
)

urlpatterns = [
    path('services/', service_list, name='service-list'),
    path('services/filter/', service_filter, name='service-filter'),
    path('services/stats/', service_stats, name='service-stats'),
    path('services/<int:pk>/', service_detail, name='service-detail'),
    path('services/<int:pk>/status/', service_status_update, name='service-status-update'),
    path('services/<int:pk>/download/', service_download, name='service-download'),
]
