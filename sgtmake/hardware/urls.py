from django.urls import path
from .views import (
    fastener_category_list_create, fastener_category_detail,
    fastener_option_list_create, fastener_option_detail,
    connector_category_list_create, connector_category_detail,
    connector_option_list_create, connector_option_detail,
)

urlpatterns = [
    # Fastener endpoints
    path('admin/fasteners/categories/', fastener_category_list_create, name='fastener-category-list-create'),
    path('admin/fasteners/categories/<int:pk>/', fastener_category_detail, name='fastener-category-detail'),
    path('admin/fasteners/categories/<int:pk>/options/', fastener_option_list_create, name='fastener-option-list-create'),
    path('admin/fasteners/options/<int:pk>/', fastener_option_detail, name='fastener-option-detail'),

    # Connector and wire endpoints
    path('admin/connectors/categories/', connector_category_list_create, name='connector-category-list-create'),
    path('admin/connectors/categories/<int:pk>/', connector_category_detail, name='connector-category-detail'),
    path('admin/connectors/categories/<int:pk>/options/', connector_option_list_create, name='connector-option-list-create'),
    path('admin/connectors/options/<int:pk>/', connector_option_detail, name='connector-option-detail'),
]
