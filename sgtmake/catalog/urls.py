from django.urls import path
from .views import (
    category_list_create, category_detail, category_end_child,
    product_list_create, product_detail, product_orders,
)

urlpatterns = [
    # Category endpoints
    path('categories/', category_list_create, name='category-list-create'),
    path('categories/end-child/', category_end_child, name='category-end-child'),
    path('categories/<int:pk>/', category_detail, name='category-detail'),

    # Product endpoints
    path('products/', product_list_create, name='product-list-create'),
    path('products/<int:pk>/', product_detail, name='product-detail'),
    path('products/<int:pk>/orders/', product_orders, name='product-orders'),
]
