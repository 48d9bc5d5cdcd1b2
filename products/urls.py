from django.urls import path
from . import views

urlpatterns = [
    # API (consumida pelo backend do distribuidor e pela app de scan)
    path('api/products/sync', views.sync_product, name='sync_product'),
    path('api/products', views.list_products, name='list_products'),
    path('api/products/<int:product_id>', views.product_detail, name='product_detail'),
    path('api/products/<int:product_id>/verify', views.verify_product, name='verify_product'),

    # Página pública aberta pelo QR
    path('product/<int:product_id>', views.product_page, name='product_page'),
    path('health', views.health, name='health'),
]
