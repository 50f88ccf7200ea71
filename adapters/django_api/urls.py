"""
POSQ Django adapter URL routing.
"""

from django.urls import path

from adapters.django_api import views


urlpatterns = [
    path("catalog/stock", views.catalog_stock_view),
    path("catalog/priced-stock", views.priced_stock_view),
    path("checkout/validate", views.checkout_validate_view),
]
