"""
URL configuration for license key API endpoints.
"""

from django.urls import path

from api.v1.keys import views

app_name = "keys"

urlpatterns = [
    path(
        "products/<uuid:product_id>/keys",
        views.ProductKeysView.as_view(),
        name="product-keys",
    ),
    path(
        "<uuid:license_key_id>/deactivate",
        views.DeactivateLicenseKeyView.as_view(),
        name="deactivate-key",
    ),
    path(
        "statistics",
        views.KeyStatisticsView.as_view(),
        name="statistics",
    ),
]
