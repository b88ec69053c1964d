"""
URL configuration for Souq Orders.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("dashboard/", include("apps.web.dashboard.urls")),
    # Public API endpoints
    path("api/", include("apps.web.payments.urls")),
    path("api/restaurants/<slug:slug>/", include("apps.web.restaurant.urls")),
]
