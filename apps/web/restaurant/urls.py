"""
URL routing for restaurant API endpoints.

All endpoints are public (no auth required) and CORS-enabled.
"""

from django.urls import path

from apps.web.restaurant import views

app_name = "restaurant"

urlpatterns = [
    path("menu", views.menu_list, name="menu_list"),
    path("menu/<slug:item_slug>", views.menu_item_detail, name="menu_item_detail"),
]
