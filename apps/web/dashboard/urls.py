"""
Dashboard URL routes.
"""

from django.urls import path

from . import views

app_name = "dashboard"

urlpatterns = [
    path("api/orders/today", views.orders_today, name="orders-today"),
]
