"""
Root URL configuration for the Budget Buddy API.

Authentication and user management live under ``/api/auth/``; every finance
resource (transactions, categories, budgets, goals) under ``/api/``.
"""

from django.contrib import admin
from django.urls import include, path

from finance.views import health_check

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", health_check, name="health-check"),
    path("api/auth/", include("users.urls")),
    path("api/", include("finance.urls")),
]
