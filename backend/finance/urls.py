"""
URL configuration for the budgeting API.

This module defines the RESTful routes for transactions, categories,
category budgets and goals, plus the month budget endpoints. Mounted under
``/api/``.
"""

from django.urls import path
from rest_framework.routers import DefaultRouter

from . import views

# Initialize DefaultRouter for RESTful API endpoints
router = DefaultRouter()
router.include_root_view = False

# Ledger endpoints; writes reconcile budgets
router.register(r"transactions", views.TransactionViewSet, basename="transaction")

router.register(r"categories", views.CategoryViewSet, basename="category")

# Category budgets with warnings/ and <pk>/recalculate/ actions
router.register(r"budgets", views.CategoryBudgetViewSet, basename="budget")

router.register(r"goals", views.GoalViewSet, basename="goal")

# Month budget routes come before the router so "monthly" is never read as a budget id
urlpatterns = [
    path(
        "budgets/monthly/",
        views.MonthlyBudgetUpsertView.as_view(),
        name="monthly-budget-upsert",
    ),
    path(
        "budgets/monthly/<str:month_year>/",
        views.MonthlyBudgetView.as_view(),
        name="monthly-budget-detail",
    ),
] + router.urls
