# tests/conftest.py
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from finance.models import CategoryBudget, MonthlyBudget

User = get_user_model()

# =============================================================================
# USER FIXTURES
# =============================================================================


@pytest.fixture
def test_user(db):
    """Basic test user"""
    return User.objects.create_user(
        username="testuser", email="test@example.com", password="testpass123"
    )


@pytest.fixture
def test_user2(db):
    """Second test user, owns nothing of test_user's"""
    return User.objects.create_user(
        username="testuser2", email="test2@example.com", password="testpass123"
    )


@pytest.fixture
def manager_user(db):
    return User.objects.create_user(
        username="manager", email="manager@example.com", password="testpass123", role="manager"
    )


@pytest.fixture
def superuser(db):
    """Superuser, elevated without a role"""
    return User.objects.create_superuser(
        username="superuser", email="admin@example.com", password="adminpass123"
    )


# =============================================================================
# API CLIENT FIXTURES
# =============================================================================


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def authenticated_client(api_client, test_user):
    api_client.force_authenticate(user=test_user)
    return api_client


# =============================================================================
# LEDGER AND BUDGET FIXTURES
# =============================================================================


@pytest.fixture
def groceries_budget(test_user):
    """Groceries budget for March 2024 with a 200.00 limit"""
    return CategoryBudget.objects.create(
        user=test_user, category="Groceries", month_year="2024-03", monthly_limit=Decimal("200.00")
    )


@pytest.fixture
def march_budget(test_user):
    """Whole-month budget for March 2024 with a 1000.00 limit"""
    return MonthlyBudget.objects.create(
        user=test_user, month_year="2024-03", monthly_limit=Decimal("1000.00")
    )
