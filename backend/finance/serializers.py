"""
Serializers for the budgeting API.

Ledger and budget writes are validated here and executed by the services;
``current_spent`` is read-only everywhere because only reconciliation may
set it.
"""

import logging
from decimal import Decimal

from rest_framework import serializers

from .mixins.owner_scope import OwnerAssignmentMixin
from .models import Category, CategoryBudget, Goal, MonthlyBudget, Transaction
from .utils.period_utils import MONTH_YEAR_PATTERN

# Get structured logger for this module
logger = logging.getLogger(__name__)

MONTH_YEAR_ERRORS = {"invalid": "month_year must be in YYYY-MM format."}


class TransactionSerializer(serializers.ModelSerializer):
    """Ledger entry; writes go through TransactionService."""

    amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal("0.01")
    )
    category = serializers.CharField(max_length=100, trim_whitespace=True)
    description = serializers.CharField(
        max_length=200, required=False, allow_blank=True, trim_whitespace=True
    )

    class Meta:
        model = Transaction
        fields = [
            "transaction_id",
            "user",
            "amount",
            "type",
            "category",
            "date",
            "payment_method",
            "description",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["transaction_id", "user", "created_at", "updated_at"]


class CategorySerializer(OwnerAssignmentMixin, serializers.ModelSerializer):
    color = serializers.RegexField(
        r"^#[0-9A-Fa-f]{6}$",
        required=False,
        allow_blank=True,
        error_messages={"invalid": "Color must be a hex code like #1a2b3c."},
    )
    icon = serializers.CharField(max_length=50, required=False, allow_blank=True)
    monthly_limit = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=0, required=False, allow_null=True
    )

    class Meta:
        model = Category
        fields = [
            "category_id",
            "user",
            "name",
            "type",
            "color",
            "icon",
            "monthly_limit",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["category_id", "user", "created_at", "updated_at"]

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Category name cannot be blank.")
        return value


class CategoryBudgetSerializer(serializers.ModelSerializer):
    """Category budget; ``current_spent`` and ``exceeded`` come from reconciliation."""

    month_year = serializers.RegexField(MONTH_YEAR_PATTERN, error_messages=MONTH_YEAR_ERRORS)
    monthly_limit = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal("0.01")
    )
    exceeded = serializers.BooleanField(read_only=True)

    class Meta:
        model = CategoryBudget
        fields = [
            "budget_id",
            "user",
            "category",
            "month_year",
            "monthly_limit",
            "current_spent",
            "exceeded",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["budget_id", "user", "current_spent", "created_at", "updated_at"]

    def validate_category(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("category is required")
        return value

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if "current_spent" in self.initial_data:
            logger.debug(
                "Client-supplied current_spent ignored",
                extra={
                    "budget_id": str(getattr(self.instance, "pk", "new")),
                    "action": "current_spent_ignored",
                    "component": "CategoryBudgetSerializer",
                },
            )
        return attrs


class MonthlyBudgetSerializer(serializers.ModelSerializer):
    exceeded = serializers.BooleanField(read_only=True)

    class Meta:
        model = MonthlyBudget
        fields = [
            "monthly_budget_id",
            "user",
            "month_year",
            "monthly_limit",
            "current_spent",
            "currency",
            "exceeded",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class MonthlyBudgetUpsertSerializer(serializers.Serializer):
    """Payload for creating or updating the month budget."""

    month_year = serializers.RegexField(MONTH_YEAR_PATTERN, error_messages=MONTH_YEAR_ERRORS)
    monthly_limit = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal("0.01")
    )
    currency = serializers.RegexField(r"^[A-Za-z]{3}$", required=False)

    def validate_currency(self, value):
        return value.upper()


class GoalSerializer(OwnerAssignmentMixin, serializers.ModelSerializer):
    target_amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal("0.01")
    )
    current_amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=0, required=False
    )
    description = serializers.CharField(max_length=500, required=False, allow_blank=True)
    progress_percentage = serializers.FloatField(read_only=True)

    class Meta:
        model = Goal
        fields = [
            "goal_id",
            "user",
            "goal_name",
            "target_amount",
            "current_amount",
            "target_date",
            "priority",
            "description",
            "progress_percentage",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["goal_id", "user", "created_at", "updated_at"]
