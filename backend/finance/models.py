"""
Database models for the budgeting domain.

This module defines the transaction ledger, spending categories, the two
budget kinds (per-category and whole-month) whose ``current_spent`` figures
are derived from the ledger, and savings goals.
"""

import logging
import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxLengthValidator, MinValueValidator, RegexValidator
from django.db import models

from .managers import BudgetQuerySet, MonthlyBudgetQuerySet, TransactionQuerySet
from .utils.period_utils import MONTH_YEAR_PATTERN

# Get structured logger for this module
logger = logging.getLogger(__name__)

month_year_validator = RegexValidator(
    MONTH_YEAR_PATTERN, "month_year must be in YYYY-MM format."
)

TYPE_INCOME = "income"
TYPE_EXPENSE = "expense"
TYPE_CHOICES = [
    (TYPE_INCOME, "Income"),
    (TYPE_EXPENSE, "Expense"),
]


# -------------------------------------------------------------------
# TRANSACTIONS
# -------------------------------------------------------------------
# The ledger every budget figure is derived from


class Transaction(models.Model):
    """
    Single income or expense record owned by one user.

    ``category`` is a free-text label; budgets match it case-insensitively.
    """

    PAYMENT_METHOD_CHOICES = [
        ("cash", "Cash"),
        ("credit_card", "Credit card"),
        ("debit_card", "Debit card"),
        ("bank_transfer", "Bank transfer"),
        ("online", "Online"),
        ("other", "Other"),
    ]

    transaction_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="transactions"
    )
    amount = models.DecimalField(
        max_digits=14, decimal_places=2, validators=[MinValueValidator(Decimal("0.01"))]
    )
    type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    category = models.CharField(max_length=100)
    date = models.DateField()
    payment_method = models.CharField(
        max_length=20, choices=PAYMENT_METHOD_CHOICES, default="cash"
    )
    description = models.CharField(max_length=200, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TransactionQuerySet.as_manager()

    class Meta:
        indexes = [
            models.Index(fields=["user", "date"], name="idx_tx_user_date"),
            models.Index(fields=["user", "type", "date"], name="idx_tx_user_type_date"),
        ]
        ordering = ["-date", "-created_at"]

    @property
    def is_expense(self):
        return self.type == TYPE_EXPENSE

    def clean(self):
        super().clean()
        if self.amount is not None and self.amount <= 0:
            logger.warning(
                "Transaction validation failed - invalid amount",
                extra={
                    "transaction_id": str(self.pk),
                    "amount": str(self.amount),
                    "action": "transaction_validation_failed",
                    "component": "Transaction",
                    "severity": "medium",
                },
            )
            raise ValidationError("Transaction amount must be positive")

    def __str__(self):
        return f"{self.user} | {self.type} | {self.category} | {self.amount} | {self.date}"


# -------------------------------------------------------------------
# CATEGORIES
# -------------------------------------------------------------------
# User-defined labels with display metadata


class Category(models.Model):
    """
    Named income or expense category with display color and icon.

    Transactions reference categories by name, not by key, so renaming a
    category does not rewrite history.
    """

    category_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="categories"
    )
    name = models.CharField(max_length=100)
    type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    color = models.CharField(
        max_length=7,
        blank=True,
        validators=[RegexValidator(r"^#[0-9A-Fa-f]{6}$", "Color must be a hex code like #1a2b3c.")],
    )
    icon = models.CharField(max_length=50, blank=True)
    monthly_limit = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "categories"
        ordering = ["name"]
        indexes = [models.Index(fields=["user", "type"], name="idx_category_user_type")]

    def __str__(self):
        return f"{self.name} ({self.type})"


# -------------------------------------------------------------------
# BUDGETS
# -------------------------------------------------------------------
# current_spent on both kinds is derived from the ledger by reconciliation


class BudgetBase(models.Model):
    """Fields shared by category and month budgets."""

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE)
    month_year = models.CharField(max_length=7, validators=[month_year_validator])
    monthly_limit = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    current_spent = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(0)],
        help_text="Derived from the ledger; only written by reconciliation",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    @property
    def exceeded(self):
        return self.current_spent > self.monthly_limit


class CategoryBudget(BudgetBase):
    """
    Spending limit for one category in one month.

    Several rows for the same (user, category, month) are tolerated; each is
    reconciled on its own.
    """

    budget_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    category = models.CharField(max_length=100)

    objects = BudgetQuerySet.as_manager()

    class Meta:
        ordering = ["-month_year", "category"]
        indexes = [
            models.Index(fields=["user", "month_year"], name="idx_budget_user_month"),
        ]

    def __str__(self):
        return f"{self.user} | {self.category} | {self.month_year} | {self.current_spent}/{self.monthly_limit}"


class MonthlyBudget(BudgetBase):
    """Spending limit for all expenses of one user in one month."""

    monthly_budget_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    currency = models.CharField(
        max_length=3,
        default="USD",
        validators=[RegexValidator(r"^[A-Z]{3}$", "Currency must be a 3-letter code.")],
    )

    objects = MonthlyBudgetQuerySet.as_manager()

    class Meta:
        ordering = ["-month_year"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "month_year"], name="uniq_monthly_budget_user_month"
            ),
        ]

    def __str__(self):
        return f"{self.user} | {self.month_year} | {self.current_spent}/{self.monthly_limit}"


# -------------------------------------------------------------------
# GOALS
# -------------------------------------------------------------------


class Goal(models.Model):
    """Savings goal with a target amount and date."""

    PRIORITY_CHOICES = [
        ("low", "Low"),
        ("medium", "Medium"),
        ("high", "High"),
    ]

    goal_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="goals"
    )
    goal_name = models.CharField(max_length=100)
    target_amount = models.DecimalField(
        max_digits=14, decimal_places=2, validators=[MinValueValidator(Decimal("0.01"))]
    )
    current_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(0)],
    )
    target_date = models.DateField()
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default="medium")
    description = models.TextField(blank=True, validators=[MaxLengthValidator(500)])
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["target_date"]

    @property
    def progress_percentage(self):
        """Share of the target already saved, capped at 100."""
        if not self.target_amount:
            return 0
        progress = self.current_amount / self.target_amount * 100
        return min(round(float(progress), 2), 100.0)

    def __str__(self):
        return f"{self.goal_name} ({self.current_amount}/{self.target_amount})"
