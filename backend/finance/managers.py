# finance/managers.py
"""
QuerySets for the ledger and the budget store.

``TransactionQuerySet`` is the only way the reconciliation code reads the
ledger, so the matching rules (expense only, inclusive month window,
case-insensitive exact category) live here.
"""

from decimal import Decimal

from django.db import models
from django.db.models import Sum

from .utils.period_utils import month_date_range


class OwnedQuerySet(models.QuerySet):
    def for_owner(self, user):
        return self.filter(user=user)


class TransactionQuerySet(OwnedQuerySet):
    def expenses(self):
        return self.filter(type="expense")

    def in_month(self, month_year):
        """Transactions dated inside the month, both ends inclusive."""
        first_day, last_day = month_date_range(month_year)
        return self.filter(date__gte=first_day, date__lte=last_day)

    def in_category(self, category):
        """Case-insensitive exact match, never a substring match."""
        return self.filter(category__iexact=category)

    def total_amount(self):
        """Exact decimal sum of ``amount``; ``Decimal("0.00")`` when empty."""
        total = self.aggregate(total=Sum("amount"))["total"]
        return total if total is not None else Decimal("0.00")


class BudgetQuerySet(OwnedQuerySet):
    def for_scope(self, user, category, month_year):
        """Category budgets matching a transaction's (owner, category, month)."""
        return self.filter(user=user, month_year=month_year, category__iexact=category)


class MonthlyBudgetQuerySet(OwnedQuerySet):
    def for_month(self, user, month_year):
        return self.filter(user=user, month_year=month_year)
