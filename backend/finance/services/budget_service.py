"""
Service for budget writes and reads that report ``current_spent``.

Every path here that hands a budget back to a client reconciles it first,
so the reported figure always matches the ledger.
"""

import logging

from django.db import transaction as db_transaction

from ..exceptions import BudgetNotFoundError
from ..models import CategoryBudget, MonthlyBudget, Transaction
from ..utils.period_utils import parse_month_year
from .reconciliation_service import BudgetReconciliationService

logger = logging.getLogger(__name__)


class BudgetService:
    """Category budget and month budget lifecycle."""

    # -------------------------------------------------------------------
    # CATEGORY BUDGETS
    # -------------------------------------------------------------------

    @staticmethod
    @db_transaction.atomic
    def create_category_budget(data, user):
        """Create a category budget that starts with the correct spend."""
        parse_month_year(data["month_year"])
        budget = CategoryBudget.objects.create(
            user=user,
            category=data["category"],
            month_year=data["month_year"],
            monthly_limit=data["monthly_limit"],
        )
        BudgetReconciliationService.reconcile(budget)

        logger.info(
            "Category budget created",
            extra={
                "user_id": user.id,
                "budget_id": str(budget.budget_id),
                "month_year": budget.month_year,
                "current_spent": str(budget.current_spent),
                "action": "category_budget_created",
                "component": "BudgetService",
            },
        )
        return budget

    @staticmethod
    @db_transaction.atomic
    def update_category_budget(budget, data):
        """
        Apply ``data``; reconcile again when the category or month moved.
        """
        if "month_year" in data:
            parse_month_year(data["month_year"])

        scope_changed = any(
            field in data and getattr(budget, field) != data[field]
            for field in ("category", "month_year")
        )
        for field in ("category", "month_year", "monthly_limit"):
            if field in data:
                setattr(budget, field, data[field])
        budget.save()

        if scope_changed:
            BudgetReconciliationService.reconcile(budget)

        logger.info(
            "Category budget updated",
            extra={
                "user_id": budget.user_id,
                "budget_id": str(budget.budget_id),
                "scope_changed": scope_changed,
                "action": "category_budget_updated",
                "component": "BudgetService",
            },
        )
        return budget

    @staticmethod
    @db_transaction.atomic
    def recalculate(budget):
        """Reconcile one category budget on request."""
        result = BudgetReconciliationService.reconcile(budget)
        logger.info(
            "Category budget recalculated",
            extra={
                "user_id": budget.user_id,
                "budget_id": str(budget.budget_id),
                "current_spent": str(budget.current_spent),
                "changed": result.changed,
                "action": "category_budget_recalculated",
                "component": "BudgetService",
            },
        )
        return result

    # -------------------------------------------------------------------
    # MONTH BUDGETS
    # -------------------------------------------------------------------

    @staticmethod
    def get_monthly_budget(user, month_year):
        """
        Reconciled month budget, or ``(None, spent)`` when none exists.

        Returns:
            tuple: ``(budget_or_none, current_spent)``
        """
        parse_month_year(month_year)
        budget = MonthlyBudget.objects.for_month(user, month_year).first()
        if budget is None:
            spent = (
                Transaction.objects.for_owner(user).expenses().in_month(month_year).total_amount()
            )
            return None, spent

        BudgetReconciliationService.reconcile(budget)
        return budget, budget.current_spent

    @staticmethod
    @db_transaction.atomic
    def upsert_monthly_budget(user, month_year, monthly_limit, currency=None):
        """
        Create the month budget or update its limit, then reconcile.

        Returns:
            tuple: ``(budget, created)``
        """
        parse_month_year(month_year)
        defaults = {"monthly_limit": monthly_limit}
        if currency:
            defaults["currency"] = currency

        budget, created = MonthlyBudget.objects.update_or_create(
            user=user, month_year=month_year, defaults=defaults
        )
        BudgetReconciliationService.reconcile(budget)

        logger.info(
            "Monthly budget saved",
            extra={
                "user_id": user.id,
                "monthly_budget_id": str(budget.monthly_budget_id),
                "month_year": month_year,
                "created": created,
                "action": "monthly_budget_upserted",
                "component": "BudgetService",
            },
        )
        return budget, created

    @staticmethod
    def delete_monthly_budget(user, month_year):
        """
        Raises:
            BudgetNotFoundError: If the user has no budget for that month.
        """
        parse_month_year(month_year)
        deleted, _ = MonthlyBudget.objects.for_month(user, month_year).delete()
        if not deleted:
            raise BudgetNotFoundError("Monthly budget not found")

        logger.info(
            "Monthly budget deleted",
            extra={
                "user_id": user.id,
                "month_year": month_year,
                "action": "monthly_budget_deleted",
                "component": "BudgetService",
            },
        )
