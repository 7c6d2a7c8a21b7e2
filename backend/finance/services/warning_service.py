"""
Budget warning aggregation.

Reconciles every budget in an owner scope and reports the exceeded ones.
"""

import logging

from django.db import DatabaseError
from django.db import transaction as db_transaction

from ..exceptions import BudgetError
from ..models import CategoryBudget, MonthlyBudget
from ..utils.period_utils import current_month_year
from .reconciliation_service import BudgetReconciliationService

logger = logging.getLogger(__name__)


class BudgetWarningService:
    """
    Builds the exceeded-budget list for an owner, or for everyone.

    Category budgets are checked for every month they exist in; month
    budgets only for the current calendar month. One budget failing to
    reconcile is logged and skipped so the rest of the list still comes
    back.
    """

    @staticmethod
    def list_warnings(owner=None):
        """
        Args:
            owner: User (or user id) whose budgets are checked, or ``None`` for all users
                (elevated callers only; the view decides).

        Returns:
            list[dict]: Category warnings first in store order, then monthly
            warnings.
        """
        category_budgets = CategoryBudget.objects.select_related("user")
        monthly_budgets = MonthlyBudget.objects.filter(month_year=current_month_year())
        if owner is not None:
            category_budgets = category_budgets.for_owner(owner)
            monthly_budgets = monthly_budgets.for_owner(owner)

        category_warnings = BudgetWarningService._collect(category_budgets)
        monthly_warnings = BudgetWarningService._collect(monthly_budgets)
        warnings = category_warnings + monthly_warnings

        logger.info(
            "Budget warnings computed",
            extra={
                "user_id": getattr(owner, "id", owner),
                "scope": "owner" if owner is not None else "all",
                "category_warning_count": len(category_warnings),
                "monthly_warning_count": len(monthly_warnings),
                "action": "budget_warnings_listed",
                "component": "BudgetWarningService",
            },
        )
        return warnings

    @staticmethod
    def _collect(budgets):
        warnings = []
        for budget in budgets:
            try:
                # Savepoint: a failed write must not poison the outer transaction
                with db_transaction.atomic():
                    result = BudgetReconciliationService.reconcile(budget)
            except (BudgetError, DatabaseError) as e:
                logger.error(
                    "Budget reconciliation failed, skipping budget",
                    extra={
                        "budget_id": str(budget.pk),
                        "budget_type": type(budget).__name__,
                        "user_id": budget.user_id,
                        "month_year": budget.month_year,
                        "error_type": type(e).__name__,
                        "error_message": str(e),
                        "action": "budget_reconciliation_skipped",
                        "component": "BudgetWarningService",
                        "severity": "high",
                    },
                    exc_info=True,
                )
                continue

            if result.exceeded:
                warnings.append(BudgetReconciliationService.build_warning(result.budget))
        return warnings
