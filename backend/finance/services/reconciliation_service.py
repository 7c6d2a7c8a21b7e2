"""
Budget reconciliation.

A budget's ``current_spent`` is a cached copy of a ledger sum. This service
recomputes that sum from the ledger, persists it, and derives the exceeded
status and warning payloads from the fresh figure.
"""

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from ..exceptions import BudgetNotFoundError
from ..models import CategoryBudget, MonthlyBudget, Transaction

logger = logging.getLogger(__name__)

WARNING_TYPE_CATEGORY = "category"
WARNING_TYPE_MONTHLY = "monthly"


@dataclass
class ReconciledBudget:
    """A budget after reconciliation, with its status at that instant."""

    budget: object
    exceeded: bool
    previous_spent: Decimal

    @property
    def changed(self):
        return self.previous_spent != self.budget.current_spent


class BudgetReconciliationService:
    """
    Recomputes budget figures straight from the ledger.

    Works on both ``CategoryBudget`` (expenses of one category in the month)
    and ``MonthlyBudget`` (all expenses in the month).
    """

    @staticmethod
    def ledger_for(budget):
        """
        Ledger rows counted against ``budget``.

        Raises:
            BudgetNotFoundError: If the budget has no owner.
            InvalidPeriodError: If ``month_year`` does not parse.
        """
        if budget.user_id is None:
            raise BudgetNotFoundError("Budget has no owner.")

        qs = Transaction.objects.for_owner(budget.user_id).expenses().in_month(
            budget.month_year
        )
        if isinstance(budget, CategoryBudget):
            qs = qs.in_category(budget.category)
        return qs

    @staticmethod
    def compute_spent(budget):
        """Exact decimal total of the matching expenses."""
        return BudgetReconciliationService.ledger_for(budget).total_amount()

    @staticmethod
    def reconcile(budget):
        """
        Overwrite ``current_spent`` with the ledger total and persist it.

        Exactly one write per call, even when the figure is unchanged, so
        calling it twice in a row yields the same stored value. Identity
        fields and ``monthly_limit`` are never touched.

        Returns:
            ReconciledBudget
        """
        previous_spent = budget.current_spent
        budget.current_spent = BudgetReconciliationService.compute_spent(budget)
        budget.save(update_fields=["current_spent", "updated_at"])

        result = ReconciledBudget(
            budget=budget,
            exceeded=budget.current_spent > budget.monthly_limit,
            previous_spent=previous_spent,
        )

        logger.debug(
            "Budget reconciled",
            extra={
                "budget_id": str(budget.pk),
                "budget_type": type(budget).__name__,
                "user_id": budget.user_id,
                "month_year": budget.month_year,
                "previous_spent": str(previous_spent),
                "current_spent": str(budget.current_spent),
                "monthly_limit": str(budget.monthly_limit),
                "exceeded": result.exceeded,
                "changed": result.changed,
                "action": "budget_reconciled",
                "component": "BudgetReconciliationService",
            },
        )
        return result

    @staticmethod
    def percentage(current_spent, monthly_limit):
        """``current_spent / monthly_limit * 100`` rounded half up to an int."""
        ratio = Decimal(current_spent) / Decimal(monthly_limit) * 100
        return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    @staticmethod
    def build_warning(budget):
        """
        Warning payload for an exceeded budget.

        Category budgets produce a ``category`` warning carrying the budget id
        and category name; month budgets produce a ``monthly`` warning.
        """
        payload = {
            "monthly_limit": budget.monthly_limit,
            "current_spent": budget.current_spent,
            "exceeded_by": budget.current_spent - budget.monthly_limit,
            "percentage": BudgetReconciliationService.percentage(
                budget.current_spent, budget.monthly_limit
            ),
            "month_year": budget.month_year,
        }
        if isinstance(budget, MonthlyBudget):
            return {"type": WARNING_TYPE_MONTHLY, **payload}
        return {
            "type": WARNING_TYPE_CATEGORY,
            "budget_id": str(budget.budget_id),
            "category": budget.category,
            **payload,
        }
