"""
Keeps budgets in step with ledger writes.

Every transaction create, update and delete that touches an expense calls
``BudgetSyncService.sync_after_write`` inside the same database transaction
as the write itself.
"""

import logging
from dataclasses import dataclass

from ..models import CategoryBudget, MonthlyBudget
from ..utils.period_utils import month_year_for
from .reconciliation_service import BudgetReconciliationService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BudgetScope:
    """(owner, category, month) a single expense counts towards."""

    user_id: int
    category: str
    month_year: str

    @classmethod
    def of(cls, transaction):
        """Scope of an expense, or ``None`` for income."""
        if transaction is None or transaction.type != "expense":
            return None
        return cls(
            user_id=transaction.user_id,
            category=transaction.category,
            month_year=month_year_for(transaction.date),
        )

    def key(self):
        return (self.user_id, self.category.lower(), self.month_year)


@dataclass
class SyncResult:
    category_results: list
    monthly_results: list

    def inline_warning(self):
        """
        At most one warning for a create response.

        An exceeded category budget wins over an exceeded month budget.
        """
        for result in self.category_results:
            if result.exceeded:
                warning = BudgetReconciliationService.build_warning(result.budget)
                return {key: warning[key] for key in _INLINE_CATEGORY_FIELDS}
        for result in self.monthly_results:
            if result.exceeded:
                warning = BudgetReconciliationService.build_warning(result.budget)
                return {key: warning[key] for key in _INLINE_MONTHLY_FIELDS}
        return None


_INLINE_CATEGORY_FIELDS = (
    "type",
    "category",
    "monthly_limit",
    "current_spent",
    "exceeded_by",
    "percentage",
)
_INLINE_MONTHLY_FIELDS = (
    "type",
    "monthly_limit",
    "current_spent",
    "exceeded_by",
    "percentage",
    "month_year",
)


class BudgetSyncService:
    """Reconciles the budgets affected by a ledger write."""

    @staticmethod
    def sync_after_write(before=None, after=None):
        """
        Reconcile every budget the old and new versions of a transaction
        count towards.

        Args:
            before: Transaction state before the write (``None`` on create).
                Must be a detached copy on update, since ``after`` is the
                saved instance.
            after: Transaction state after the write (``None`` on delete).

        Returns:
            SyncResult: Results for the post-write scope first, so callers
            see the budgets the saved transaction counts towards.
        """
        scopes = []
        seen_category = set()
        for scope in (BudgetScope.of(after), BudgetScope.of(before)):
            if scope is not None and scope.key() not in seen_category:
                seen_category.add(scope.key())
                scopes.append(scope)

        category_results = []
        monthly_results = []
        seen_month = set()
        for scope in scopes:
            category_budgets = list(
                CategoryBudget.objects.for_scope(scope.user_id, scope.category, scope.month_year)
            )
            for budget in category_budgets:
                category_results.append(BudgetReconciliationService.reconcile(budget))

            month_key = (scope.user_id, scope.month_year)
            monthly_budgets = []
            if month_key not in seen_month:
                seen_month.add(month_key)
                monthly_budgets = list(
                    MonthlyBudget.objects.for_month(scope.user_id, scope.month_year)
                )
                for budget in monthly_budgets:
                    monthly_results.append(BudgetReconciliationService.reconcile(budget))

            if not category_budgets and not monthly_budgets:
                logger.debug(
                    "No budget matches transaction scope",
                    extra={
                        "user_id": scope.user_id,
                        "category": scope.category,
                        "month_year": scope.month_year,
                        "action": "budget_sync_no_match",
                        "component": "BudgetSyncService",
                    },
                )

        if scopes:
            logger.info(
                "Budgets synced after transaction write",
                extra={
                    "scope_count": len(scopes),
                    "category_budgets_reconciled": len(category_results),
                    "monthly_budgets_reconciled": len(monthly_results),
                    "action": "budget_sync_completed",
                    "component": "BudgetSyncService",
                },
            )
        return SyncResult(category_results=category_results, monthly_results=monthly_results)
