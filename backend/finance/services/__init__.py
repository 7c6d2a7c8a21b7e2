# finance/services/__init__.py
from .budget_service import BudgetService
from .budget_sync_service import BudgetSyncService
from .reconciliation_service import BudgetReconciliationService, ReconciledBudget
from .transaction_service import TransactionService
from .warning_service import BudgetWarningService

__all__ = [
    "BudgetReconciliationService",
    "ReconciledBudget",
    "BudgetWarningService",
    "BudgetSyncService",
    "BudgetService",
    "TransactionService",
]
