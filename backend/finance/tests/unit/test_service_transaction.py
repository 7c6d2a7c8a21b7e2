# finance/tests/unit/test_service_transaction.py
from datetime import date
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.core.exceptions import ValidationError
from django.db import DatabaseError

from finance.models import CategoryBudget, MonthlyBudget, Transaction
from finance.services import BudgetSyncService, TransactionService

from ..factories import make_expense

pytestmark = pytest.mark.django_db


def expense_data(**overrides):
    data = {
        "type": "expense",
        "amount": Decimal("80.00"),
        "category": "Groceries",
        "date": date(2024, 3, 5),
    }
    data.update(overrides)
    return data


class TestCreateTransaction:
    def test_create_reconciles_matching_budgets(self, test_user, groceries_budget, march_budget):
        transaction, warning = TransactionService.create_transaction(expense_data(), test_user)

        assert transaction.user == test_user
        groceries_budget.refresh_from_db()
        march_budget.refresh_from_db()
        assert groceries_budget.current_spent == Decimal("80.00")
        assert march_budget.current_spent == Decimal("80.00")
        assert warning is None

    def test_create_returns_category_warning_when_exceeded(self, test_user, groceries_budget):
        make_expense(test_user, "150.00", "groceries", "2024-03-20")

        _, warning = TransactionService.create_transaction(expense_data(), test_user)

        assert warning == {
            "type": "category",
            "category": "Groceries",
            "monthly_limit": Decimal("200.00"),
            "current_spent": Decimal("230.00"),
            "exceeded_by": Decimal("30.00"),
            "percentage": 115,
        }

    def test_category_warning_wins_over_monthly(self, test_user, groceries_budget):
        MonthlyBudget.objects.create(user=test_user, month_year="2024-03", monthly_limit=Decimal("100"))

        _, warning = TransactionService.create_transaction(
            expense_data(amount=Decimal("250.00")), test_user
        )

        assert warning["type"] == "category"

    def test_monthly_warning_when_only_month_exceeded(self, test_user, groceries_budget):
        MonthlyBudget.objects.create(user=test_user, month_year="2024-03", monthly_limit=Decimal("100"))

        _, warning = TransactionService.create_transaction(
            expense_data(amount=Decimal("150.00")), test_user
        )

        assert warning["type"] == "monthly"
        assert warning["month_year"] == "2024-03"
        assert warning["exceeded_by"] == Decimal("50.00")
        assert "category" not in warning

    def test_income_does_not_touch_budgets(self, test_user, groceries_budget):
        _, warning = TransactionService.create_transaction(
            expense_data(type="income", amount=Decimal("999")), test_user
        )

        groceries_budget.refresh_from_db()
        assert groceries_budget.current_spent == Decimal("0.00")
        assert warning is None

    def test_create_without_budget_is_a_noop(self, test_user):
        transaction, warning = TransactionService.create_transaction(expense_data(), test_user)

        assert Transaction.objects.filter(pk=transaction.pk).exists()
        assert warning is None

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"type": None}, "Missing required field: type"),
            ({"amount": Decimal("0")}, "Amount must be positive"),
            ({"type": "transfer"}, "Type must be 'income' or 'expense'"),
            ({"category": "   "}, "Category cannot be blank"),
        ],
    )
    def test_invalid_data_rejected(self, test_user, overrides, message):
        with pytest.raises(ValidationError, match=message):
            TransactionService.create_transaction(expense_data(**overrides), test_user)
        assert not Transaction.objects.exists()

    def test_failed_reconciliation_rolls_back_the_write(self, test_user, groceries_budget):
        with patch(
            "finance.services.budget_sync_service.BudgetReconciliationService.reconcile",
            side_effect=DatabaseError("write failed"),
        ):
            with pytest.raises(DatabaseError):
                TransactionService.create_transaction(expense_data(), test_user)

        assert not Transaction.objects.exists()


class TestUpdateTransaction:
    def test_moving_category_reconciles_old_and_new_budget(self, test_user, groceries_budget):
        dining = CategoryBudget.objects.create(
            user=test_user, category="Dining", month_year="2024-03", monthly_limit=Decimal("100")
        )
        transaction, _ = TransactionService.create_transaction(expense_data(), test_user)

        TransactionService.update_transaction(transaction, {"category": "Dining"})

        groceries_budget.refresh_from_db()
        dining.refresh_from_db()
        assert groceries_budget.current_spent == Decimal("0.00")
        assert dining.current_spent == Decimal("80.00")

    def test_moving_month_reconciles_both_months(self, test_user, groceries_budget):
        april = CategoryBudget.objects.create(
            user=test_user, category="Groceries", month_year="2024-04", monthly_limit=Decimal("100")
        )
        transaction, _ = TransactionService.create_transaction(expense_data(), test_user)

        TransactionService.update_transaction(transaction, {"date": date(2024, 4, 2)})

        groceries_budget.refresh_from_db()
        april.refresh_from_db()
        assert groceries_budget.current_spent == Decimal("0.00")
        assert april.current_spent == Decimal("80.00")

    def test_switching_to_income_releases_the_budget(self, test_user, groceries_budget, march_budget):
        transaction, _ = TransactionService.create_transaction(expense_data(), test_user)

        TransactionService.update_transaction(transaction, {"type": "income"})

        groceries_budget.refresh_from_db()
        march_budget.refresh_from_db()
        assert groceries_budget.current_spent == Decimal("0.00")
        assert march_budget.current_spent == Decimal("0.00")

    def test_amount_change_is_reflected(self, test_user, groceries_budget):
        transaction, _ = TransactionService.create_transaction(expense_data(), test_user)

        TransactionService.update_transaction(transaction, {"amount": Decimal("12.34")})

        groceries_budget.refresh_from_db()
        assert groceries_budget.current_spent == Decimal("12.34")

    def test_update_rejects_non_positive_amount(self, test_user):
        transaction, _ = TransactionService.create_transaction(expense_data(), test_user)

        with pytest.raises(ValidationError):
            TransactionService.update_transaction(transaction, {"amount": Decimal("-1")})


class TestDeleteTransaction:
    def test_delete_reconciles_budget(self, test_user, groceries_budget):
        keep, _ = TransactionService.create_transaction(expense_data(), test_user)
        drop, _ = TransactionService.create_transaction(
            expense_data(amount=Decimal("150.00"), category="groceries"), test_user
        )

        TransactionService.delete_transaction(drop, user=test_user)

        groceries_budget.refresh_from_db()
        assert groceries_budget.current_spent == Decimal("80.00")
        assert list(Transaction.objects.all()) == [keep]


class TestBudgetSync:
    def test_scope_is_deduplicated_case_insensitively(self, test_user, groceries_budget):
        before = make_expense(test_user, "10.00", "GROCERIES", "2024-03-05")
        after = make_expense(test_user, "10.00", "groceries", "2024-03-06")

        with patch(
            "finance.services.budget_sync_service.BudgetReconciliationService.reconcile",
            return_value=None,
        ) as mock_reconcile:
            BudgetSyncService.sync_after_write(before=before, after=after)

        assert mock_reconcile.call_count == 1

    def test_no_matching_budget_logs_debug(self, test_user):
        transaction = make_expense(test_user, "10.00", "Groceries", "2024-03-05")

        with patch("finance.services.budget_sync_service.logger") as mock_logger:
            result = BudgetSyncService.sync_after_write(after=transaction)

        assert result.category_results == []
        assert result.monthly_results == []
        assert result.inline_warning() is None
        actions = [c[1]["extra"]["action"] for c in mock_logger.debug.call_args_list]
        assert "budget_sync_no_match" in actions

    def test_every_duplicate_category_budget_is_reconciled(self, test_user, groceries_budget):
        twin = CategoryBudget.objects.create(
            user=test_user, category="groceries", month_year="2024-03", monthly_limit=Decimal("50")
        )
        transaction = make_expense(test_user, "60.00", "Groceries", "2024-03-05")

        result = BudgetSyncService.sync_after_write(after=transaction)

        twin.refresh_from_db()
        groceries_budget.refresh_from_db()
        assert len(result.category_results) == 2
        assert twin.current_spent == Decimal("60.00")
        assert groceries_budget.current_spent == Decimal("60.00")
