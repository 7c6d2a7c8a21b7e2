"""
Service for transaction writes.

This module provides the TransactionService class. Each write and the budget
reconciliation it triggers run in one database transaction, so a failed
reconciliation rolls the ledger write back.
"""

import copy
import logging

from django.core.exceptions import ValidationError
from django.db import transaction as db_transaction

from ..models import TYPE_CHOICES, Transaction
from .budget_sync_service import BudgetSyncService

# Get structured logger for this module
logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("amount", "type", "category", "date", "payment_method", "description")


class TransactionService:
    """
    Ledger writes with budget reconciliation.

    Example:
        >>> transaction, warning = TransactionService.create_transaction(
        ...     {"type": "expense", "amount": Decimal("80"), ...}, user
        ... )
    """

    @staticmethod
    @db_transaction.atomic
    def create_transaction(data, user):
        """
        Create a transaction and reconcile the budgets it counts towards.

        Returns:
            tuple: ``(transaction, budget_warning)`` where ``budget_warning``
            is ``None`` unless a matching budget is now exceeded.

        Raises:
            ValidationError: If data validation fails.
        """
        TransactionService._validate_transaction_data(data)

        transaction = Transaction.objects.create(
            user=user,
            **{field: data[field] for field in UPDATABLE_FIELDS if field in data},
        )
        sync = BudgetSyncService.sync_after_write(before=None, after=transaction)
        budget_warning = sync.inline_warning()

        logger.info(
            "Transaction created",
            extra={
                "user_id": user.id,
                "transaction_id": str(transaction.pk),
                "transaction_type": transaction.type,
                "has_budget_warning": budget_warning is not None,
                "action": "transaction_created",
                "component": "TransactionService",
            },
        )
        return transaction, budget_warning

    @staticmethod
    @db_transaction.atomic
    def update_transaction(transaction, data):
        """
        Apply ``data`` to ``transaction`` and reconcile both the budgets it
        counted towards before and the ones it counts towards now.

        Raises:
            ValidationError: If data validation fails.
        """
        TransactionService._validate_transaction_data(data, is_update=True)

        before = copy.copy(transaction)
        changed_fields = []
        for field in UPDATABLE_FIELDS:
            if field in data and getattr(transaction, field) != data[field]:
                setattr(transaction, field, data[field])
                changed_fields.append(field)

        transaction.save()
        BudgetSyncService.sync_after_write(before=before, after=transaction)

        logger.info(
            "Transaction updated",
            extra={
                "user_id": transaction.user_id,
                "transaction_id": str(transaction.pk),
                "changed_fields": changed_fields,
                "action": "transaction_updated",
                "component": "TransactionService",
            },
        )
        return transaction

    @staticmethod
    @db_transaction.atomic
    def delete_transaction(transaction, user=None):
        """Delete ``transaction`` and reconcile the budgets it counted towards."""
        transaction_id = transaction.pk
        before = copy.copy(transaction)
        transaction.delete()
        BudgetSyncService.sync_after_write(before=before, after=None)

        logger.info(
            "Transaction deleted",
            extra={
                "user_id": getattr(user, "id", None),
                "owner_id": before.user_id,
                "transaction_id": str(transaction_id),
                "action": "transaction_deleted",
                "component": "TransactionService",
            },
        )

    @staticmethod
    def _validate_transaction_data(data, is_update=False):
        """
        Validate transaction data before creation or update.

        Raises:
            ValidationError: If data validation fails
        """
        if not is_update:
            for field in ("type", "amount", "category", "date"):
                if data.get(field) in (None, ""):
                    raise ValidationError(f"Missing required field: {field}")

        valid_types = [choice for choice, _ in TYPE_CHOICES]
        if "type" in data and data["type"] not in valid_types:
            raise ValidationError("Type must be 'income' or 'expense'")

        if "amount" in data and data["amount"] is not None and data["amount"] <= 0:
            raise ValidationError("Amount must be positive")

        if "category" in data and not str(data["category"]).strip():
            raise ValidationError("Category cannot be blank")
