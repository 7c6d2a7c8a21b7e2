from django.contrib import admin, messages
from django.db import transaction as db_transaction

from .models import Category, CategoryBudget, Goal, MonthlyBudget, Transaction
from .services import BudgetReconciliationService, TransactionService
from .services.transaction_service import UPDATABLE_FIELDS


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """Ledger writes go through TransactionService so budgets stay reconciled."""

    list_display = ("date", "user", "type", "category", "amount", "payment_method")
    list_filter = ("type", "payment_method")
    search_fields = ("category", "description", "user__email")
    date_hierarchy = "date"

    def get_readonly_fields(self, request, obj=None):
        if obj is not None:
            return ("user", "created_at", "updated_at")
        return ("created_at", "updated_at")

    def save_model(self, request, obj, form, change):
        data = {field: getattr(obj, field) for field in UPDATABLE_FIELDS}
        if change:
            TransactionService.update_transaction(Transaction.objects.get(pk=obj.pk), data)
        else:
            saved, _ = TransactionService.create_transaction(data, obj.user)
            obj.pk = saved.pk
            obj._state.adding = False
        obj.refresh_from_db()

    def delete_model(self, request, obj):
        TransactionService.delete_transaction(obj, user=request.user)

    def delete_queryset(self, request, queryset):
        with db_transaction.atomic():
            for transaction in list(queryset):
                TransactionService.delete_transaction(transaction, user=request.user)


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "user", "type", "monthly_limit")
    list_filter = ("type",)
    search_fields = ("name", "user__email")


class BudgetAdminBase(admin.ModelAdmin):
    # Spend is derived from the ledger, use the recalculate action instead
    readonly_fields = ("current_spent", "created_at", "updated_at")
    actions = ["recalculate_selected"]

    @admin.action(description="Recalculate spend from transactions")
    def recalculate_selected(self, request, queryset):
        changed = 0
        for budget in queryset:
            if BudgetReconciliationService.reconcile(budget).changed:
                changed += 1
        self.message_user(
            request,
            f"{queryset.count()} budget(s) recalculated, {changed} changed.",
            messages.SUCCESS,
        )


@admin.register(CategoryBudget)
class CategoryBudgetAdmin(BudgetAdminBase):
    list_display = ("category", "user", "month_year", "monthly_limit", "current_spent")
    list_filter = ("month_year",)
    search_fields = ("category", "user__email")


@admin.register(MonthlyBudget)
class MonthlyBudgetAdmin(BudgetAdminBase):
    list_display = ("month_year", "user", "monthly_limit", "current_spent", "currency")
    list_filter = ("month_year",)
    search_fields = ("user__email",)


@admin.register(Goal)
class GoalAdmin(admin.ModelAdmin):
    list_display = ("goal_name", "user", "target_amount", "current_amount", "target_date", "priority")
    list_filter = ("priority",)
    search_fields = ("goal_name", "user__email")
