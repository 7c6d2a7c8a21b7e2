"""
API views for the budgeting domain.

This module provides the viewsets for transactions, categories, category
budgets and goals, the month budget endpoints, the budget warning and
recalculation actions, and the health check. Views stay thin: ledger and
budget writes are delegated to the services through
``ServiceExceptionHandlerMixin``.
"""

import logging

from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework import status, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .mixins import (ListQueryMixin, OwnerScopedQuerysetMixin,
                     ServiceExceptionHandlerMixin, is_elevated, requested_owner_id)
from .models import Category, CategoryBudget, Goal, Transaction
from .permissions import IsOwnerOrElevated
from .serializers import (CategoryBudgetSerializer, CategorySerializer, GoalSerializer,
                          MonthlyBudgetSerializer, MonthlyBudgetUpsertSerializer,
                          TransactionSerializer)
from .services import BudgetService, BudgetWarningService, TransactionService

# Get structured logger for this module
logger = logging.getLogger(__name__)


@api_view(["GET"])
@permission_classes([AllowAny])
def health_check(request):
    return Response(
        {"message": "Budget Buddy API is running", "timestamp": timezone.now().isoformat()}
    )


class BaseOwnedViewSet(
    OwnerScopedQuerysetMixin,
    ListQueryMixin,
    ServiceExceptionHandlerMixin,
    viewsets.ModelViewSet,
):
    """
    Base ViewSet for records owned by one user.

    List requests are narrowed to the caller's records (elevated callers see
    everyone's), then filtered, searched and sorted. Detail requests load the
    object unscoped so ``IsOwnerOrElevated`` decides between 200 and 403.

    ``filter_params`` maps a query parameter to the lookup it filters on.
    """

    permission_classes = [IsAuthenticated, IsOwnerOrElevated]
    model = None
    filter_params = {}
    resource_name = "Record"

    def get_queryset(self):
        queryset = self.scope_queryset(self.model.objects.select_related("user"))
        if self.action == "list":
            queryset = self.apply_filters(queryset)
        return self.filter_list_queryset(queryset)

    def apply_filters(self, queryset):
        for param, lookup in self.filter_params.items():
            value = self.request.query_params.get(param, "").strip()
            if value:
                queryset = queryset.filter(**{lookup: value})
        return queryset

    def retrieve(self, request, *args, **kwargs):
        return Response({"success": True, "data": self.get_serializer(self.get_object()).data})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)
        return Response(
            {
                "success": True,
                "message": f"{self.resource_name} created successfully",
                "data": serializer.data,
            },
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        serializer = self.get_serializer(self.get_object(), data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        self.perform_update(serializer)
        return Response(
            {
                "success": True,
                "message": f"{self.resource_name} updated successfully",
                "data": serializer.data,
            }
        )

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        logger.info(
            "Record deletion requested",
            extra={
                "user_id": request.user.id,
                "object_type": type(instance).__name__,
                "object_id": str(instance.pk),
                "action": "record_delete_requested",
                "component": type(self).__name__,
            },
        )
        self.perform_destroy(instance)
        return Response(
            {"success": True, "message": f"{self.resource_name} deleted successfully"}
        )


# -------------------------------------------------------------------
# TRANSACTIONS
# -------------------------------------------------------------------


class TransactionViewSet(BaseOwnedViewSet):
    """
    Ledger entries. Every write reconciles the budgets it touches.
    """

    serializer_class = TransactionSerializer
    model = Transaction
    resource_name = "Transaction"
    filter_params = {"type": "type", "category": "category__iexact"}
    search_fields = ["category", "description"]
    ordering_fields = ["date", "amount", "category", "type", "created_at"]
    default_ordering = "-date"

    def apply_filters(self, queryset):
        queryset = super().apply_filters(queryset)
        for param, lookup in (("startDate", "date__gte"), ("endDate", "date__lte")):
            raw = self.request.query_params.get(param)
            if not raw:
                continue
            try:
                value = parse_date(raw)
            except ValueError:
                value = None
            if value is None:
                raise ValidationError({param: "Date must be in YYYY-MM-DD format."})
            queryset = queryset.filter(**{lookup: value})
        return queryset

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        transaction, budget_warning = self.handle_service_call(
            TransactionService.create_transaction, serializer.validated_data, request.user
        )
        if budget_warning:
            logger.info(
                "Transaction pushed a budget over its limit",
                extra={
                    "user_id": request.user.id,
                    "transaction_id": str(transaction.pk),
                    "warning_type": budget_warning["type"],
                    "action": "budget_exceeded_on_create",
                    "component": "TransactionViewSet",
                },
            )

        return Response(
            {
                "success": True,
                "message": "Transaction created successfully",
                "data": self.get_serializer(transaction).data,
                "budgetWarning": budget_warning,
            },
            status=status.HTTP_201_CREATED,
        )

    def perform_update(self, serializer):
        serializer.instance = self.handle_service_call(
            TransactionService.update_transaction, serializer.instance, serializer.validated_data
        )

    def perform_destroy(self, instance):
        self.handle_service_call(
            TransactionService.delete_transaction, instance, user=self.request.user
        )


# -------------------------------------------------------------------
# CATEGORIES
# -------------------------------------------------------------------


class CategoryViewSet(BaseOwnedViewSet):
    serializer_class = CategorySerializer
    model = Category
    resource_name = "Category"
    filter_params = {"type": "type"}
    search_fields = ["name"]
    ordering_fields = ["name", "type", "created_at"]
    default_ordering = "name"


# -------------------------------------------------------------------
# CATEGORY BUDGETS
# -------------------------------------------------------------------


class CategoryBudgetViewSet(BaseOwnedViewSet):
    """
    Category budgets plus the ``warnings`` and ``recalculate`` actions.

    ``current_spent`` is never taken from the client; create, recalculate
    and warnings all derive it from the ledger.
    """

    serializer_class = CategoryBudgetSerializer
    model = CategoryBudget
    resource_name = "Budget"
    filter_params = {"category": "category__iexact", "month_year": "month_year"}
    search_fields = ["category", "month_year"]
    ordering_fields = ["month_year", "category", "monthly_limit", "current_spent", "created_at"]
    default_ordering = "-month_year"

    def perform_create(self, serializer):
        serializer.instance = self.handle_service_call(
            BudgetService.create_category_budget, serializer.validated_data, self.request.user
        )

    def perform_update(self, serializer):
        serializer.instance = self.handle_service_call(
            BudgetService.update_category_budget, serializer.instance, serializer.validated_data
        )

    @action(detail=False, methods=["get"])
    def warnings(self, request):
        """
        Exceeded budgets for the caller. Elevated callers get everyone's,
        or one user's with ``?user_id=``.
        """
        if is_elevated(request.user):
            owner = requested_owner_id(request)
        else:
            owner = request.user

        warnings = self.handle_service_call(BudgetWarningService.list_warnings, owner)
        return Response({"success": True, "data": warnings, "count": len(warnings)})

    @action(detail=True, methods=["post"])
    def recalculate(self, request, pk=None):
        budget = self.get_object()
        self.handle_service_call(BudgetService.recalculate, budget)
        return Response(
            {
                "success": True,
                "message": "Budget recalculated successfully",
                "data": self.get_serializer(budget).data,
            }
        )


# -------------------------------------------------------------------
# MONTH BUDGETS
# -------------------------------------------------------------------


class MonthlyBudgetView(ServiceExceptionHandlerMixin, APIView):
    """Read or delete the caller's budget for one month."""

    permission_classes = [IsAuthenticated]

    def get(self, request, month_year):
        budget, spent = self.handle_service_call(
            BudgetService.get_monthly_budget, request.user, month_year
        )
        return Response(
            {
                "success": True,
                "data": MonthlyBudgetSerializer(budget).data if budget is not None else None,
                "current_spent": spent,
            }
        )

    def delete(self, request, month_year):
        self.handle_service_call(BudgetService.delete_monthly_budget, request.user, month_year)
        return Response({"success": True, "message": "Monthly budget deleted successfully"})


class MonthlyBudgetUpsertView(ServiceExceptionHandlerMixin, APIView):
    """Create the caller's month budget or replace its limit."""

    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = MonthlyBudgetUpsertSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        budget, created = self.handle_service_call(
            BudgetService.upsert_monthly_budget,
            request.user,
            data["month_year"],
            data["monthly_limit"],
            currency=data.get("currency"),
        )
        return Response(
            {
                "success": True,
                "message": "Monthly budget saved successfully",
                "data": MonthlyBudgetSerializer(budget).data,
            },
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


# -------------------------------------------------------------------
# GOALS
# -------------------------------------------------------------------


class GoalViewSet(BaseOwnedViewSet):
    serializer_class = GoalSerializer
    model = Goal
    resource_name = "Goal"
    filter_params = {"priority": "priority"}
    search_fields = ["goal_name", "description"]
    ordering_fields = ["target_date", "goal_name", "target_amount", "priority", "created_at"]
    default_ordering = "target_date"
