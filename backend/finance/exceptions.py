"""
Domain errors raised by the budgeting services.

``InvalidPeriodError`` is also a Django ``ValidationError`` so views that go
through ``ServiceExceptionHandlerMixin`` answer it with HTTP 400, and
``BudgetNotFoundError`` is an ``ObjectDoesNotExist`` so they answer it with
HTTP 404.
"""

from django.core.exceptions import ObjectDoesNotExist, ValidationError


class BudgetError(Exception):
    """Base class for reconciliation failures."""


class InvalidPeriodError(BudgetError, ValidationError):
    """``month_year`` is not a valid ``"YYYY-MM"`` value."""

    def __init__(self, month_year):
        self.month_year = month_year
        ValidationError.__init__(
            self,
            f"Invalid month_year {month_year!r}: expected YYYY-MM.",
            code="invalid_period",
        )


class BudgetNotFoundError(BudgetError, ObjectDoesNotExist):
    """The budget or its owner does not exist."""
