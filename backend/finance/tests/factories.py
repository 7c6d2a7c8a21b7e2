"""
Test factories for the budgeting models.
"""

from datetime import date, timedelta
from decimal import Decimal

import factory
from django.contrib.auth import get_user_model
from django.utils import timezone
from factory.django import DjangoModelFactory
from faker import Faker

from finance.models import Category, CategoryBudget, Goal, MonthlyBudget, Transaction

fake = Faker()
User = get_user_model()


class UserFactory(DjangoModelFactory):
    class Meta:
        model = User

    username = factory.Sequence(lambda n: f"user_{n}")
    email = factory.Sequence(lambda n: f"user_{n}@example.com")
    password = "testpass123"
    is_active = True
    first_name = factory.LazyAttribute(lambda _: fake.first_name())
    last_name = factory.LazyAttribute(lambda _: fake.last_name())

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        """Override to use create_user method for proper password handling."""
        manager = cls._get_manager(model_class)
        return manager.create_user(*args, **kwargs)


class ManagerFactory(UserFactory):
    role = "manager"


class TransactionFactory(DjangoModelFactory):
    class Meta:
        model = Transaction

    user = factory.SubFactory(UserFactory)
    type = "expense"
    amount = factory.LazyAttribute(lambda _: Decimal(fake.random_int(100, 50000)) / 100)
    category = factory.Iterator(["Groceries", "Rent", "Transport", "Dining"])
    date = factory.LazyFunction(timezone.localdate)
    payment_method = "cash"
    description = factory.LazyAttribute(lambda _: fake.sentence(nb_words=4)[:200])


class CategoryFactory(DjangoModelFactory):
    class Meta:
        model = Category

    user = factory.SubFactory(UserFactory)
    name = factory.Sequence(lambda n: f"Category {n}")
    type = "expense"
    color = "#1a2b3c"
    icon = "cart"


class CategoryBudgetFactory(DjangoModelFactory):
    class Meta:
        model = CategoryBudget

    user = factory.SubFactory(UserFactory)
    category = "Groceries"
    month_year = factory.LazyFunction(lambda: timezone.localdate().strftime("%Y-%m"))
    monthly_limit = Decimal("200.00")


class MonthlyBudgetFactory(DjangoModelFactory):
    class Meta:
        model = MonthlyBudget

    user = factory.SubFactory(UserFactory)
    month_year = factory.LazyFunction(lambda: timezone.localdate().strftime("%Y-%m"))
    monthly_limit = Decimal("1000.00")
    currency = "USD"


class GoalFactory(DjangoModelFactory):
    class Meta:
        model = Goal

    user = factory.SubFactory(UserFactory)
    goal_name = factory.LazyAttribute(lambda _: fake.sentence(nb_words=3)[:100])
    target_amount = Decimal("1000.00")
    current_amount = Decimal("250.00")
    target_date = factory.LazyFunction(lambda: timezone.localdate() + timedelta(days=180))
    priority = factory.Iterator(["low", "medium", "high"])


def make_expense(user, amount, category="Groceries", day="2024-03-10", **kwargs):
    """Ledger row written straight to the table, without reconciliation."""
    return Transaction.objects.create(
        user=user,
        type=kwargs.pop("type", "expense"),
        amount=Decimal(amount),
        category=category,
        date=date.fromisoformat(day) if isinstance(day, str) else day,
        **kwargs,
    )
