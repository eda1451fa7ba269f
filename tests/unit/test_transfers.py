"""Unit tests for internal transfer detection"""

from datetime import date

from finhub_engine.domain.models import Expense, Income
from finhub_engine.domain.transfers import is_transfer

DAY = date(2026, 10, 17)


def expense(**kwargs) -> Expense:
    return Expense(id="e1", amount=1000, category=kwargs.pop("category", "Shopping"), date=DAY, **kwargs)


def test_explicit_flag():
    assert is_transfer(expense(is_internal_transfer=True))


def test_transfer_category():
    assert is_transfer(expense(category="Self Transfer"))


def test_card_bill_description():
    assert is_transfer(expense(description="HDFC Credit Card Bill"))
    assert is_transfer(expense(description="CC bill October"))


def test_transfer_tag():
    assert is_transfer(expense(tags=("Internal",)))


def test_utility_bill_payment_is_spend():
    assert not is_transfer(expense(category="Bills & Utilities", description="Electricity bill payment"))


def test_income_source():
    income = Income(id="i1", amount=5000, date=DAY, source="Transfer from savings")

    assert is_transfer(income)
    assert not is_transfer(Income(id="i2", amount=5000, date=DAY, source="Salary"))
