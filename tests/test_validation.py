from datetime import date

from fintrack.domain import BankAccount, Budget, Category, SavingsGoal, Transaction
from fintrack.functional import Err, Ok
from fintrack.validation import (
    is_valid_month,
    validate_bank_account_form,
    validate_budget_form,
    validate_category_form,
    validate_contribution_form,
    validate_goal_form,
    validate_transaction_form,
)


def test_valid_transaction_form_builds_transaction():
    result = validate_transaction_form({
        "title": " Lunch ", "amount": "12.50", "type": "expense", "category": "Food",
        "category_id": 1, "date": date(2024, 6, 5),
    })

    assert isinstance(result, Ok)
    tx = result.value
    assert isinstance(tx, Transaction)
    assert (tx.title, tx.amount, tx.date, tx.category_id) == ("Lunch", 12.5, "2024-06-05", 1)


def test_transaction_form_reports_every_bad_field():
    result = validate_transaction_form({"title": "", "amount": 0, "category": "", "date": None})

    assert isinstance(result, Err)
    assert result.kind == "validation"
    assert result.details == {
        "title": "Please enter a title",
        "amount": "Please enter a valid amount",
        "category": "Please select a category",
        "date": "Please select a date",
    }


def test_transaction_form_rejects_unknown_type_and_text_amount():
    result = validate_transaction_form({
        "title": "x", "amount": "abc", "type": "transfer", "category": "Food", "date": "2024-06-01",
    })
    assert set(result.details) == {"amount", "type"}


def test_budget_form():
    ok = validate_budget_form({"title": "Food", "category": "Food", "category_id": 1,
                               "limit": 120, "month": "2024-06"})
    assert isinstance(ok.value, Budget)
    assert ok.value.limit == 120.0

    err = validate_budget_form({"title": "Food", "category": "Food", "limit": -5, "month": "2024-13"})
    assert set(err.details) == {"limit", "month"}


def test_category_form():
    ok = validate_category_form({"name": "Pets", "type": "expense", "icon": "Dog", "color": "#aabbcc"})
    assert isinstance(ok.value, Category)
    assert ok.value.is_custom is True

    err = validate_category_form({"name": "", "type": "", "icon": "", "color": "blue"})
    assert set(err.details) == {"name", "type", "icon", "color"}


def test_bank_account_form():
    ok = validate_bank_account_form({"account_name": "Main", "account_type": "Checking", "balance": "-20"})
    assert isinstance(ok.value, BankAccount)
    assert ok.value.balance == -20.0

    missing = validate_bank_account_form({"account_name": "Main", "account_type": "Brokerage", "balance": ""})
    assert missing.details == {
        "account_type": "Account type is required",
        "balance": "Balance is required",
    }
    bad = validate_bank_account_form({"account_name": "Main", "account_type": "Savings", "balance": "lots"})
    assert bad.details == {"balance": "Balance must be a valid number"}


def test_goal_and_contribution_forms():
    ok = validate_goal_form({"name": "Trip", "target_amount": 900, "target_date": date(2025, 1, 1)})
    assert isinstance(ok.value, SavingsGoal)
    assert ok.value.current_amount == 0
    assert ok.value.target_date == "2025-01-01"

    assert set(validate_goal_form({}).details) == {"name", "target_amount", "target_date"}

    assert validate_contribution_form({"contribution": "25"}) == Ok(25.0)
    assert validate_contribution_form({"contribution": 0}).details == {
        "contribution": "Please enter a valid amount",
    }


def test_infinite_amounts_rejected():
    assert set(validate_transaction_form({
        "title": "x", "amount": float("inf"), "category": "Food", "date": "2024-06-01",
    }).details) == {"amount"}
    assert validate_budget_form({"title": "b", "category": "Food", "limit": "inf",
                                 "month": "2024-06"}).details == {"limit": "Please enter a valid budget limit"}
    assert validate_bank_account_form({"account_name": "Main", "account_type": "Savings",
                                       "balance": "nan"}).details == {"balance": "Balance must be a valid number"}


def test_is_valid_month():
    assert is_valid_month("2024-06")
    assert not is_valid_month("2024-6")
    assert not is_valid_month("2024-13")
    assert not is_valid_month(None)


def test_edit_keeps_id_and_fields_the_form_does_not_show():
    budget = Budget(id=21, title="Food", category="Food", category_id=1, limit=120, month="2024-06", spent=95)
    edited = validate_budget_form({"title": "Groceries", "category": "Food", "category_id": 1,
                                   "limit": 150, "month": "2024-06"}, current=budget).value
    assert (edited.id, edited.title, edited.limit, edited.spent) == (21, "Groceries", 150.0, 95)

    goal = SavingsGoal(id=31, name="Laptop", target_amount=1000, target_date="2024-12-31",
                       current_amount=400, created_at="2024-01-01T00:00:00")
    edited_goal = validate_goal_form({"name": "Laptop", "target_amount": 1200, "target_date": "2025-03-01"},
                                     current=goal).value
    assert (edited_goal.id, edited_goal.current_amount, edited_goal.created_at) == (31, 400, goal.created_at)

    cat = Category(id=1, name="Food", type="expense", is_custom=False)
    edited_cat = validate_category_form({"name": "Meals", "type": "expense", "icon": "Utensils",
                                         "color": "#ef4444"}, current=cat).value
    assert (edited_cat.id, edited_cat.is_custom) == (1, False)
