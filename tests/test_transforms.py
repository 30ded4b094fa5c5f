from fintrack.domain import DEFAULT_COLOR, DEFAULT_ICON, BankAccount, Budget, Category, SavingsGoal, Transaction
from fintrack.transforms import (
    FIELDS,
    TRANSACTIONS,
    budget_record,
    category_record,
    savings_goal_record,
    to_bank_account,
    to_budget,
    to_category,
    to_savings_goal,
    to_transaction,
    total_balance,
    transaction_record,
)


def test_to_transaction_full_record():
    raw = {
        "Id": 5, "title_c": "Rent", "amount_c": "950.00", "type_c": "expense",
        "date_c": "2024-06-01T00:00:00Z", "category_c": {"Id": 9, "Name": "Housing"},
        "description_c": "June", "created_at_c": "2024-05-30T12:00:00",
    }
    tx = to_transaction(raw)

    assert tx == Transaction(
        id=5, title="Rent", amount=950.0, type="expense", category="Housing", category_id=9,
        date="2024-06-01", description="June", created_at="2024-05-30T12:00:00",
    )
    assert tx.month == "2024-06"


def test_missing_fields_get_defaults():
    tx = to_transaction({"Id": 1})
    assert (tx.title, tx.amount, tx.category, tx.category_id, tx.date) == ("", 0.0, "", None, "")

    cat = to_category({"Id": 2, "Name": "Gifts"})
    assert (cat.name, cat.color, cat.icon, cat.is_custom) == ("Gifts", DEFAULT_COLOR, DEFAULT_ICON, False)

    assert to_budget({"Id": 3, "limit_c": None}).limit == 0.0
    assert to_savings_goal({"Id": 4, "Name": "Car"}).current_amount == 0.0
    assert to_bank_account({"Id": 5, "balance_c": "n/a"}).balance == 0.0


def test_mapping_is_deterministic():
    raw = {"Id": 1, "title_c": "x", "amount_c": 3}
    assert to_transaction(raw) == to_transaction(raw)


def test_budget_title_comes_from_name():
    budget = to_budget({"Id": 1, "Name": "Food June", "category_c": {"Id": 1, "Name": "Food"},
                        "limit_c": 120, "month_c": "2024-06", "spent_c": 15})
    assert budget == Budget(id=1, title="Food June", category="Food", category_id=1, limit=120.0,
                            month="2024-06", spent=15.0)


def test_transaction_record_for_create_and_update():
    tx = Transaction(id=None, title="", amount=10, type="income", category="Salary", category_id="2",
                     date="2024-06-01")

    created = transaction_record(tx)
    assert created["Name"] == "income - Salary"
    assert created["category_c"] == 2
    assert "Id" not in created
    assert created["created_at_c"]

    updated = transaction_record(tx, 13)
    assert updated["Id"] == 13
    assert "created_at_c" not in updated


def test_category_record_marks_new_categories_custom():
    cat = Category(id=None, name="Pets", type="expense", color="#123456", icon="Dog")
    assert category_record(cat)["is_custom_c"] is True
    assert "is_custom_c" not in category_record(cat, 4)


def test_budget_and_goal_records():
    budget = Budget(id=None, title="Fun", category="Fun", category_id=7, limit=50, month="2024-06", spent=20)
    assert budget_record(budget)["spent_c"] == 0.0
    assert budget_record(budget, 1)["spent_c"] == 20.0

    goal = SavingsGoal(id=None, name="Trip", target_amount=900, target_date="2025-01-01", current_amount=50)
    assert savings_goal_record(goal)["current_amount_c"] == 0.0
    assert "current_amount_c" not in savings_goal_record(goal, 3)


def test_fields_include_reference_lookup():
    names = [f["field"]["Name"] for f in FIELDS[TRANSACTIONS]]
    assert names[:2] == ["Id", "Name"]
    assert "category_c" in names


def test_total_balance():
    accounts = (
        BankAccount(id=1, account_name="a", account_type="Checking", balance=100.5),
        BankAccount(id=2, account_name="b", account_type="Credit Card", balance=-40),
    )
    assert total_balance(accounts) == 60.5
    assert total_balance(()) == 0
