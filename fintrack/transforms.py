"""Mapping between raw backend records (``*_c`` fields) and domain objects."""
from datetime import datetime
from typing import Any, Optional

from fintrack.domain import (
    DEFAULT_COLOR,
    DEFAULT_ICON,
    BankAccount,
    Budget,
    Category,
    SavingsGoal,
    Transaction,
)

TRANSACTIONS = "transaction_c"
CATEGORIES = "category_c"
BUDGETS = "budget_c"
SAVINGS_GOALS = "savings_goal_c"
BANK_ACCOUNTS = "bank_account_c"


def field_list(*names: str, refs: tuple[str, ...] = ()) -> list[dict]:
    fields = [{"field": {"Name": n}} for n in ("Id", "Name") + names]
    fields += [{"field": {"Name": r}, "referenceField": {"field": {"Name": "Name"}}} for r in refs]
    return fields


FIELDS = {
    TRANSACTIONS: field_list(
        "title_c", "amount_c", "type_c", "date_c", "description_c", "created_at_c",
        refs=("category_c",),
    ),
    CATEGORIES: field_list("name_c", "type_c", "color_c", "icon_c", "is_custom_c"),
    BUDGETS: field_list("limit_c", "month_c", "spent_c", refs=("category_c",)),
    SAVINGS_GOALS: field_list(
        "name_c", "target_amount_c", "current_amount_c", "target_date_c", "created_at_c",
    ),
    BANK_ACCOUNTS: field_list("account_name_c", "account_type_c", "balance_c"),
}


def _num(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def _date(value: Any) -> str:
    return str(value)[:10] if value else ""


def _ref_name(value: Any) -> str:
    if isinstance(value, dict):
        return value.get("Name") or ""
    return ""


def _ref_id(value: Any) -> Optional[int]:
    if isinstance(value, dict):
        value = value.get("Id")
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def now_iso() -> str:
    return datetime.now().isoformat()


# raw -> domain

def to_transaction(raw: dict) -> Transaction:
    return Transaction(
        id=raw.get("Id"),
        title=raw.get("title_c") or "",
        amount=_num(raw.get("amount_c")),
        type=raw.get("type_c") or "",
        category=_ref_name(raw.get("category_c")),
        category_id=_ref_id(raw.get("category_c")),
        date=_date(raw.get("date_c")),
        description=raw.get("description_c") or "",
        created_at=raw.get("created_at_c") or "",
    )


def to_category(raw: dict) -> Category:
    return Category(
        id=raw.get("Id"),
        name=raw.get("name_c") or raw.get("Name") or "",
        type=raw.get("type_c") or "",
        color=raw.get("color_c") or DEFAULT_COLOR,
        icon=raw.get("icon_c") or DEFAULT_ICON,
        is_custom=bool(raw.get("is_custom_c")),
    )


def to_budget(raw: dict) -> Budget:
    return Budget(
        id=raw.get("Id"),
        title=raw.get("Name") or "",
        category=_ref_name(raw.get("category_c")),
        category_id=_ref_id(raw.get("category_c")),
        limit=_num(raw.get("limit_c")),
        month=raw.get("month_c") or "",
        spent=_num(raw.get("spent_c")),
    )


def to_savings_goal(raw: dict) -> SavingsGoal:
    return SavingsGoal(
        id=raw.get("Id"),
        name=raw.get("name_c") or raw.get("Name") or "",
        target_amount=_num(raw.get("target_amount_c")),
        current_amount=_num(raw.get("current_amount_c")),
        target_date=_date(raw.get("target_date_c")),
        created_at=raw.get("created_at_c") or "",
    )


def to_bank_account(raw: dict) -> BankAccount:
    return BankAccount(
        id=raw.get("Id"),
        account_name=raw.get("account_name_c") or raw.get("Name") or "",
        account_type=raw.get("account_type_c") or "",
        balance=_num(raw.get("balance_c")),
    )


# domain -> raw

def _with_id(record: dict, record_id: Optional[int]) -> dict:
    if record_id is not None:
        return {"Id": int(record_id), **record}
    return record


def transaction_record(t: Transaction, record_id: Optional[int] = None) -> dict:
    record = {
        "Name": f"{t.title or t.type} - {t.category}",
        "title_c": t.title,
        "amount_c": float(t.amount),
        "type_c": t.type,
        "category_c": _ref_id(t.category_id),
        "date_c": t.date,
        "description_c": t.description or "",
    }
    if record_id is None:
        record["created_at_c"] = t.created_at or now_iso()
    return _with_id(record, record_id)


def category_record(c: Category, record_id: Optional[int] = None) -> dict:
    record = {
        "Name": c.name,
        "name_c": c.name,
        "type_c": c.type,
        "color_c": c.color,
        "icon_c": c.icon,
    }
    if record_id is None:
        record["is_custom_c"] = True
    return _with_id(record, record_id)


def budget_record(b: Budget, record_id: Optional[int] = None) -> dict:
    record = {
        "Name": b.title,
        "category_c": _ref_id(b.category_id),
        "limit_c": float(b.limit),
        "month_c": b.month,
        "spent_c": 0.0 if record_id is None else float(b.spent),
    }
    return _with_id(record, record_id)


def savings_goal_record(g: SavingsGoal, record_id: Optional[int] = None) -> dict:
    record = {
        "Name": g.name,
        "name_c": g.name,
        "target_amount_c": float(g.target_amount),
        "target_date_c": g.target_date,
    }
    if record_id is None:
        record["current_amount_c"] = 0.0
        record["created_at_c"] = g.created_at or now_iso()
    return _with_id(record, record_id)


def bank_account_record(a: BankAccount, record_id: Optional[int] = None) -> dict:
    record = {
        "Name": a.account_name,
        "account_name_c": a.account_name,
        "account_type_c": a.account_type,
        "balance_c": float(a.balance),
    }
    return _with_id(record, record_id)


def total_balance(accounts: tuple[BankAccount, ...]) -> float:
    return sum(a.balance for a in accounts)
