"""Client-side form validation.

Each validator takes the raw form values and returns ``Ok(entity)`` ready
for the matching service, or ``Err("validation", ...)`` whose ``details``
map field names to the message shown next to that field.
"""
import math
import re
from dataclasses import replace
from datetime import date
from typing import Any, Optional

from fintrack.domain import (
    ACCOUNT_TYPES,
    TRANSACTION_TYPES,
    BankAccount,
    Budget,
    Category,
    SavingsGoal,
    Transaction,
)
from fintrack.functional import Err, Ok, Result

MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")
COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


def _text(form: dict, key: str) -> str:
    value = form.get(key)
    return str(value).strip() if value is not None else ""


def _number(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _positive(value: Any) -> Optional[float]:
    number = _number(value)
    return number if number is not None and number > 0 else None


def _iso_date(value: Any) -> str:
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip() if value else ""


def is_valid_month(value: Any) -> bool:
    return bool(MONTH_RE.match(str(value or "")))


def _result(errors: dict, build, current=None, keep: tuple = ()) -> Result:
    """Ok(entity), or Err with the field messages.

    When editing, the entity takes the id of ``current`` and the ``keep``
    fields that the form does not show.
    """
    if errors:
        return Err("validation", "Please fix the highlighted fields", details=errors)
    entity = build()
    if current is not None:
        entity = replace(entity, id=current.id, **{f: getattr(current, f) for f in keep})
    return Ok(entity)


def validate_transaction_form(form: dict, current: Optional[Transaction] = None) -> Result:
    errors = {}
    title = _text(form, "title")
    amount = _positive(form.get("amount"))
    category = _text(form, "category")
    tx_date = _iso_date(form.get("date"))
    tx_type = _text(form, "type") or "expense"

    if not title:
        errors["title"] = "Please enter a title"
    if amount is None:
        errors["amount"] = "Please enter a valid amount"
    if not category:
        errors["category"] = "Please select a category"
    if not tx_date:
        errors["date"] = "Please select a date"
    if tx_type not in TRANSACTION_TYPES:
        errors["type"] = "Please select income or expense"

    return _result(errors, lambda: Transaction(
        id=None,
        title=title,
        amount=amount,
        type=tx_type,
        category=category,
        category_id=form.get("category_id"),
        date=tx_date,
        description=_text(form, "description"),
    ), current, keep=("created_at",))


def validate_budget_form(form: dict, current: Optional[Budget] = None) -> Result:
    errors = {}
    title = _text(form, "title")
    category = _text(form, "category")
    limit = _positive(form.get("limit"))
    month = _text(form, "month")

    if not title:
        errors["title"] = "Title is required"
    if not category:
        errors["category"] = "Please select a category"
    if limit is None:
        errors["limit"] = "Please enter a valid budget limit"
    if not is_valid_month(month):
        errors["month"] = "Please select a month"

    return _result(errors, lambda: Budget(
        id=None,
        title=title,
        category=category,
        category_id=form.get("category_id"),
        limit=limit,
        month=month,
    ), current, keep=("spent",))


def validate_category_form(form: dict, current: Optional[Category] = None) -> Result:
    errors = {}
    name = _text(form, "name")
    cat_type = _text(form, "type")
    icon = _text(form, "icon")
    color = _text(form, "color")

    if not name:
        errors["name"] = "Category name is required"
    if cat_type not in TRANSACTION_TYPES:
        errors["type"] = "Category type is required"
    if not icon:
        errors["icon"] = "Please select an icon"
    if not COLOR_RE.match(color):
        errors["color"] = "Please select a color"

    return _result(errors, lambda: Category(
        id=None, name=name, type=cat_type, color=color, icon=icon, is_custom=True,
    ), current, keep=("is_custom",))


def validate_bank_account_form(form: dict, current: Optional[BankAccount] = None) -> Result:
    errors = {}
    name = _text(form, "account_name")
    account_type = _text(form, "account_type")
    raw_balance = form.get("balance")
    balance = _number(raw_balance)

    if not name:
        errors["account_name"] = "Account name is required"
    if account_type not in ACCOUNT_TYPES:
        errors["account_type"] = "Account type is required"
    if raw_balance is None or raw_balance == "":
        errors["balance"] = "Balance is required"
    elif balance is None:
        errors["balance"] = "Balance must be a valid number"

    return _result(errors, lambda: BankAccount(
        id=None, account_name=name, account_type=account_type, balance=balance,
    ), current)


def validate_goal_form(form: dict, current: Optional[SavingsGoal] = None) -> Result:
    errors = {}
    name = _text(form, "name")
    target = _positive(form.get("target_amount"))
    target_date = _iso_date(form.get("target_date"))

    if not name:
        errors["name"] = "Please enter a goal name"
    if target is None:
        errors["target_amount"] = "Please enter a valid target amount"
    if not target_date:
        errors["target_date"] = "Please select a target date"

    return _result(errors, lambda: SavingsGoal(
        id=None, name=name, target_amount=target, target_date=target_date,
    ), current, keep=("current_amount", "created_at"))


def validate_contribution_form(form: dict) -> Result:
    amount = _positive(form.get("contribution"))
    if amount is None:
        return _result({"contribution": "Please enter a valid amount"}, None)
    return Ok(amount)
