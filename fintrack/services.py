"""CRUD services, one per backend collection.

Every service receives the backend client explicitly.  Reads degrade to an
empty list / ``None`` so list views can show an empty state; writes raise
``BackendError`` carrying the backend's message for the UI to toast.
"""
import logging
from typing import Any, Callable, Optional

from fintrack import transforms
from fintrack.domain import Budget, Category, SavingsGoal, Transaction
from fintrack.errors import BackendError, DuplicateCategoryError, RecordNotFoundError
from fintrack.functional import Err
from fintrack.goals import apply_contribution

logger = logging.getLogger(__name__)


def exact_match(field: str, value: Any) -> dict:
    return {"FieldName": field, "Operator": "ExactMatch", "Values": [value]}


def date_between(field: str, start: str, end: str) -> list[dict]:
    return [{
        "operator": "AND",
        "subGroups": [
            {"conditions": [{"fieldName": field, "operator": "GreaterThanOrEqualTo", "values": [start]}]},
            {"conditions": [{"fieldName": field, "operator": "LessThanOrEqualTo", "values": [end]}]},
        ],
    }]


class RecordService:
    collection: str = ""
    entity: str = "record"
    order_by: Optional[list] = None
    to_domain: Callable[[dict], Any]
    to_record: Callable[..., dict]

    def __init__(self, client, page_size: int = 1000):
        self.client = client
        self.page_size = page_size

    def _params(self, where: Optional[list] = None, where_groups: Optional[list] = None) -> dict:
        params: dict = {
            "fields": transforms.FIELDS[self.collection],
            "pagingInfo": {"limit": self.page_size, "offset": 0},
        }
        if where:
            params["where"] = where
        if where_groups:
            params["whereGroups"] = where_groups
        if self.order_by:
            params["orderBy"] = self.order_by
        return params

    def _fetch(self, description: str, **filters) -> list:
        result = self.client.fetch_records(self.collection, self._params(**filters))
        if isinstance(result, Err):
            logger.error(f"Error fetching {description}: {result.message}")
            return []
        return [self.to_domain(raw) for raw in result.value]

    def get_all(self) -> list:
        return self._fetch(f"{self.entity}s")

    def get_by_id(self, record_id: int):
        params = {"fields": transforms.FIELDS[self.collection]}
        result = self.client.get_record_by_id(self.collection, record_id, params)
        if isinstance(result, Err):
            logger.error(f"Error fetching {self.entity} {record_id}: {result.message}")
            return None
        if not result.value:
            return None
        return self.to_domain(result.value)

    def _raise_for(self, action: str, result: Err) -> None:
        message = result.message or f"Failed to {action} {self.entity}"
        logger.error(f"Failed to {action} {self.entity}: {message}")
        raise BackendError(message, kind=result.kind)

    def _write(self, action: str, call: Callable, records: list) -> list:
        params = {"records": records}
        result = call(self.collection, params)
        if isinstance(result, Err):
            self._raise_for(action, result)
        return result.value

    def _first(self, data: list, fallback):
        created = data[0] if data else None
        return self.to_domain(created) if created else fallback

    def create(self, obj):
        data = self._write("create", self.client.create_record, [self.to_record(obj)])
        return self._first(data, obj)

    def update(self, record_id: int, obj):
        data = self._write("update", self.client.update_record, [self.to_record(obj, record_id)])
        return self._first(data, obj)

    def delete(self, record_id: int) -> bool:
        result = self.client.delete_record(self.collection, {"RecordIds": [int(record_id)]})
        if isinstance(result, Err):
            self._raise_for("delete", result)
        return True


class TransactionService(RecordService):
    collection = transforms.TRANSACTIONS
    entity = "transaction"
    order_by = [{"fieldName": "date_c", "sorttype": "DESC"}]
    to_domain = staticmethod(transforms.to_transaction)
    to_record = staticmethod(transforms.transaction_record)

    def get_by_date_range(self, start: str, end: str) -> list[Transaction]:
        return self._fetch("transactions by date range", where_groups=date_between("date_c", start, end))

    def get_by_category(self, category: str) -> list[Transaction]:
        return self._fetch("transactions by category", where=[exact_match("category_c", category)])

    def get_by_type(self, tx_type: str) -> list[Transaction]:
        return self._fetch("transactions by type", where=[exact_match("type_c", tx_type)])


class CategoryService(RecordService):
    collection = transforms.CATEGORIES
    entity = "category"
    order_by = [{"fieldName": "name_c", "sorttype": "ASC"}]
    to_domain = staticmethod(transforms.to_category)
    to_record = staticmethod(transforms.category_record)

    def get_all(self) -> list[Category]:
        return self._fetch("categories")

    def get_by_type(self, cat_type: str) -> list[Category]:
        return self._fetch("categories by type", where=[exact_match("type_c", cat_type)])

    def _raise_for(self, action: str, result: Err) -> None:
        lowered = (result.message or "").lower()
        if "duplicate" in lowered or "already exists" in lowered:
            logger.error(f"Failed to {action} category: {result.message}")
            raise DuplicateCategoryError()
        super()._raise_for(action, result)


class BudgetService(RecordService):
    collection = transforms.BUDGETS
    entity = "budget"
    to_domain = staticmethod(transforms.to_budget)
    to_record = staticmethod(transforms.budget_record)

    def get_by_month(self, month: str) -> list[Budget]:
        return self._fetch("budgets by month", where=[exact_match("month_c", month)])

    def update_spent(self, category: str, month: str, amount: float) -> Optional[Budget]:
        budget = next((b for b in self.get_by_month(month) if b.category == category), None)
        if budget is None:
            return None
        params = {"records": [{"Id": int(budget.id), "spent_c": float(amount)}]}
        result = self.client.update_record(self.collection, params)
        if isinstance(result, Err):
            logger.error(f"Failed to update spent amount: {result.message}")
            return None
        return self._first(result.value, None)


class SavingsGoalService(RecordService):
    collection = transforms.SAVINGS_GOALS
    entity = "savings goal"
    to_domain = staticmethod(transforms.to_savings_goal)
    to_record = staticmethod(transforms.savings_goal_record)

    def add_contribution(self, record_id: int, amount: float) -> SavingsGoal:
        current = self.get_by_id(record_id)
        if current is None:
            raise RecordNotFoundError("Savings goal not found")
        updated = apply_contribution(current, amount)
        params = {"records": [{"Id": int(record_id), "current_amount_c": float(updated.current_amount)}]}
        result = self.client.update_record(self.collection, params)
        if isinstance(result, Err):
            self._raise_for("add contribution to", result)
        return self._first(result.value, updated)


class BankAccountService(RecordService):
    collection = transforms.BANK_ACCOUNTS
    entity = "bank account"
    to_domain = staticmethod(transforms.to_bank_account)
    to_record = staticmethod(transforms.bank_account_record)


class Services:
    """All collection services bound to one client."""

    def __init__(self, client, page_size: int = 1000):
        self.transactions = TransactionService(client, page_size)
        self.categories = CategoryService(client, page_size)
        self.budgets = BudgetService(client, page_size)
        self.goals = SavingsGoalService(client, page_size)
        self.accounts = BankAccountService(client, page_size)
