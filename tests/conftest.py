import copy

import pytest

from fintrack.functional import Err, Ok, RecordOutcome
from fintrack.services import Services


class FakeClient:
    """In-memory stand-in for BackendClient with the same method surface."""

    def __init__(self, records=None):
        self.records = copy.deepcopy(records or {})
        self.calls = []
        self.failures = {}
        self._next_id = 1000

    def fail(self, method, result):
        self.failures[method] = result

    def _rows(self, collection):
        return self.records.setdefault(collection, [])

    def _resolve_refs(self, record):
        ref = record.get("category_c")
        if isinstance(ref, int):
            match = next((c for c in self._rows("category_c") if c["Id"] == ref), None)
            record["category_c"] = {"Id": ref, "Name": (match or {}).get("name_c", "")}
        return record

    @staticmethod
    def _matches(row, condition):
        value = row.get(condition["FieldName"])
        if isinstance(value, dict):
            value = value.get("Name")
        return value in condition["Values"]

    def fetch_records(self, collection, params):
        self.calls.append(("fetch_records", collection, params))
        if "fetch_records" in self.failures:
            return self.failures["fetch_records"]
        rows = [r for r in self._rows(collection)
                if all(self._matches(r, c) for c in params.get("where", []))]
        return Ok(copy.deepcopy(rows))

    def get_record_by_id(self, collection, record_id, params):
        self.calls.append(("get_record_by_id", collection, record_id))
        if "get_record_by_id" in self.failures:
            return self.failures["get_record_by_id"]
        row = next((r for r in self._rows(collection) if r["Id"] == int(record_id)), None)
        return Ok(copy.deepcopy(row))

    def _outcomes(self, data):
        outcomes = tuple(RecordOutcome(True, copy.deepcopy(d)) for d in data)
        return Ok([o.data for o in outcomes], outcomes)

    def create_record(self, collection, params):
        self.calls.append(("create_record", collection, params))
        if "create_record" in self.failures:
            return self.failures["create_record"]
        created = []
        for record in params["records"]:
            self._next_id += 1
            row = self._resolve_refs({"Id": self._next_id, **record})
            self._rows(collection).append(row)
            created.append(row)
        return self._outcomes(created)

    def update_record(self, collection, params):
        self.calls.append(("update_record", collection, params))
        if "update_record" in self.failures:
            return self.failures["update_record"]
        updated = []
        for record in params["records"]:
            row = next((r for r in self._rows(collection) if r["Id"] == record["Id"]), None)
            if row is None:
                return Err("backend", f"Record {record['Id']} not found")
            row.update(self._resolve_refs(dict(record)))
            updated.append(row)
        return self._outcomes(updated)

    def delete_record(self, collection, params):
        self.calls.append(("delete_record", collection, params))
        if "delete_record" in self.failures:
            return self.failures["delete_record"]
        ids = set(params["RecordIds"])
        self.records[collection] = [r for r in self._rows(collection) if r["Id"] not in ids]
        return Ok([], ())


SEED = {
    "category_c": [
        {"Id": 1, "Name": "Food", "name_c": "Food", "type_c": "expense", "color_c": "#ef4444",
         "icon_c": "Utensils", "is_custom_c": False},
        {"Id": 2, "Name": "Salary", "name_c": "Salary", "type_c": "income", "color_c": "#22c55e",
         "icon_c": "Banknote", "is_custom_c": False},
        {"Id": 3, "Name": "Transport", "name_c": "Transport", "type_c": "expense", "color_c": "#06b6d4",
         "icon_c": "Car", "is_custom_c": True},
    ],
    "transaction_c": [
        {"Id": 11, "Name": "Groceries - Food", "title_c": "Groceries", "amount_c": 100, "type_c": "expense",
         "date_c": "2024-06-05", "category_c": {"Id": 1, "Name": "Food"}, "description_c": "",
         "created_at_c": "2024-06-05T10:00:00"},
        {"Id": 12, "Name": "Dinner - Food", "title_c": "Dinner", "amount_c": 50, "type_c": "expense",
         "date_c": "2024-06-20", "category_c": {"Id": 1, "Name": "Food"}, "description_c": "with friends",
         "created_at_c": "2024-06-20T20:00:00"},
        {"Id": 13, "Name": "June pay - Salary", "title_c": "June pay", "amount_c": 3000, "type_c": "income",
         "date_c": "2024-06-01", "category_c": {"Id": 2, "Name": "Salary"}, "description_c": "",
         "created_at_c": "2024-06-01T09:00:00"},
    ],
    "budget_c": [
        {"Id": 21, "Name": "Food June", "category_c": {"Id": 1, "Name": "Food"}, "limit_c": 120,
         "month_c": "2024-06", "spent_c": 0},
        {"Id": 22, "Name": "Transport June", "category_c": {"Id": 3, "Name": "Transport"}, "limit_c": 200,
         "month_c": "2024-06", "spent_c": 0},
    ],
    "savings_goal_c": [
        {"Id": 31, "Name": "Laptop", "name_c": "Laptop", "target_amount_c": 1000, "current_amount_c": 400,
         "target_date_c": "2024-12-31", "created_at_c": "2024-01-01T00:00:00"},
    ],
    "bank_account_c": [
        {"Id": 41, "Name": "Main", "account_name_c": "Main", "account_type_c": "Checking", "balance_c": 1500.5},
        {"Id": 42, "Name": "Rainy day", "account_name_c": "Rainy day", "account_type_c": "Savings",
         "balance_c": 500},
    ],
}


@pytest.fixture
def fake_client():
    return FakeClient(SEED)


@pytest.fixture
def services(fake_client):
    return Services(fake_client, page_size=50)
