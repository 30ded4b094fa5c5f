from typing import Callable

from fintrack.domain import Transaction

Predicate = Callable[[Transaction], bool]


def by_type(tx_type: str) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.type == tx_type

    return _filter


def by_category(name: str) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.category == name

    return _filter


def by_month(month: str) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.month == month

    return _filter


def by_date_range(start: str, end: str) -> Predicate:
    # ISO dates compare lexicographically; both bounds inclusive
    def _filter(t: Transaction) -> bool:
        return bool(t.date) and start <= t.date <= end

    return _filter


def all_of(*preds: Predicate) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return all(p(t) for p in preds)

    return _filter
