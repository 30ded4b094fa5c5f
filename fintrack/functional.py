from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from fintrack.domain import Category

T = TypeVar('T')
U = TypeVar('U')


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass

    def is_none(self) -> bool:
        return not self.is_some()


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self._value))

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_some(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


@dataclass(frozen=True)
class RecordOutcome:
    """Outcome of one record inside a create/update/delete call."""
    success: bool
    data: Optional[dict] = None
    message: str = ""


class Result(Generic[T], ABC):
    """Backend call result: either ``Ok(value)`` or ``Err(kind, message)``.

    Both sides carry the per-record outcomes reported by the backend so
    callers can inspect partial failures.
    """

    outcomes: tuple

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Result[U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Result[U]']) -> 'Result[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_ok(self) -> bool:
        pass

    def is_err(self) -> bool:
        return not self.is_ok()


class Ok(Result[T]):

    def __init__(self, value: T, outcomes: tuple = ()):
        self.value = value
        self.outcomes = tuple(outcomes)

    def map(self, f: Callable[[T], U]) -> 'Result[U]':
        return Ok(f(self.value), self.outcomes)

    def bind(self, f: Callable[[T], 'Result[U]']) -> 'Result[U]':
        return f(self.value)

    def get_or_else(self, default: T) -> T:
        return self.value

    def is_ok(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Ok) and self.value == other.value


class Err(Result[T]):

    def __init__(self, kind: str, message: str, details: Optional[dict] = None, outcomes: tuple = ()):
        self.kind = kind
        self.message = message
        self.details = details or {}
        self.outcomes = tuple(outcomes)

    def map(self, f: Callable[[T], U]) -> 'Result[U]':
        return self

    def bind(self, f: Callable[[T], 'Result[U]']) -> 'Result[U]':
        return self

    def get_or_else(self, default: T) -> T:
        return default

    def is_ok(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"Err({self.kind!r}, {self.message!r})"

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, Err)
            and self.kind == other.kind
            and self.message == other.message
            and self.details == other.details
        )


def find_category(cats: tuple[Category, ...], name: str) -> Maybe[Category]:
    for cat in cats:
        if cat.name == name:
            return Some(cat)
    return Nothing()

