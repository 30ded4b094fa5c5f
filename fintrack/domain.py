from dataclasses import dataclass
from typing import Optional

INCOME = "income"
EXPENSE = "expense"
TRANSACTION_TYPES = (INCOME, EXPENSE)

ACCOUNT_TYPES = ("Checking", "Savings", "Credit Card", "Money Market")

DEFAULT_COLOR = "#64748b"
DEFAULT_ICON = "Circle"

ON_TRACK = "On Track"
NEAR_LIMIT = "Near Limit"
OVER_BUDGET = "Over Budget"


@dataclass(frozen=True)
class Transaction:
    id: Optional[int]
    title: str
    amount: float       # always >= 0, sign comes from type
    type: str           # "income" or "expense"
    category: str       # category name
    date: str           # "2024-06-05"
    category_id: Optional[int] = None
    description: str = ""
    created_at: str = ""

    @property
    def month(self) -> str:
        return self.date[:7]


@dataclass(frozen=True)
class Category:
    id: Optional[int]
    name: str
    type: str
    color: str = DEFAULT_COLOR
    icon: str = DEFAULT_ICON
    is_custom: bool = False


@dataclass(frozen=True)
class Budget:
    id: Optional[int]
    title: str
    category: str
    limit: float
    month: str          # "YYYY-MM"
    category_id: Optional[int] = None
    spent: float = 0.0


@dataclass(frozen=True)
class SavingsGoal:
    id: Optional[int]
    name: str
    target_amount: float
    target_date: str
    current_amount: float = 0.0
    created_at: str = ""


@dataclass(frozen=True)
class BankAccount:
    id: Optional[int]
    account_name: str
    account_type: str
    balance: float = 0.0


# Derived views, never persisted

@dataclass(frozen=True)
class BudgetProgress:
    budget: Budget
    spent: float
    remaining: float
    percentage: float
    status: str


@dataclass(frozen=True)
class Alert:
    level: str          # "warning" or "exceeded"
    budget_id: Optional[int]
    category: str
    spent: float
    limit: float
    message: str


@dataclass(frozen=True)
class ReportTotals:
    income: float
    expenses: float
    savings: float
    budget_utilization: float


@dataclass(frozen=True)
class CategoryShare:
    name: str
    amount: float
    percentage: float


@dataclass(frozen=True)
class MonthlyTrend:
    month: str
    income: float
    expenses: float

    @property
    def net(self) -> float:
        return self.income - self.expenses
