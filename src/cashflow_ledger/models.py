import datetime as dt
import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_YEAR_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def parse_year_month(value: str) -> tuple[int, int]:
    match = _YEAR_MONTH_RE.match(value)
    if not match:
        raise ValueError(f"Expected YYYY-MM, got '{value}'")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Month out of range in '{value}'")
    return year, month


class CategoryKind(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class Frequency(str, Enum):
    DAILY = "daily"
    MONTHLY = "monthly"


class MainCategory(BaseModel):
    code: str
    name: str
    kind: CategoryKind = CategoryKind.EXPENSE


class SubCategory(BaseModel):
    main_code: str
    code: str
    name: str


class CategoryRegistry(BaseModel):
    main: list[MainCategory] = Field(default_factory=list)
    sub: list[SubCategory] = Field(default_factory=list)


class Holiday(BaseModel):
    month: int = Field(ge=1, le=12)
    day: int = Field(ge=1, le=31)
    name: str = ""


class OneTimeEntryInput(BaseModel):
    date: dt.date
    amount: float = Field(ge=0)
    description: str = ""
    main_category: Optional[str] = None
    sub_category: Optional[str] = None
    is_actual_payment: bool = True


class OneTimeEntry(OneTimeEntryInput):
    id: int
    recurring_id: Optional[int] = None  # set on entries materialized from a definition


class RecurringEntryInput(BaseModel):
    frequency: Frequency = Frequency.MONTHLY
    day_of_month: Optional[int] = Field(default=None, ge=1, le=31)
    amount: float = Field(ge=0)
    description: str = ""
    start_month: str
    end_month: Optional[str] = None
    main_category: Optional[str] = None
    sub_category: Optional[str] = None
    skip_weekends: bool = False
    skip_holidays: bool = False
    is_actual_payment: bool = True

    @field_validator("start_month", "end_month")
    @classmethod
    def _check_year_month(cls, value: str | None) -> str | None:
        if value is not None:
            parse_year_month(value)
        return value

    @model_validator(mode="after")
    def _check_day(self) -> "RecurringEntryInput":
        if self.frequency == Frequency.MONTHLY and self.day_of_month is None:
            raise ValueError("Monthly recurring entries need a day_of_month")
        return self

    @property
    def start(self) -> tuple[int, int]:
        return parse_year_month(self.start_month)

    @property
    def end(self) -> tuple[int, int] | None:
        return parse_year_month(self.end_month) if self.end_month else None


class RecurringEntryDefinition(RecurringEntryInput):
    id: int
    # Years whose occurrences were copied into one-time entries
    materialized_years: list[int] = Field(default_factory=list)


class LedgerSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid")

    categories: CategoryRegistry = Field(default_factory=CategoryRegistry)
    one_time_entries: list[OneTimeEntry] = Field(default_factory=list)
    recurring_entries: list[RecurringEntryDefinition] = Field(default_factory=list)
    holidays: dict[int, list[Holiday]] = Field(default_factory=dict)
    selected_year: int = Field(default_factory=lambda: dt.date.today().year)
    next_entry_id: int = 1
    next_recurring_id: int = 1


class Occurrence(BaseModel):
    date: dt.date
    amount: float
    description: str
    main_category: Optional[str] = None
    sub_category: Optional[str] = None
    is_actual_payment: bool = True
    recurring_id: Optional[int] = None


class ClassifiedEntry(BaseModel):
    date: dt.date
    amount: float
    description: str
    main_category: Optional[str] = None
    main_name: str
    sub_category: Optional[str] = None
    sub_name: str = ""
    is_income: bool
    is_actual_payment: bool = True
    is_recurring: bool = False
    entry_id: Optional[int] = None
    recurring_id: Optional[int] = None

    @property
    def signed_amount(self) -> float:
        return self.amount if self.is_income else -self.amount


class MonthlyBalanceRecord(BaseModel):
    month: int
    original_balance: float
    carryover_from_previous: float
    final_balance: float


class YearSummary(BaseModel):
    year: int
    total_income: float
    total_expense: float
    net_income: float
    final_balance: float


class MainCategoryTotal(BaseModel):
    code: str
    name: str
    is_income: bool
    count: int = 0
    total_amount: float = 0.0


class SubCategoryTotal(BaseModel):
    main_code: str
    main_name: str
    sub_code: str
    sub_name: str
    is_income: bool
    count: int = 0
    total_amount: float = 0.0


class CategorySummary(BaseModel):
    main_categories: list[MainCategoryTotal]
    sub_categories: list[SubCategoryTotal]
    total_income: float
    total_expense: float
    total_count: int


class FinanceStatementRow(BaseModel):
    code: str
    name: str
    is_income: bool
    monthly_amounts: list[float]
    total_amount: float
