from pydantic import BaseModel, Field

from cashflow_ledger.models import CategoryKind, CategorySummary, ClassifiedEntry, Holiday


class MainCategoryRequest(BaseModel):
    code: str = Field(min_length=1)
    name: str = Field(min_length=1)
    kind: CategoryKind = CategoryKind.EXPENSE


class MainCategoryUpdate(BaseModel):
    name: str | None = None
    kind: CategoryKind | None = None


class MoveRequest(BaseModel):
    offset: int


class SubCategoryRequest(BaseModel):
    main_code: str = Field(min_length=1)
    code: str = Field(min_length=1)
    name: str = Field(min_length=1)


class SubCategoryUpdate(BaseModel):
    name: str = Field(min_length=1)


class HolidayRequest(BaseModel):
    year: int
    month: int
    day: int
    name: str = ""


class HolidayBatchRequest(BaseModel):
    holidays: list[Holiday]


class YearRequest(BaseModel):
    year: int = Field(ge=1, le=9999)


class MonthReport(BaseModel):
    year: int
    month: int
    entries: list[ClassifiedEntry]
    summary: CategorySummary
