from dataclasses import dataclass

from cashflow_ledger.models import (
    CategoryKind,
    CategoryRegistry,
    ClassifiedEntry,
    Occurrence,
    OneTimeEntry,
)

UNCATEGORIZED_CODE = "NONE"
UNCATEGORIZED_NAME = "Uncategorized"


@dataclass(frozen=True)
class MainResolution:
    code: str
    name: str
    is_income: bool


@dataclass(frozen=True)
class SubResolution:
    code: str
    name: str
    main_code: str


UNCATEGORIZED_MAIN = MainResolution(code=UNCATEGORIZED_CODE, name=UNCATEGORIZED_NAME, is_income=False)


class CategoryResolver:
    """Read-only code lookup over a category registry.

    Unknown codes resolve to the uncategorized expense sentinel so stale
    references never break a report.
    """

    def __init__(self, registry: CategoryRegistry) -> None:
        self._main = {
            category.code: MainResolution(
                code=category.code,
                name=category.name,
                is_income=category.kind == CategoryKind.INCOME,
            )
            for category in registry.main
        }
        self._sub = {
            category.code: SubResolution(
                code=category.code,
                name=category.name,
                main_code=category.main_code,
            )
            for category in registry.sub
        }

    def resolve_main(self, code: str | None) -> MainResolution:
        if not code:
            return UNCATEGORIZED_MAIN
        return self._main.get(code, UNCATEGORIZED_MAIN)

    def resolve_sub(self, code: str | None) -> SubResolution:
        found = self._sub.get(code) if code else None
        if found:
            return found
        return SubResolution(code=code or UNCATEGORIZED_CODE, name=UNCATEGORIZED_NAME, main_code=UNCATEGORIZED_CODE)

    def is_income(self, code: str | None) -> bool:
        return self.resolve_main(code).is_income

    def classify(self, entry: OneTimeEntry | Occurrence) -> ClassifiedEntry:
        main = self.resolve_main(entry.main_category)
        sub_name = self.resolve_sub(entry.sub_category).name if entry.sub_category else ""
        is_recurring = isinstance(entry, Occurrence)
        return ClassifiedEntry(
            date=entry.date,
            amount=entry.amount,
            description=entry.description,
            main_category=entry.main_category,
            main_name=main.name,
            sub_category=entry.sub_category,
            sub_name=sub_name,
            is_income=main.is_income,
            is_actual_payment=entry.is_actual_payment,
            is_recurring=is_recurring,
            entry_id=None if is_recurring else entry.id,
            recurring_id=entry.recurring_id,
        )
