from typing import Annotated

from fastapi import APIRouter, Depends

from cashflow_ledger.api.dependencies import get_ledger
from cashflow_ledger.api.schemas import (
    MainCategoryRequest,
    MainCategoryUpdate,
    MoveRequest,
    SubCategoryRequest,
    SubCategoryUpdate,
)
from cashflow_ledger.models import CategoryRegistry, MainCategory, SubCategory
from cashflow_ledger.services.ledger import LedgerService

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=CategoryRegistry)
async def get_categories(
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> CategoryRegistry:
    return ledger.snapshot.categories


@router.post("/main", response_model=MainCategory, status_code=201)
async def add_main_category(
    req: MainCategoryRequest,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> MainCategory:
    return ledger.add_main_category(req.code, req.name, req.kind)


@router.put("/main/{code}", response_model=MainCategory)
async def update_main_category(
    code: str,
    req: MainCategoryUpdate,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> MainCategory:
    return ledger.update_main_category(code, name=req.name, kind=req.kind)


@router.post("/main/{code}/move", response_model=list[MainCategory])
async def move_main_category(
    code: str,
    req: MoveRequest,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> list[MainCategory]:
    return ledger.move_main_category(code, req.offset)


@router.delete("/main/{code}", status_code=204)
async def remove_main_category(
    code: str,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> None:
    ledger.remove_main_category(code)


@router.post("/sub", response_model=SubCategory, status_code=201)
async def add_sub_category(
    req: SubCategoryRequest,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> SubCategory:
    return ledger.add_sub_category(req.main_code, req.code, req.name)


@router.put("/sub/{code}", response_model=SubCategory)
async def update_sub_category(
    code: str,
    req: SubCategoryUpdate,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> SubCategory:
    return ledger.update_sub_category(code, name=req.name)


@router.delete("/sub/{code}", status_code=204)
async def remove_sub_category(
    code: str,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> None:
    ledger.remove_sub_category(code)
