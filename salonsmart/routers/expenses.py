from fastapi import APIRouter, Depends
from typing import List
from .. import schemas
from ..deps import get_expense_repo
from ..repositories.billing import ExpenseRepository

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.get("/", response_model=List[schemas.ExpenseOut])
def list_expenses(repo: ExpenseRepository = Depends(get_expense_repo)):
    return repo.list()


@router.get("/summary", response_model=schemas.ExpenseSummary)
def expense_summary(repo: ExpenseRepository = Depends(get_expense_repo)):
    return repo.summary()


@router.post("/", response_model=schemas.ExpenseOut)
def create_expense(payload: schemas.ExpenseCreate, repo: ExpenseRepository = Depends(get_expense_repo)):
    return repo.create(payload)


@router.put("/{expense_id}", response_model=schemas.ExpenseOut)
def update_expense(expense_id: str, payload: schemas.ExpenseUpdate, repo: ExpenseRepository = Depends(get_expense_repo)):
    return repo.update(expense_id, payload)


@router.delete("/{expense_id}")
def delete_expense(expense_id: str, repo: ExpenseRepository = Depends(get_expense_repo)):
    repo.delete(expense_id)
    return {"ok": True}
