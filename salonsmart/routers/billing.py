from fastapi import APIRouter, Depends
from typing import List
from .. import schemas
from ..deps import get_invoice_repo
from ..repositories.billing import InvoiceRepository

router = APIRouter(prefix="/billing", tags=["billing"])


@router.get("/invoices", response_model=List[schemas.InvoiceOut])
def list_invoices(repo: InvoiceRepository = Depends(get_invoice_repo)):
    return repo.list()


@router.get("/invoices/summary", response_model=schemas.InvoiceSummary)
def invoice_summary(repo: InvoiceRepository = Depends(get_invoice_repo)):
    return repo.summary()


@router.post("/invoices", response_model=schemas.InvoiceOut)
def create_invoice(payload: schemas.InvoiceCreate, repo: InvoiceRepository = Depends(get_invoice_repo)):
    return repo.create(payload)


@router.put("/invoices/{invoice_id}", response_model=schemas.InvoiceOut)
def update_invoice(invoice_id: str, payload: schemas.InvoiceUpdate, repo: InvoiceRepository = Depends(get_invoice_repo)):
    return repo.update(invoice_id, payload)


@router.delete("/invoices/{invoice_id}")
def delete_invoice(invoice_id: str, repo: InvoiceRepository = Depends(get_invoice_repo)):
    repo.delete(invoice_id)
    return {"ok": True}
