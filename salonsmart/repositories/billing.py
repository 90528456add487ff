from collections import defaultdict
from typing import Any, Dict, List, Mapping

from ..errors import NotFound
from ..models import InvoiceStatus
from ..schemas import ExpenseCreate, InvoiceCreate
from .base import BaseRepository


class _LedgerRepository(BaseRepository):
    """Operator-only collections listed newest first."""

    create_schema = None
    date_field = ""
    label = ""

    def list(self) -> List[Dict[str, Any]]:
        self.require_admin()
        return self.store.all(self.collection, order_by=(self.date_field,), descending=True)

    def get(self, record_id: str) -> Dict[str, Any]:
        self.require_admin()
        rec = self.store.get(self.collection, record_id)
        if rec is None:
            raise NotFound(f"{self.label} not found")
        return rec

    def create(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        self.require_admin()
        return self.store.insert(self.collection, self.validate(self.create_schema, fields))

    def update(self, record_id: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        existing = self.get(record_id)
        merged = {**self.editable(existing), **self.partial(fields)}
        return self.store.update(self.collection, record_id, self.validate(self.create_schema, merged))

    def delete(self, record_id: str) -> None:
        self.require_admin()
        self.store.delete(self.collection, record_id)


class InvoiceRepository(_LedgerRepository):
    collection = "invoices"
    create_schema = InvoiceCreate
    date_field = "invoice_date"
    label = "Invoice"

    def summary(self) -> Dict[str, Any]:
        invoices = self.list()
        totals = {status.value: 0.0 for status in InvoiceStatus}
        for inv in invoices:
            totals[inv["status"]] = totals.get(inv["status"], 0.0) + inv["amount"]
        return {**totals, "count": len(invoices)}


class ExpenseRepository(_LedgerRepository):
    collection = "expenses"
    create_schema = ExpenseCreate
    date_field = "expense_date"
    label = "Expense"

    def summary(self) -> Dict[str, Any]:
        expenses = self.list()
        by_category: Dict[str, float] = defaultdict(float)
        for exp in expenses:
            by_category[exp["category"]] += exp["amount"]
        return {
            "total": sum(by_category.values()),
            "by_category": dict(by_category),
            "count": len(expenses),
        }
