from datetime import date
from typing import Any, Dict, List, Optional

from ..models import AppointmentStatus, InvoiceStatus
from ..slots import format_date
from .base import BaseRepository


class ReportRepository(BaseRepository):
    """Read-only figures for the operator dashboard."""

    def dashboard(self) -> Dict[str, Any]:
        self.require_admin()
        invoices = self.store.all("invoices", filters={"status": InvoiceStatus.PAID.value})
        expenses = self.store.all("expenses")
        return {
            "total_appointments": len(self.store.all("appointments")),
            "revenue": sum(i["amount"] for i in invoices),
            "expenses": sum(e["amount"] for e in expenses),
            "staff_count": len(self.store.all("stylists")),
        }

    def schedule(self, day: Optional[date] = None) -> List[Dict[str, Any]]:
        self.require_admin()
        day = day or self.clock()
        rows = self.store.all(
            "appointments",
            filters={"appointment_date": format_date(day)},
            order_by=("appointment_time",),
        )
        return [r for r in rows if r["status"] != AppointmentStatus.CANCELLED.value]

    def staff_performance(self) -> List[Dict[str, Any]]:
        self.require_admin()
        prices = {s["id"]: s["price"] for s in self.store.all("services")}
        appointments = self.store.all("appointments")
        report = []
        for stylist in self.store.all("stylists", order_by=("name",)):
            own = [a for a in appointments if a.get("stylist_id") == stylist["id"]]
            done = [a for a in own if a["status"] == AppointmentStatus.COMPLETED.value]
            report.append({
                "stylist_id": stylist["id"],
                "name": stylist["name"],
                "appointments": len(own),
                "completed": len(done),
                "revenue": sum(prices.get(a["service_id"], 0.0) for a in done),
                "rating": stylist.get("rating") or 5.0,
            })
        return report
