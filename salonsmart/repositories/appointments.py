import logging
from datetime import date
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..errors import NotFound, PermissionDenied, SlotUnavailable, ValidationError
from ..models import AppointmentStatus
from ..schemas import AppointmentCreate, AppointmentUpdate, Principal
from ..slots import format_date, is_bookable_date, parse_date
from ..storage import RecordStore
from .base import BaseRepository

logger = logging.getLogger(__name__)

PENDING = AppointmentStatus.PENDING.value
CONFIRMED = AppointmentStatus.CONFIRMED.value
COMPLETED = AppointmentStatus.COMPLETED.value
CANCELLED = AppointmentStatus.CANCELLED.value

# Operators advance pending -> confirmed -> completed; either side may cancel
# before completion. Completed and cancelled are terminal.
TRANSITIONS = {
    PENDING: {CONFIRMED, CANCELLED},
    CONFIRMED: {COMPLETED, CANCELLED},
    COMPLETED: set(),
    CANCELLED: set(),
}


class AppointmentRepository(BaseRepository):
    """Appointments are never removed; deleting one cancels it."""

    collection = "appointments"

    def __init__(
        self,
        store: RecordStore,
        actor: Principal,
        clock: Callable[[], date] = date.today,
        prevent_double_booking: bool = False,
    ):
        super().__init__(store, actor, clock)
        self.prevent_double_booking = prevent_double_booking

    # --- reads ---

    def _with_details(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        if not rows:
            return rows
        services = {s["id"]: s for s in self.store.all("services")}
        stylists = {s["id"]: s for s in self.store.all("stylists")}
        for row in rows:
            svc = services.get(row["service_id"])
            sty = stylists.get(row.get("stylist_id"))
            row["services"] = (
                {"name": svc["name"], "price": svc["price"], "duration": svc["duration"]} if svc else None
            )
            row["stylists"] = {"name": sty["name"], "avatar_url": sty.get("avatar_url")} if sty else None
        return rows

    def list(self, on_date: Optional[date] = None) -> List[Dict[str, Any]]:
        """All appointments for operators, own appointments for customers."""
        filters: Dict[str, Any] = {}
        if not self.actor.is_admin:
            filters["customer_id"] = self.actor.id
        if on_date is not None:
            filters["appointment_date"] = format_date(on_date)
        rows = self.store.all(
            self.collection, filters=filters, order_by=("appointment_date", "appointment_time")
        )
        return self._with_details(rows)

    def mine(self) -> Dict[str, List[Dict[str, Any]]]:
        rows = self._with_details(
            self.store.all(
                self.collection,
                filters={"customer_id": self.actor.id},
                order_by=("appointment_date", "appointment_time"),
            )
        )
        today = self.clock()
        upcoming = [r for r in rows if parse_date(r["appointment_date"]) >= today and r["status"] != CANCELLED]
        past = [r for r in rows if parse_date(r["appointment_date"]) < today]
        return {"upcoming": upcoming, "past": past}

    def get(self, appointment_id: str) -> Dict[str, Any]:
        apt = self.store.get(self.collection, appointment_id)
        if apt is None or (not self.actor.is_admin and apt["customer_id"] != self.actor.id):
            raise NotFound("Appointment not found")
        return apt

    # --- writes ---

    def _slot_taken(self, stylist_id: str, day: str, time: str) -> bool:
        taken = self.store.all(
            self.collection,
            filters={"stylist_id": stylist_id, "appointment_date": day, "appointment_time": time},
        )
        return any(a["status"] != CANCELLED for a in taken)

    def create(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        data = self.validate(AppointmentCreate, fields)

        svc = self.store.get("services", data["service_id"])
        if svc is None or (not self.actor.is_admin and not svc["is_active"]):
            raise ValidationError("Selected service is not available")
        if data["stylist_id"] is not None and self.store.get("stylists", data["stylist_id"]) is None:
            raise ValidationError("Selected stylist does not exist")
        if not is_bookable_date(parse_date(data["appointment_date"]), self.clock()):
            raise ValidationError("Appointments cannot be booked in the past or on Sundays")

        if (
            self.prevent_double_booking
            and data["stylist_id"] is not None
            and self._slot_taken(data["stylist_id"], data["appointment_date"], data["appointment_time"])
        ):
            raise SlotUnavailable("Stylist is unavailable at this time")

        record = self.store.insert(
            self.collection,
            {**data, "customer_id": self.actor.id, "status": PENDING},
        )
        logger.info("Appointment %s booked for %s %s", record["id"], record["appointment_date"], record["appointment_time"])
        return record

    def update(self, appointment_id: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        changes = {k: v for k, v in self.validate(AppointmentUpdate, fields).items() if k in self.partial(fields)}
        apt = self.get(appointment_id)

        new_status = changes.pop("status", None)
        if new_status is not None and new_status != apt["status"]:
            if not self.actor.is_admin and new_status != CANCELLED:
                raise PermissionDenied("Customers can only cancel their appointments")
            if new_status not in TRANSITIONS[apt["status"]]:
                raise ValidationError(f"Cannot change a {apt['status']} appointment to {new_status}")
            changes["status"] = new_status

        if not changes:
            return apt
        return self.store.update(self.collection, appointment_id, changes)

    def cancel(self, appointment_id: str) -> Dict[str, Any]:
        return self.update(appointment_id, {"status": CANCELLED})

    def delete(self, appointment_id: str) -> Dict[str, Any]:
        return self.cancel(appointment_id)
