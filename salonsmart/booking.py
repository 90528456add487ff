"""Step-by-step booking: service -> stylist -> date & time -> confirm.

A wizard holds the chosen records in memory and writes nothing until
``submit``. Going back keeps what was chosen; closing drops everything except
a service the wizard was opened with.
"""
import enum
import logging
import threading
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, Optional

from .errors import NotFound, SalonError, ValidationError, WizardError
from .repositories.appointments import AppointmentRepository
from .slots import TIME_SLOTS, format_date, is_bookable_date

logger = logging.getLogger(__name__)


class Step(str, enum.Enum):
    SERVICE = "service"
    STYLIST = "stylist"
    DATETIME = "datetime"
    CONFIRM = "confirm"


STEP_ORDER = [Step.SERVICE, Step.STYLIST, Step.DATETIME, Step.CONFIRM]

STEP_TITLES = {
    Step.SERVICE: "Choose a Service",
    Step.STYLIST: "Choose Your Stylist",
    Step.DATETIME: "Select Date & Time",
    Step.CONFIRM: "Confirm Booking",
}


@dataclass
class Notification:
    title: str
    description: str
    variant: str = "default"


@dataclass
class BookingResult:
    notification: Notification
    appointment: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.appointment is not None


class BookingWizard:
    def __init__(self, preselected_service: Optional[Dict[str, Any]] = None, clock: Callable[[], date] = date.today):
        self.preselected_service = preselected_service
        self.clock = clock
        self._in_flight = threading.Lock()
        self._clear()

    @property
    def initial_step(self) -> Step:
        return Step.STYLIST if self.preselected_service else Step.SERVICE

    @property
    def title(self) -> str:
        return STEP_TITLES[self.step]

    @property
    def submitting(self) -> bool:
        return self._in_flight.locked()

    @contextmanager
    def _exclusive(self):
        # Selections stay frozen while a submit is writing them
        if not self._in_flight.acquire(blocking=False):
            raise WizardError("This booking is already being submitted")
        try:
            yield
        finally:
            self._in_flight.release()

    def _clear(self) -> None:
        self.step = self.initial_step
        self.service = self.preselected_service
        self.stylist: Optional[Dict[str, Any]] = None
        self.date: Optional[date] = None
        self.time: Optional[str] = None
        self.notes = ""

    def reset(self) -> None:
        with self._exclusive():
            self._clear()

    close = reset

    def _expect(self, step: Step) -> None:
        if self.step != step:
            raise WizardError(f"Cannot do that on the '{self.step.value}' step")

    # --- selections ---

    def select_service(self, service: Dict[str, Any]) -> None:
        with self._exclusive():
            self._expect(Step.SERVICE)
            self.service = service

    def select_stylist(self, stylist: Dict[str, Any]) -> None:
        with self._exclusive():
            self._expect(Step.STYLIST)
            self.stylist = stylist

    def select_date(self, day: date) -> None:
        with self._exclusive():
            self._expect(Step.DATETIME)
            if not is_bookable_date(day, self.clock()):
                raise ValidationError("Please pick a date from today onwards, Monday to Saturday")
            self.date = day

    def select_time(self, slot: str) -> None:
        with self._exclusive():
            self._expect(Step.DATETIME)
            if slot not in TIME_SLOTS:
                raise ValidationError(f"'{slot}' is not an available time slot")
            self.time = slot

    def set_notes(self, notes: str) -> None:
        with self._exclusive():
            self._expect(Step.CONFIRM)
            self.notes = notes or ""

    # --- navigation ---

    @property
    def can_advance(self) -> bool:
        if self.step == Step.SERVICE:
            return self.service is not None
        if self.step == Step.STYLIST:
            return self.stylist is not None
        if self.step == Step.DATETIME:
            return (
                self.date is not None
                and self.time is not None
                and is_bookable_date(self.date, self.clock())
            )
        return False

    @property
    def can_go_back(self) -> bool:
        return self.step != self.initial_step

    def advance(self) -> Step:
        with self._exclusive():
            if not self.can_advance:
                raise WizardError(f"Complete the '{self.step.value}' step before continuing")
            self.step = STEP_ORDER[STEP_ORDER.index(self.step) + 1]
            return self.step

    def back(self) -> Step:
        with self._exclusive():
            if not self.can_go_back:
                raise WizardError("Already at the first step")
            self.step = STEP_ORDER[STEP_ORDER.index(self.step) - 1]
            return self.step

    # --- submit ---

    def submit(self, appointments: AppointmentRepository) -> BookingResult:
        """Create the appointment. On failure the selections are kept for a retry."""
        with self._exclusive():
            self._expect(Step.CONFIRM)
            service, stylist = self.service, self.stylist
            try:
                record = appointments.create({
                    "service_id": service["id"],
                    "stylist_id": stylist["id"],
                    "appointment_date": format_date(self.date),
                    "appointment_time": self.time,
                    "notes": self.notes or None,
                })
            except SalonError:
                return BookingResult(Notification(
                    "Booking Failed",
                    "There was an error booking your appointment. Please try again.",
                    "destructive",
                ))
            self._clear()

        notification = Notification(
            "Appointment Booked!",
            f"Your {service['name']} appointment with {stylist['name']} is confirmed.",
        )
        return BookingResult(notification, record)


@dataclass
class _Session:
    wizard: BookingWizard
    owner_id: str
    last_seen: float


class WizardSessions:
    """Open wizards keyed by session id, each visible only to whoever opened it.

    Sessions idle for longer than ``idle_seconds`` are dropped the next time
    one is opened.
    """

    def __init__(self, idle_seconds: float = 30 * 60, now: Callable[[], float] = time.monotonic):
        self.idle_seconds = idle_seconds
        self.now = now
        self._sessions: Dict[str, _Session] = {}
        self._lock = threading.Lock()

    def _prune(self) -> None:
        cutoff = self.now() - self.idle_seconds
        stale = [
            sid for sid, s in self._sessions.items()
            if s.last_seen < cutoff and not s.wizard.submitting
        ]
        for sid in stale:
            del self._sessions[sid]
        if stale:
            logger.debug("Dropped %s idle booking sessions", len(stale))

    def open(self, owner_id: str, preselected_service=None, clock: Callable[[], date] = date.today):
        session_id = str(uuid.uuid4())
        wizard = BookingWizard(preselected_service, clock)
        with self._lock:
            self._prune()
            self._sessions[session_id] = _Session(wizard, owner_id, self.now())
        logger.debug("Opened booking session %s", session_id)
        return session_id, wizard

    def _lookup(self, session_id: str, owner_id: str) -> _Session:
        session = self._sessions.get(session_id)
        if session is None or session.owner_id != owner_id:
            raise NotFound("Booking session not found")
        return session

    def get(self, session_id: str, owner_id: str) -> BookingWizard:
        with self._lock:
            session = self._lookup(session_id, owner_id)
            session.last_seen = self.now()
        return session.wizard

    def close(self, session_id: str, owner_id: str) -> None:
        with self._lock:
            session = self._lookup(session_id, owner_id)
            session.wizard.close()
            del self._sessions[session_id]
        logger.debug("Closed booking session %s", session_id)

    def __len__(self):
        return len(self._sessions)
