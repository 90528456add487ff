from datetime import date

import pytest

from salonsmart.booking import BookingWizard, Step, WizardSessions
from salonsmart.errors import NotFound, ValidationError, WizardError
from salonsmart.repositories.appointments import AppointmentRepository
from salonsmart.repositories.services import ServiceRepository
from salonsmart.repositories.stylists import StylistRepository

from conftest import clock

MONDAY = date(2025, 3, 10)
SUNDAY = date(2025, 3, 9)


@pytest.fixture
def appointments(store, customer):
    return AppointmentRepository(store, customer, clock)


@pytest.fixture
def haircut(store, customer):
    return next(s for s in ServiceRepository(store, customer, clock).list() if s["name"] == "Haircut & Style")


@pytest.fixture
def emma(store, customer):
    return next(s for s in StylistRepository(store, customer, clock).list() if s["name"] == "Emma W.")


def walk_to_confirm(wizard, service, stylist, day=MONDAY, slot="10:00"):
    if wizard.step == Step.SERVICE:
        wizard.select_service(service)
        wizard.advance()
    wizard.select_stylist(stylist)
    wizard.advance()
    wizard.select_date(day)
    wizard.select_time(slot)
    wizard.advance()
    assert wizard.step == Step.CONFIRM


def test_starts_at_service_step_without_preselection():
    wizard = BookingWizard(clock=clock)
    assert wizard.step == Step.SERVICE
    assert wizard.title == "Choose a Service"
    assert not wizard.can_go_back


def test_preselected_service_skips_service_step(haircut):
    wizard = BookingWizard(haircut, clock)
    assert wizard.step == Step.STYLIST
    assert wizard.service == haircut
    assert not wizard.can_go_back
    with pytest.raises(WizardError):
        wizard.back()


def test_cannot_advance_until_step_is_complete(haircut, emma):
    wizard = BookingWizard(clock=clock)
    assert not wizard.can_advance
    with pytest.raises(WizardError):
        wizard.advance()

    wizard.select_service(haircut)
    wizard.advance()
    assert wizard.step == Step.STYLIST
    with pytest.raises(WizardError):
        wizard.advance()

    wizard.select_stylist(emma)
    wizard.advance()
    wizard.select_date(MONDAY)
    assert not wizard.can_advance  # still needs a time
    wizard.select_time("10:00")
    assert wizard.can_advance


def test_selection_only_on_its_own_step(haircut, emma):
    wizard = BookingWizard(clock=clock)
    with pytest.raises(WizardError):
        wizard.select_stylist(emma)
    with pytest.raises(WizardError):
        wizard.select_date(MONDAY)
    with pytest.raises(WizardError):
        wizard.set_notes("hello")


@pytest.mark.parametrize("day", [SUNDAY, date(2025, 3, 1), date(2025, 2, 28)])
def test_rejects_sundays_and_past_dates(haircut, emma, day):
    wizard = BookingWizard(haircut, clock)
    wizard.select_stylist(emma)
    wizard.advance()
    with pytest.raises(ValidationError):
        wizard.select_date(day)
    assert wizard.date is None


def test_today_is_bookable(haircut, emma):
    wizard = BookingWizard(haircut, clock)
    wizard.select_stylist(emma)
    wizard.advance()
    wizard.select_date(clock())
    assert wizard.date == clock()


@pytest.mark.parametrize("slot", ["08:30", "18:00", "10:15", "9:00"])
def test_rejects_times_off_the_grid(haircut, emma, slot):
    wizard = BookingWizard(haircut, clock)
    wizard.select_stylist(emma)
    wizard.advance()
    with pytest.raises(ValidationError):
        wizard.select_time(slot)


def test_going_back_keeps_selections(haircut, emma):
    wizard = BookingWizard(clock=clock)
    walk_to_confirm(wizard, haircut, emma)
    wizard.set_notes("Window seat please")

    assert wizard.back() == Step.DATETIME
    assert wizard.back() == Step.STYLIST
    assert wizard.stylist == emma

    wizard.advance()
    assert wizard.date == MONDAY
    assert wizard.time == "10:00"
    wizard.advance()
    assert wizard.notes == "Window seat please"
    assert wizard.back() == Step.DATETIME
    assert wizard.back() == Step.STYLIST
    assert wizard.back() == Step.SERVICE
    assert wizard.service == haircut


@pytest.mark.parametrize("steps_forward", [0, 1, 2, 3])
def test_close_resets_everything(haircut, emma, steps_forward):
    wizard = BookingWizard(clock=clock)
    walk_to_confirm(wizard, haircut, emma)
    wizard.set_notes("note")
    for _ in range(3 - steps_forward):
        wizard.back()

    wizard.close()
    assert wizard.step == Step.SERVICE
    assert wizard.service is None
    assert wizard.stylist is None
    assert wizard.date is None
    assert wizard.time is None
    assert wizard.notes == ""


def test_close_keeps_preselected_service(haircut, emma):
    wizard = BookingWizard(haircut, clock)
    walk_to_confirm(wizard, haircut, emma)
    wizard.close()
    assert wizard.step == Step.STYLIST
    assert wizard.service == haircut
    assert wizard.stylist is None


def test_submit_creates_one_pending_appointment(store, appointments, haircut, emma, customer):
    before = len(store.all("appointments"))
    wizard = BookingWizard(clock=clock)
    walk_to_confirm(wizard, haircut, emma, MONDAY, "10:00")
    wizard.set_notes("First visit")

    result = wizard.submit(appointments)

    assert result.ok
    assert result.notification.title == "Appointment Booked!"
    assert "Haircut & Style" in result.notification.description
    assert "Emma W." in result.notification.description
    assert len(store.all("appointments")) == before + 1

    apt = result.appointment
    assert apt["status"] == "pending"
    assert apt["appointment_date"] == "2025-03-10"
    assert apt["appointment_time"] == "10:00"
    assert apt["service_id"] == haircut["id"]
    assert apt["stylist_id"] == emma["id"]
    assert apt["customer_id"] == customer.id
    assert apt["notes"] == "First visit"

    # Success closes the dialog
    assert wizard.step == Step.SERVICE
    assert wizard.stylist is None


def test_submit_without_notes_stores_none(appointments, haircut, emma):
    wizard = BookingWizard(haircut, clock)
    walk_to_confirm(wizard, haircut, emma)
    assert wizard.submit(appointments).appointment["notes"] is None


def test_failed_submit_keeps_state_for_retry(store, appointments, haircut, emma):
    wizard = BookingWizard(clock=clock)
    walk_to_confirm(wizard, haircut, emma)
    store.fail_writes = True

    result = wizard.submit(appointments)

    assert not result.ok
    assert result.notification.title == "Booking Failed"
    assert result.notification.variant == "destructive"
    assert wizard.step == Step.CONFIRM
    assert wizard.stylist == emma
    assert not wizard.submitting

    store.fail_writes = False
    assert wizard.submit(appointments).ok


def test_second_submit_while_in_flight_is_refused(appointments, haircut, emma):
    wizard = BookingWizard(clock=clock)
    walk_to_confirm(wizard, haircut, emma)
    seen = {}

    class SlowRepository:
        def create(self, fields):
            seen["submitting"] = wizard.submitting
            with pytest.raises(WizardError):
                wizard.submit(appointments)
            return appointments.create(fields)

    assert wizard.submit(SlowRepository()).ok
    assert seen["submitting"] is True
    assert not wizard.submitting


def test_submit_only_from_confirm_step(appointments, haircut):
    wizard = BookingWizard(haircut, clock)
    with pytest.raises(WizardError):
        wizard.submit(appointments)


def test_end_to_end_booking_with_emma(store, customer):
    stylists = StylistRepository(store, customer, clock).list()
    emma = next(s for s in stylists if s["name"] == "Emma W.")
    service = ServiceRepository(store, customer, clock).list()[0]

    wizard = BookingWizard(service, clock)
    wizard.select_stylist(emma)
    wizard.advance()
    wizard.select_date(date(2025, 3, 10))
    wizard.select_time("10:00")
    wizard.advance()
    result = wizard.submit(AppointmentRepository(store, customer, clock))

    mine = AppointmentRepository(store, customer, clock).list()
    assert len(mine) == 1
    assert mine[0]["id"] == result.appointment["id"]
    assert mine[0]["appointment_date"] == "2025-03-10"
    assert mine[0]["appointment_time"] == "10:00"
    assert mine[0]["status"] == "pending"
    assert mine[0]["stylists"]["name"] == "Emma W."


def test_wizard_is_frozen_while_submitting(store, customer, appointments, haircut, emma):
    wizard = BookingWizard(clock=clock)
    walk_to_confirm(wizard, haircut, emma)

    class ClosingRepository:
        def create(self, fields):
            for change in (wizard.close, wizard.back, lambda: wizard.set_notes("late")):
                with pytest.raises(WizardError):
                    change()
            return appointments.create(fields)

    result = wizard.submit(ClosingRepository())

    assert result.ok
    assert result.notification.description == "Your Haircut & Style appointment with Emma W. is confirmed."
    assert result.appointment["notes"] is None
    assert wizard.step == Step.SERVICE
    assert len(AppointmentRepository(store, customer, clock).list()) == 1


def test_sessions_registry(haircut):
    sessions = WizardSessions()
    session_id, wizard = sessions.open("alice", haircut, clock)
    assert sessions.get(session_id, "alice") is wizard
    assert len(sessions) == 1

    sessions.close(session_id, "alice")
    assert len(sessions) == 0
    with pytest.raises(NotFound):
        sessions.get(session_id, "alice")
    with pytest.raises(NotFound):
        sessions.close(session_id, "alice")


def test_sessions_belong_to_their_owner(haircut):
    sessions = WizardSessions()
    session_id, _ = sessions.open("alice", haircut, clock)
    with pytest.raises(NotFound):
        sessions.get(session_id, "bob")
    with pytest.raises(NotFound):
        sessions.close(session_id, "bob")
    assert len(sessions) == 1


def test_idle_sessions_are_dropped(haircut):
    now = [0.0]
    sessions = WizardSessions(idle_seconds=60, now=lambda: now[0])
    stale, _ = sessions.open("alice", haircut, clock)
    active, _ = sessions.open("alice", haircut, clock)

    now[0] = 45
    sessions.get(active, "alice")
    now[0] = 90
    sessions.open("bob", None, clock)

    assert len(sessions) == 2
    with pytest.raises(NotFound):
        sessions.get(stale, "alice")
    assert sessions.get(active, "alice").step == Step.STYLIST
