# salonsmart/routers/booking.py
from fastapi import APIRouter, Depends
from .. import schemas
from ..booking import BookingWizard, WizardSessions
from ..deps import get_appointment_repo, get_clock, get_current_user, get_service_repo, get_sessions, get_stylist_repo
from ..repositories.appointments import AppointmentRepository
from ..repositories.services import ServiceRepository
from ..repositories.stylists import StylistRepository

router = APIRouter(prefix="/booking", tags=["booking"])


def _state(session_id: str, wizard: BookingWizard) -> schemas.WizardState:
    return schemas.WizardState(
        session_id=session_id,
        step=wizard.step.value,
        title=wizard.title,
        service=wizard.service,
        stylist=wizard.stylist,
        appointment_date=wizard.date.isoformat() if wizard.date else None,
        appointment_time=wizard.time,
        notes=wizard.notes,
        can_advance=wizard.can_advance,
        can_go_back=wizard.can_go_back,
        submitting=wizard.submitting,
    )


@router.post("/sessions", response_model=schemas.WizardState)
def open_session(
    payload: schemas.WizardOpen,
    sessions: WizardSessions = Depends(get_sessions),
    services: ServiceRepository = Depends(get_service_repo),
    user: schemas.Principal = Depends(get_current_user),
    clock=Depends(get_clock),
):
    """Start a booking. With ``service_id`` the service step is skipped."""
    preselected = services.get(payload.service_id) if payload.service_id else None
    session_id, wizard = sessions.open(user.id, preselected, clock)
    return _state(session_id, wizard)


@router.get("/sessions/{session_id}", response_model=schemas.WizardState)
def get_session(
    session_id: str,
    sessions: WizardSessions = Depends(get_sessions),
    user: schemas.Principal = Depends(get_current_user),
):
    return _state(session_id, sessions.get(session_id, user.id))


@router.put("/sessions/{session_id}/service", response_model=schemas.WizardState)
def choose_service(
    session_id: str,
    payload: schemas.WizardSelect,
    sessions: WizardSessions = Depends(get_sessions),
    services: ServiceRepository = Depends(get_service_repo),
    user: schemas.Principal = Depends(get_current_user),
):
    wizard = sessions.get(session_id, user.id)
    wizard.select_service(services.get(payload.id))
    return _state(session_id, wizard)


@router.put("/sessions/{session_id}/stylist", response_model=schemas.WizardState)
def choose_stylist(
    session_id: str,
    payload: schemas.WizardSelect,
    sessions: WizardSessions = Depends(get_sessions),
    stylists: StylistRepository = Depends(get_stylist_repo),
    user: schemas.Principal = Depends(get_current_user),
):
    wizard = sessions.get(session_id, user.id)
    wizard.select_stylist(stylists.get(payload.id))
    return _state(session_id, wizard)


@router.put("/sessions/{session_id}/datetime", response_model=schemas.WizardState)
def choose_datetime(
    session_id: str,
    payload: schemas.WizardDateTime,
    sessions: WizardSessions = Depends(get_sessions),
    user: schemas.Principal = Depends(get_current_user),
):
    wizard = sessions.get(session_id, user.id)
    if payload.appointment_date is not None:
        wizard.select_date(payload.appointment_date)
    if payload.appointment_time is not None:
        wizard.select_time(payload.appointment_time)
    return _state(session_id, wizard)


@router.put("/sessions/{session_id}/notes", response_model=schemas.WizardState)
def set_notes(
    session_id: str,
    payload: schemas.WizardNotes,
    sessions: WizardSessions = Depends(get_sessions),
    user: schemas.Principal = Depends(get_current_user),
):
    wizard = sessions.get(session_id, user.id)
    wizard.set_notes(payload.notes)
    return _state(session_id, wizard)


@router.post("/sessions/{session_id}/next", response_model=schemas.WizardState)
def next_step(
    session_id: str,
    sessions: WizardSessions = Depends(get_sessions),
    user: schemas.Principal = Depends(get_current_user),
):
    wizard = sessions.get(session_id, user.id)
    wizard.advance()
    return _state(session_id, wizard)


@router.post("/sessions/{session_id}/back", response_model=schemas.WizardState)
def previous_step(
    session_id: str,
    sessions: WizardSessions = Depends(get_sessions),
    user: schemas.Principal = Depends(get_current_user),
):
    wizard = sessions.get(session_id, user.id)
    wizard.back()
    return _state(session_id, wizard)


@router.post("/sessions/{session_id}/submit", response_model=schemas.WizardSubmitOut)
def submit(
    session_id: str,
    sessions: WizardSessions = Depends(get_sessions),
    appointments: AppointmentRepository = Depends(get_appointment_repo),
    user: schemas.Principal = Depends(get_current_user),
):
    """Book the appointment. A successful booking also ends the session."""
    wizard = sessions.get(session_id, user.id)
    result = wizard.submit(appointments)
    state = _state(session_id, wizard)
    if result.ok:
        sessions.close(session_id, user.id)
    return {
        "notification": vars(result.notification),
        "appointment": result.appointment,
        "state": state,
    }


@router.post("/sessions/{session_id}/close", response_model=schemas.WizardState)
def close_session(
    session_id: str,
    sessions: WizardSessions = Depends(get_sessions),
    user: schemas.Principal = Depends(get_current_user),
):
    """Dismiss the dialog: selections go back to how the session was opened."""
    wizard = sessions.get(session_id, user.id)
    wizard.close()
    return _state(session_id, wizard)


@router.delete("/sessions/{session_id}")
def discard_session(
    session_id: str,
    sessions: WizardSessions = Depends(get_sessions),
    user: schemas.Principal = Depends(get_current_user),
):
    sessions.close(session_id, user.id)
    return {"ok": True}
