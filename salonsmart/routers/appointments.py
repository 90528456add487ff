# salonsmart/routers/appointments.py
from datetime import date as date_type
from typing import List, Optional
from fastapi import APIRouter, Depends
from .. import schemas
from ..deps import get_appointment_repo
from ..repositories.appointments import AppointmentRepository

router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.get("/", response_model=List[schemas.AppointmentOut])
def list_appointments(date: Optional[date_type] = None, repo: AppointmentRepository = Depends(get_appointment_repo)):
    """Operators see every appointment, customers only their own. ``date`` narrows to one calendar day."""
    return repo.list(on_date=date)


@router.get("/me", response_model=schemas.MyAppointmentsOut)
def my_appointments(repo: AppointmentRepository = Depends(get_appointment_repo)):
    return repo.mine()


@router.get("/{appointment_id}", response_model=schemas.AppointmentOut)
def get_appointment(appointment_id: str, repo: AppointmentRepository = Depends(get_appointment_repo)):
    return repo.get(appointment_id)


@router.post("/", response_model=schemas.AppointmentOut)
def create_appointment(payload: schemas.AppointmentCreate, repo: AppointmentRepository = Depends(get_appointment_repo)):
    return repo.create(payload)


@router.patch("/{appointment_id}", response_model=schemas.AppointmentOut)
def update_appointment(
    appointment_id: str,
    payload: schemas.AppointmentUpdate,
    repo: AppointmentRepository = Depends(get_appointment_repo),
):
    return repo.update(appointment_id, payload)


@router.put("/{appointment_id}/cancel", response_model=schemas.AppointmentOut)
def cancel_appointment(appointment_id: str, repo: AppointmentRepository = Depends(get_appointment_repo)):
    return repo.cancel(appointment_id)


# Appointments are never removed; DELETE is a cancellation.
@router.delete("/{appointment_id}", response_model=schemas.AppointmentOut)
def delete_appointment(appointment_id: str, repo: AppointmentRepository = Depends(get_appointment_repo)):
    return repo.delete(appointment_id)
