from datetime import date
from typing import Callable

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from .auth import principal_from_token
from .booking import WizardSessions
from .config import settings
from .database import get_db
from .repositories.appointments import AppointmentRepository
from .repositories.billing import ExpenseRepository, InvoiceRepository
from .repositories.reports import ReportRepository
from .repositories.services import ServiceRepository
from .repositories.stylists import StylistRepository
from .schemas import Principal
from .storage import RecordStore, SqlStore

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def get_current_user(token: str = Depends(oauth2_scheme)) -> Principal:
    principal = principal_from_token(token)
    if principal is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return principal


def get_store(request: Request, db: Session = Depends(get_db)) -> RecordStore:
    # Demo mode shares one seeded in-memory store across requests
    if settings.DEMO_MODE:
        return request.app.state.store
    return SqlStore(db)


def get_clock() -> Callable[[], date]:
    return date.today


def get_sessions(request: Request) -> WizardSessions:
    return request.app.state.booking_sessions


def get_service_repo(
    store: RecordStore = Depends(get_store),
    user: Principal = Depends(get_current_user),
    clock=Depends(get_clock),
) -> ServiceRepository:
    return ServiceRepository(store, user, clock)


def get_stylist_repo(
    store: RecordStore = Depends(get_store),
    user: Principal = Depends(get_current_user),
    clock=Depends(get_clock),
) -> StylistRepository:
    return StylistRepository(store, user, clock)


def get_appointment_repo(
    store: RecordStore = Depends(get_store),
    user: Principal = Depends(get_current_user),
    clock=Depends(get_clock),
) -> AppointmentRepository:
    return AppointmentRepository(store, user, clock, prevent_double_booking=settings.PREVENT_DOUBLE_BOOKING)


def get_invoice_repo(
    store: RecordStore = Depends(get_store),
    user: Principal = Depends(get_current_user),
    clock=Depends(get_clock),
) -> InvoiceRepository:
    return InvoiceRepository(store, user, clock)


def get_expense_repo(
    store: RecordStore = Depends(get_store),
    user: Principal = Depends(get_current_user),
    clock=Depends(get_clock),
) -> ExpenseRepository:
    return ExpenseRepository(store, user, clock)


def get_report_repo(
    store: RecordStore = Depends(get_store),
    user: Principal = Depends(get_current_user),
    clock=Depends(get_clock),
) -> ReportRepository:
    return ReportRepository(store, user, clock)
