from datetime import date as date_type
from fastapi import APIRouter, Depends
from typing import List, Optional
from .. import schemas
from ..deps import get_report_repo
from ..repositories.reports import ReportRepository

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/dashboard", response_model=schemas.DashboardStats)
def dashboard(repo: ReportRepository = Depends(get_report_repo)):
    return repo.dashboard()


@router.get("/schedule", response_model=List[schemas.AppointmentOut])
def schedule(day: Optional[date_type] = None, repo: ReportRepository = Depends(get_report_repo)):
    """Today's schedule unless ``day`` is given."""
    return repo.schedule(day)


@router.get("/staff", response_model=List[schemas.StaffPerformance])
def staff_performance(repo: ReportRepository = Depends(get_report_repo)):
    return repo.staff_performance()
