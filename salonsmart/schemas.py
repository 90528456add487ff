from datetime import datetime, date
from typing import Optional, List, Dict
from pydantic import BaseModel, EmailStr, Field, field_validator

from .models import ServiceCategory, AppointmentStatus, InvoiceStatus, PaymentMethod, Role
from .slots import TIME_SLOTS


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


# --- Services ---

class ServiceBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    price: float = Field(ge=0, allow_inf_nan=False)
    duration: int = Field(ge=1, le=480)
    category: ServiceCategory = ServiceCategory.HAIR
    image_url: Optional[str] = None
    is_active: bool = True

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("description", mode="before")
    @classmethod
    def empty_description(cls, v):
        return _blank_to_none(v)

    @field_validator("image_url", mode="before")
    @classmethod
    def check_image_url(cls, v):
        v = _blank_to_none(v)
        if v is not None and not str(v).startswith(("http://", "https://")):
            raise ValueError("Must be a valid URL")
        return v

class ServiceCreate(ServiceBase):
    pass

class ServiceUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    duration: Optional[int] = None
    category: Optional[ServiceCategory] = None
    image_url: Optional[str] = None
    is_active: Optional[bool] = None

class ServiceOut(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    price: float
    duration: int
    category: str
    image_url: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    class Config:
        from_attributes = True


# --- Stylists ---

class StylistBase(BaseModel):
    name: str = Field(min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    role: str = "Stylist"
    specialties: List[str] = Field(default_factory=list)
    is_available: bool = True
    rating: float = Field(default=5.0, ge=0, le=5)
    avatar_url: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", "phone", "avatar_url", mode="before")
    @classmethod
    def empty_contact(cls, v):
        return _blank_to_none(v)

    @field_validator("specialties", mode="before")
    @classmethod
    def split_specialties(cls, v):
        # The staff form sends "Color, Balayage" as one string
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        return [s.strip() for s in v if s and s.strip()]

class StylistCreate(StylistBase):
    pass

class StylistUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = None
    specialties: Optional[List[str] | str] = None
    is_available: Optional[bool] = None
    rating: Optional[float] = None
    avatar_url: Optional[str] = None

class StylistOut(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    role: str
    specialties: List[str] = []
    is_available: bool
    rating: float = 5.0
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    class Config:
        from_attributes = True


# --- Appointments ---

class AppointmentCreate(BaseModel):
    service_id: str
    stylist_id: Optional[str] = None
    appointment_date: date
    appointment_time: str
    notes: Optional[str] = None

    @field_validator("appointment_time")
    @classmethod
    def check_slot(cls, v):
        if v not in TIME_SLOTS:
            raise ValueError(f"Time must be one of the half-hour slots {TIME_SLOTS[0]}-{TIME_SLOTS[-1]}")
        return v

    @field_validator("notes", mode="before")
    @classmethod
    def empty_notes(cls, v):
        return _blank_to_none(v)

class AppointmentUpdate(BaseModel):
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None

class ServiceBrief(BaseModel):
    name: str
    price: float
    duration: int

class StylistBrief(BaseModel):
    name: str
    avatar_url: Optional[str] = None

class AppointmentOut(BaseModel):
    id: str
    customer_id: str
    service_id: str
    stylist_id: Optional[str]
    appointment_date: str
    appointment_time: str
    status: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    services: Optional[ServiceBrief] = None
    stylists: Optional[StylistBrief] = None
    class Config:
        from_attributes = True

class MyAppointmentsOut(BaseModel):
    upcoming: List[AppointmentOut]
    past: List[AppointmentOut]


# --- Billing / expenses ---

class InvoiceCreate(BaseModel):
    customer_name: str = Field(min_length=1)
    service: str = Field(min_length=1)
    amount: float = Field(ge=0, allow_inf_nan=False)
    status: InvoiceStatus = InvoiceStatus.PENDING
    method: PaymentMethod = PaymentMethod.CARD
    invoice_date: date

class InvoiceUpdate(BaseModel):
    customer_name: Optional[str] = None
    service: Optional[str] = None
    amount: Optional[float] = None
    status: Optional[InvoiceStatus] = None
    method: Optional[PaymentMethod] = None
    invoice_date: Optional[date] = None

class InvoiceOut(BaseModel):
    id: str
    customer_name: str
    service: str
    amount: float
    status: str
    method: str
    invoice_date: str
    class Config:
        from_attributes = True

class InvoiceSummary(BaseModel):
    paid: float
    pending: float
    overdue: float
    count: int

class ExpenseCreate(BaseModel):
    description: str = Field(min_length=1)
    category: str = Field(min_length=1)
    amount: float = Field(ge=0, allow_inf_nan=False)
    expense_date: date

class ExpenseUpdate(BaseModel):
    description: Optional[str] = None
    category: Optional[str] = None
    amount: Optional[float] = None
    expense_date: Optional[date] = None

class ExpenseOut(BaseModel):
    id: str
    description: str
    category: str
    amount: float
    expense_date: str
    class Config:
        from_attributes = True

class ExpenseSummary(BaseModel):
    total: float
    by_category: Dict[str, float]
    count: int


# --- Reports ---

class DashboardStats(BaseModel):
    total_appointments: int
    revenue: float
    expenses: float
    staff_count: int

class StaffPerformance(BaseModel):
    stylist_id: str
    name: str
    appointments: int
    completed: int
    revenue: float
    rating: float


# --- Auth ---

class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

class SignupRequest(LoginRequest):
    full_name: Optional[str] = None

class RoleSwitch(BaseModel):
    role: Role

class Principal(BaseModel):
    id: str
    email: str
    full_name: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: Role


# --- Booking wizard ---

class WizardOpen(BaseModel):
    service_id: Optional[str] = None

class WizardSelect(BaseModel):
    id: str

class WizardDateTime(BaseModel):
    appointment_date: Optional[date] = None
    appointment_time: Optional[str] = None

class WizardNotes(BaseModel):
    notes: str = ""

class WizardState(BaseModel):
    session_id: str
    step: str
    title: str
    service: Optional[ServiceOut] = None
    stylist: Optional[StylistOut] = None
    appointment_date: Optional[str] = None
    appointment_time: Optional[str] = None
    notes: str = ""
    can_advance: bool
    can_go_back: bool
    submitting: bool

class NotificationOut(BaseModel):
    title: str
    description: str
    variant: str = "default"

class WizardSubmitOut(BaseModel):
    notification: NotificationOut
    appointment: Optional[AppointmentOut] = None
    state: WizardState
