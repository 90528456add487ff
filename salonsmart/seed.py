import logging
from datetime import date, timedelta

from .models import AppointmentStatus, InvoiceStatus, PaymentMethod
from .slots import format_date
from .storage import RecordStore

logger = logging.getLogger(__name__)

DEMO_CUSTOMER_ID = "demo-user"

SAMPLE_SERVICES = [
    {
        "name": "Haircut & Style",
        "description": "Precision cut with wash and blow-dry styling.",
        "price": 650.0,
        "duration": 60,
        "category": "Hair",
    },
    {
        "name": "Hair Coloring",
        "description": "Full color or highlights with toner.",
        "price": 2500.0,
        "duration": 120,
        "category": "Hair",
    },
    {
        "name": "Keratin Treatment",
        "description": "Smoothing treatment for frizz-free hair.",
        "price": 4500.0,
        "duration": 180,
        "category": "Treatment",
    },
    {
        "name": "Gel Manicure",
        "description": "Shaping, cuticle care and long-wear gel polish.",
        "price": 800.0,
        "duration": 45,
        "category": "Nails",
    },
    {
        "name": "Hydrating Facial",
        "description": "Deep cleanse, exfoliation and hydrating mask.",
        "price": 1800.0,
        "duration": 75,
        "category": "Skincare",
    },
    {
        "name": "Hot Stone Massage",
        "description": "Full-body massage with heated basalt stones.",
        "price": 3000.0,
        "duration": 90,
        "category": "Massage",
    },
]

SAMPLE_STYLISTS = [
    {
        "name": "Emma W.",
        "email": "emma@salonsmart.com",
        "role": "Senior Stylist",
        "specialties": ["Coloring", "Balayage", "Bridal"],
        "rating": 4.9,
    },
    {
        "name": "James K.",
        "email": "james@salonsmart.com",
        "role": "Barber",
        "specialties": ["Fades", "Beard Trim"],
        "rating": 4.7,
    },
    {
        "name": "Olivia M.",
        "email": "olivia@salonsmart.com",
        "role": "Nail Technician",
        "specialties": ["Gel", "Nail Art"],
        "rating": 4.8,
    },
    {
        "name": "Sophia L.",
        "email": "sophia@salonsmart.com",
        "role": "Esthetician",
        "specialties": ["Facials", "Massage"],
        "rating": 5.0,
    },
]

SAMPLE_EXPENSES = [
    ("Hair color stock", "Products", 12000.0),
    ("Styling chairs", "Equipment", 35000.0),
    ("Electricity bill", "Utilities", 8500.0),
    ("Instagram ads", "Marketing", 6000.0),
    ("Liability insurance", "Insurance", 9000.0),
]


def _next_open_day(day: date) -> date:
    while day.weekday() == 6:
        day += timedelta(days=1)
    return day


def seed_demo_data(store: RecordStore, today: date) -> None:
    """Fill an empty store with the demo catalogue."""
    if store.all("services"):
        return

    services = [store.insert("services", {**svc, "image_url": None, "is_active": True}) for svc in SAMPLE_SERVICES]
    stylists = [
        store.insert("stylists", {**sty, "phone": None, "is_available": True, "avatar_url": None})
        for sty in SAMPLE_STYLISTS
    ]

    bookings = [
        (today, "10:00", AppointmentStatus.CONFIRMED),
        (today, "14:30", AppointmentStatus.PENDING),
        (_next_open_day(today + timedelta(days=2)), "11:00", AppointmentStatus.PENDING),
        (today - timedelta(days=7), "16:00", AppointmentStatus.COMPLETED),
        (today - timedelta(days=3), "09:30", AppointmentStatus.CANCELLED),
    ]
    for i, (day, time, status) in enumerate(bookings):
        svc = services[i % len(services)]
        sty = stylists[i % len(stylists)]
        store.insert("appointments", {
            "customer_id": DEMO_CUSTOMER_ID,
            "service_id": svc["id"],
            "stylist_id": sty["id"],
            "appointment_date": format_date(day),
            "appointment_time": time,
            "status": status.value,
            "notes": None,
        })
        store.insert("invoices", {
            "customer_name": "Walk-in Guest" if i % 2 else "Demo User",
            "service": svc["name"],
            "amount": svc["price"],
            "status": [InvoiceStatus.PAID, InvoiceStatus.PENDING, InvoiceStatus.OVERDUE][i % 3].value,
            "method": (PaymentMethod.CARD if i % 2 == 0 else PaymentMethod.CASH).value,
            "invoice_date": format_date(day),
        })

    for i, (description, category, amount) in enumerate(SAMPLE_EXPENSES):
        store.insert("expenses", {
            "description": description,
            "category": category,
            "amount": amount,
            "expense_date": format_date(today - timedelta(days=i * 4)),
        })

    logger.info("Seeded demo data: %s services, %s stylists", len(services), len(stylists))
