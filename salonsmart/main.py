import logging
from contextlib import asynccontextmanager
from datetime import date

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .booking import WizardSessions
from .config import settings
from .database import Base, engine
from .errors import SalonError
from .routers import appointments as appointments_router
from .routers import auth as auth_router
from .routers import billing as billing_router
from .routers import booking as booking_router
from .routers import expenses as expenses_router
from .routers import reports as reports_router
from .routers import services as services_router
from .routers import stylists as stylists_router
from .seed import seed_demo_data
from .storage import MemoryStore

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.DEMO_MODE:
        seed_demo_data(app.state.store, date.today())
        logger.info("Running in demo mode with the in-memory store")
    else:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables ready")
    yield


app = FastAPI(title="SalonSmart API", lifespan=lifespan)

app.state.store = MemoryStore()
app.state.booking_sessions = WizardSessions(idle_seconds=settings.BOOKING_SESSION_IDLE_MINUTES * 60)


@app.exception_handler(SalonError)
async def salon_error_handler(request: Request, exc: SalonError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": type(exc).__name__},
    )


app.include_router(auth_router.router)
app.include_router(services_router.router)
app.include_router(stylists_router.router)
app.include_router(appointments_router.router)
app.include_router(booking_router.router)
app.include_router(billing_router.router)
app.include_router(expenses_router.router)
app.include_router(reports_router.router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

@app.get("/health")
def health():
    return {"status": "ok", "demo_mode": settings.DEMO_MODE}
