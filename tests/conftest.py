from datetime import date

import pytest
from fastapi.testclient import TestClient

from salonsmart.auth import demo_principal, token_for
from salonsmart.booking import WizardSessions
from salonsmart.deps import get_clock, get_sessions, get_store
from salonsmart.main import app
from salonsmart.models import Role
from salonsmart.seed import seed_demo_data
from salonsmart.storage import MemoryStore

# A Monday; the seeded schedule is laid out around it
TODAY = date(2025, 3, 3)


def clock():
    return TODAY


@pytest.fixture
def store():
    s = MemoryStore()
    seed_demo_data(s, TODAY)
    return s


@pytest.fixture
def admin():
    return demo_principal("owner@salon.local", "Store Owner", Role.ADMIN)


@pytest.fixture
def customer():
    return demo_principal("alice@example.com", "Alice", Role.CUSTOMER)


@pytest.fixture
def sessions():
    return WizardSessions()


@pytest.fixture
def client(store, sessions):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_sessions] = lambda: sessions
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(admin):
    return {"Authorization": f"Bearer {token_for(admin)}"}


@pytest.fixture
def customer_headers(customer):
    return {"Authorization": f"Bearer {token_for(customer)}"}


@pytest.fixture
def bob_headers():
    bob = demo_principal("bob@example.com", "Bob", Role.CUSTOMER)
    return {"Authorization": f"Bearer {token_for(bob)}"}
