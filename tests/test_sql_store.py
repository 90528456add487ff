import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from salonsmart.config import settings
from salonsmart.database import Base
from salonsmart.deps import get_store
from salonsmart.errors import NotFound, WriteError
from salonsmart.repositories.appointments import AppointmentRepository
from salonsmart.repositories.services import ServiceRepository
from salonsmart.seed import seed_demo_data
from salonsmart.storage import SqlStore

from conftest import TODAY, clock


@pytest.fixture
def sql_store():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    db = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    store = SqlStore(db)
    seed_demo_data(store, TODAY)
    yield store
    db.close()
    engine.dispose()


def test_seeded_rows_come_back_as_dicts(sql_store):
    stylists = sql_store.all("stylists", order_by=("name",))
    assert [s["name"] for s in stylists][0] == "Emma W."
    assert stylists[0]["specialties"] == ["Coloring", "Balayage", "Bridal"]
    assert isinstance(stylists[0]["id"], str)


def test_filters_and_descending_order(sql_store):
    paid = sql_store.all("invoices", filters={"status": "paid"}, order_by=("invoice_date",), descending=True)
    assert [i["amount"] for i in paid] == [650.0, 800.0]


def test_update_refreshes_timestamp(sql_store):
    svc = sql_store.all("services")[0]
    updated = sql_store.update("services", svc["id"], {"price": 999.0})
    assert updated["price"] == 999.0
    assert updated["updated_at"] >= svc["updated_at"]
    assert sql_store.get("services", svc["id"])["price"] == 999.0


def test_missing_records(sql_store):
    assert sql_store.get("services", "missing") is None
    with pytest.raises(NotFound):
        sql_store.update("services", "missing", {"price": 1.0})
    with pytest.raises(NotFound):
        sql_store.delete("services", "missing")


def test_rejected_write_rolls_back(sql_store):
    with pytest.raises(WriteError):
        sql_store.insert("services", {"price": 10.0, "duration": 30})
    # session is usable again after the rollback
    assert len(sql_store.all("services")) == 6


def test_repositories_apply_same_rules_over_sql(sql_store, admin, customer):
    admin_services = ServiceRepository(sql_store, admin, clock)
    hidden = admin_services.create({"name": "Retired Perm", "price": 100, "duration": 60, "is_active": False})

    visible = [s["id"] for s in ServiceRepository(sql_store, customer, clock).list()]
    assert hidden["id"] not in visible
    assert len(visible) == 6

    repo = AppointmentRepository(sql_store, customer, clock)
    apt = repo.create({
        "service_id": visible[0],
        "appointment_date": "2025-03-10",
        "appointment_time": "17:30",
    })
    repo.delete(apt["id"])
    rows = repo.list()
    assert [(r["id"], r["status"]) for r in rows] == [(apt["id"], "cancelled")]


def test_service_search_runs_against_sql(sql_store, admin):
    services = ServiceRepository(sql_store, admin, clock)
    assert [s["name"] for s in services.list(category="Hair", q="colo")] == ["Hair Coloring"]


def test_request_store_wraps_the_request_session(sql_store, monkeypatch):
    monkeypatch.setattr(settings, "DEMO_MODE", False)
    store = get_store(None, sql_store.db)
    assert isinstance(store, SqlStore)
    assert store.db is sql_store.db
