"""Record stores behind the repositories.

Both stores expose the same collection/id keyed interface and hand out plain
dicts. ``MemoryStore`` backs demo mode and the tests; ``SqlStore`` wraps a
SQLAlchemy session over the ORM tables in ``models``.
"""
import copy
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models
from .errors import DataUnavailable, NotFound, WriteError

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

COLLECTIONS = {
    "services": models.Service,
    "stylists": models.Stylist,
    "appointments": models.Appointment,
    "invoices": models.Invoice,
    "expenses": models.Expense,
}


class RecordStore:
    def all(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Sequence[str] = (),
        descending: bool = False,
    ) -> List[Record]:
        raise NotImplementedError

    def get(self, collection: str, record_id: str) -> Optional[Record]:
        raise NotImplementedError

    def insert(self, collection: str, fields: Record) -> Record:
        raise NotImplementedError

    def update(self, collection: str, record_id: str, fields: Record) -> Record:
        raise NotImplementedError

    def delete(self, collection: str, record_id: str) -> None:
        raise NotImplementedError


def _sort_key(order_by: Sequence[str]):
    # None sorts first, same as an ascending ORDER BY in sqlite
    return lambda rec: tuple((rec.get(k) is not None, rec.get(k)) for k in order_by)


class MemoryStore(RecordStore):
    """Dict of collections, each a dict of records keyed by id."""

    def __init__(self):
        self._data: Dict[str, Dict[str, Record]] = {name: {} for name in COLLECTIONS}
        self.fail_reads = False
        self.fail_writes = False

    def _table(self, collection: str) -> Dict[str, Record]:
        if collection not in self._data:
            raise DataUnavailable(f"Unknown collection '{collection}'")
        return self._data[collection]

    def _check_read(self):
        if self.fail_reads:
            raise DataUnavailable("Data store is unreachable")

    def _check_write(self):
        if self.fail_writes:
            raise WriteError("Data store rejected the write")

    def all(self, collection, filters=None, order_by=(), descending=False):
        self._check_read()
        rows = [
            copy.deepcopy(rec)
            for rec in self._table(collection).values()
            if all(rec.get(k) == v for k, v in (filters or {}).items())
        ]
        if order_by:
            rows.sort(key=_sort_key(order_by), reverse=descending)
        return rows

    def get(self, collection, record_id):
        self._check_read()
        rec = self._table(collection).get(record_id)
        return copy.deepcopy(rec) if rec is not None else None

    def insert(self, collection, fields):
        self._check_write()
        now = datetime.utcnow()
        rec = {"created_at": now, "updated_at": now, **copy.deepcopy(fields)}
        rec.setdefault("id", models.new_id())
        self._table(collection)[rec["id"]] = rec
        logger.info("Inserted %s/%s", collection, rec["id"])
        return copy.deepcopy(rec)

    def update(self, collection, record_id, fields):
        self._check_write()
        table = self._table(collection)
        if record_id not in table:
            raise NotFound(f"{collection[:-1].capitalize()} not found")
        # Reassign rather than mutate so earlier snapshots stay intact
        table[record_id] = {**table[record_id], **copy.deepcopy(fields), "updated_at": datetime.utcnow()}
        logger.info("Updated %s/%s", collection, record_id)
        return copy.deepcopy(table[record_id])

    def delete(self, collection, record_id):
        self._check_write()
        table = self._table(collection)
        if record_id not in table:
            raise NotFound(f"{collection[:-1].capitalize()} not found")
        del table[record_id]
        logger.info("Deleted %s/%s", collection, record_id)


class SqlStore(RecordStore):
    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _model(collection: str):
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise DataUnavailable(f"Unknown collection '{collection}'")

    @staticmethod
    def _to_dict(obj) -> Record:
        return {attr.key: getattr(obj, attr.key) for attr in sa_inspect(obj).mapper.column_attrs}

    def all(self, collection, filters=None, order_by=(), descending=False):
        model = self._model(collection)
        try:
            q = self.db.query(model)
            for key, value in (filters or {}).items():
                q = q.filter(getattr(model, key) == value)
            columns = [getattr(model, key) for key in order_by]
            if descending:
                columns = [c.desc() for c in columns]
            return [self._to_dict(obj) for obj in q.order_by(*columns).all()]
        except SQLAlchemyError as e:
            logger.error("Failed to read %s: %s", collection, e)
            raise DataUnavailable("Data store is unreachable")

    def get(self, collection, record_id):
        model = self._model(collection)
        try:
            obj = self.db.get(model, record_id)
        except SQLAlchemyError as e:
            logger.error("Failed to read %s/%s: %s", collection, record_id, e)
            raise DataUnavailable("Data store is unreachable")
        return self._to_dict(obj) if obj is not None else None

    def _commit(self, collection: str, obj):
        try:
            self.db.commit()
            self.db.refresh(obj)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Write to %s failed: %s", collection, e)
            raise WriteError("Data store rejected the write")

    def insert(self, collection, fields):
        model = self._model(collection)
        now = datetime.utcnow()
        obj = model(**{"created_at": now, "updated_at": now, **fields})
        self.db.add(obj)
        self._commit(collection, obj)
        logger.info("Inserted %s/%s", collection, obj.id)
        return self._to_dict(obj)

    def _load(self, collection, record_id):
        model = self._model(collection)
        try:
            obj = self.db.get(model, record_id)
        except SQLAlchemyError as e:
            logger.error("Failed to read %s/%s: %s", collection, record_id, e)
            raise WriteError("Data store rejected the write")
        if obj is None:
            raise NotFound(f"{collection[:-1].capitalize()} not found")
        return obj

    def update(self, collection, record_id, fields):
        obj = self._load(collection, record_id)
        for key, value in fields.items():
            setattr(obj, key, value)
        obj.updated_at = datetime.utcnow()
        self._commit(collection, obj)
        logger.info("Updated %s/%s", collection, record_id)
        return self._to_dict(obj)

    def delete(self, collection, record_id):
        obj = self._load(collection, record_id)
        self.db.delete(obj)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Delete from %s failed: %s", collection, e)
            raise WriteError("Data store rejected the write")
        logger.info("Deleted %s/%s", collection, record_id)
