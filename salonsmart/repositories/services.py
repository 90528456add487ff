from typing import Any, Dict, List, Mapping, Optional

from ..errors import NotFound
from ..schemas import ServiceCreate
from .base import BaseRepository


class ServiceRepository(BaseRepository):
    """Salon services. Customers only ever see active ones."""

    collection = "services"

    def list(self, category: Optional[str] = None, q: Optional[str] = None) -> List[Dict[str, Any]]:
        """Services by name, optionally narrowed to a category and a search term.

        The search matches name or description, ignoring case.
        """
        filters: Dict[str, Any] = {} if self.actor.is_admin else {"is_active": True}
        if category:
            filters["category"] = category
        rows = self.store.all(self.collection, filters=filters, order_by=("name",))
        term = (q or "").strip().lower()
        if term:
            rows = [
                s for s in rows
                if term in s["name"].lower() or term in (s.get("description") or "").lower()
            ]
        return rows

    def get(self, service_id: str) -> Dict[str, Any]:
        svc = self.store.get(self.collection, service_id)
        if svc is None or (not self.actor.is_admin and not svc["is_active"]):
            raise NotFound("Service not found")
        return svc

    def create(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        self.require_admin()
        data = self.validate(ServiceCreate, fields)
        return self.store.insert(self.collection, data)

    def update(self, service_id: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        self.require_admin()
        existing = self.get(service_id)
        merged = {**self.editable(existing), **self.partial(fields)}
        data = self.validate(ServiceCreate, merged)
        return self.store.update(self.collection, service_id, data)

    def delete(self, service_id: str) -> None:
        self.require_admin()
        self.store.delete(self.collection, service_id)
