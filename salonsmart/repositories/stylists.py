from typing import Any, Dict, List, Mapping

from ..errors import NotFound, ValidationError
from ..schemas import StylistCreate
from .base import BaseRepository


class StylistRepository(BaseRepository):
    collection = "stylists"

    def list(self) -> List[Dict[str, Any]]:
        return self.store.all(self.collection, order_by=("name",))

    def get(self, stylist_id: str) -> Dict[str, Any]:
        stylist = self.store.get(self.collection, stylist_id)
        if stylist is None:
            raise NotFound("Stylist not found")
        return stylist

    def create(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        self.require_admin()
        data = self.validate(StylistCreate, fields)
        return self.store.insert(self.collection, data)

    def update(self, stylist_id: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        self.require_admin()
        existing = self.get(stylist_id)
        merged = {**self.editable(existing), **self.partial(fields)}
        data = self.validate(StylistCreate, merged)
        return self.store.update(self.collection, stylist_id, data)

    def delete(self, stylist_id: str) -> None:
        self.require_admin()
        self.get(stylist_id)
        if self.store.all("appointments", filters={"stylist_id": stylist_id}):
            raise ValidationError("Cannot delete stylist with existing appointments. Cancel or reassign them first.")
        self.store.delete(self.collection, stylist_id)
