from datetime import date
from typing import Any, Callable, Dict, Mapping, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..errors import PermissionDenied, ValidationError
from ..schemas import Principal
from ..storage import RecordStore

SYSTEM_FIELDS = ("id", "created_at", "updated_at")


def _describe(exc: PydanticValidationError) -> str:
    err = exc.errors()[0]
    field = ".".join(str(part) for part in err.get("loc", ()))
    msg = err.get("msg", "Invalid value")
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    return f"{field}: {msg}" if field else msg


class BaseRepository:
    """Shared plumbing: the store, who is asking, and today's date."""

    collection: str = ""

    def __init__(self, store: RecordStore, actor: Principal, clock: Callable[[], date] = date.today):
        self.store = store
        self.actor = actor
        self.clock = clock

    def require_admin(self) -> None:
        if not self.actor.is_admin:
            raise PermissionDenied("Insufficient permissions")

    @staticmethod
    def validate(schema: Type[BaseModel], fields: Mapping[str, Any]) -> Dict[str, Any]:
        """Run ``fields`` through ``schema`` and return JSON-safe values.

        Raises the local ``ValidationError`` so callers never reach the store
        with bad input.
        """
        if isinstance(fields, BaseModel):
            fields = fields.model_dump(exclude_unset=True)
        try:
            return schema.model_validate(dict(fields)).model_dump(mode="json")
        except PydanticValidationError as e:
            raise ValidationError(_describe(e))

    @staticmethod
    def editable(record: Mapping[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in record.items() if k not in SYSTEM_FIELDS}

    @staticmethod
    def partial(fields: Mapping[str, Any]) -> Dict[str, Any]:
        if isinstance(fields, BaseModel):
            return fields.model_dump(exclude_unset=True)
        return dict(fields)
