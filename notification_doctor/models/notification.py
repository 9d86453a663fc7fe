# notification_doctor/models/notification.py
from typing import Any, List, Optional

from pydantic import BaseModel, field_validator

_TRUE_STRINGS = ("true", "1", "yes")


class Notification(BaseModel):
    id: str                # id del documento
    userId: str            # dueño
    type: Optional[str] = None
    title: Optional[str] = None
    message: Optional[str] = None
    read: bool = False
    timestamp: Optional[Any] = None   # Timestamp de Firestore, o lo que haya escrito el productor

    # el productor puede escribir cualquier cosa; se muestra tal cual en vez de fallar
    @field_validator("userId", "type", "title", "message", mode="before")
    @classmethod
    def _as_text(cls, value):
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @field_validator("read", mode="before")
    @classmethod
    def _as_flag(cls, value):
        # si no trae 'read' se cuenta como NO leída
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in _TRUE_STRINGS
        return bool(value)

    @classmethod
    def from_document(cls, doc_id: str, data: Optional[dict]) -> "Notification":
        data = dict(data or {})
        data["id"] = doc_id
        return cls.model_validate(data)


class NotificationChange(BaseModel):
    kind: str              # added | modified | removed
    notification: Notification
    data: Optional[Any] = None   # dict crudo tal como vino del store


class SnapshotEvent(BaseModel):
    total: int
    changes: List[NotificationChange] = []
