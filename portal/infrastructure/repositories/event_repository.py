"""Repository for training events."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..persistence.document_store import DocumentStore
from ..security import Clock
from ...domain.errors import NotFoundError, ValidationError
from ...domain.models import Event, EventStatus
from ...domain.models.event import DEFAULT_EVENT_IMAGE
from ...utils.datetime import format_datetime, utc_now

REQUIRED_EVENT_FIELDS = ("title", "date", "time", "location", "description", "category")

_EVENT_FIELDS = REQUIRED_EVENT_FIELDS + (
    "attendees",
    "image",
    "status",
    "max_capacity",
    "current_registrations",
)


class EventRepository:
    def __init__(self, store: DocumentStore, clock: Optional[Clock] = None) -> None:
        self._store = store
        self._clock = clock or utc_now

    def list(self, status: Optional[str] = None, limit: Optional[int] = None) -> List[Event]:
        wanted = _parse_status(status) if status else None
        events = [Event.from_document(doc) for doc in self._store.read_all()]
        if wanted is not None:
            events = [event for event in events if event.status is wanted]
        events.sort(key=lambda event: (event.date, event.time))
        if limit and limit > 0:
            events = events[:limit]
        return events

    def get(self, event_id: str) -> Event:
        try:
            return Event.from_document(self._store.find_by_id(event_id))
        except NotFoundError as exc:
            raise NotFoundError("Event not found") from exc

    def create(self, data: Dict[str, Any]) -> Event:
        missing = [name for name in REQUIRED_EVENT_FIELDS if not data.get(name)]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        now = format_datetime(self._clock())
        document = {
            "title": data["title"],
            "date": data["date"],
            "time": data["time"],
            "location": data["location"],
            "description": data["description"],
            "category": data["category"],
            "attendees": str(data.get("attendees") or "0"),
            "image": data.get("image") or DEFAULT_EVENT_IMAGE,
            "status": _parse_status(data.get("status") or EventStatus.UPCOMING.value).value,
            "max_capacity": int(data.get("max_capacity") or 100),
            "current_registrations": int(data.get("current_registrations") or 0),
            "created_at": now,
            "updated_at": now,
        }
        return Event.from_document(self._store.create(document, data.get("id")))

    def update(self, event_id: str, data: Dict[str, Any]) -> Event:
        changes = {key: value for key, value in data.items() if key in _EVENT_FIELDS and value is not None}
        if "status" in changes:
            changes["status"] = _parse_status(changes["status"]).value
        changes["updated_at"] = format_datetime(self._clock())
        try:
            return Event.from_document(self._store.update(event_id, changes))
        except NotFoundError as exc:
            raise NotFoundError("Event not found") from exc

    def delete(self, event_id: str) -> bool:
        try:
            return self._store.delete(event_id)
        except NotFoundError as exc:
            raise NotFoundError("Event not found") from exc


def _parse_status(value: Any) -> EventStatus:
    try:
        return EventStatus(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid event status: {value}") from exc
