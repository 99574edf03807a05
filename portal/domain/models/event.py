from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict

from ...utils.datetime import format_datetime, parse_datetime


class EventStatus(str, Enum):
    UPCOMING = "upcoming"
    REGISTRATION_OPEN = "registration-open"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


DEFAULT_EVENT_IMAGE = "/assets/images/nttc.jpg"


@dataclass(slots=True)
class Event:
    id: str
    title: str
    date: str
    time: str
    location: str
    description: str
    category: str
    attendees: str
    image: str
    status: EventStatus
    max_capacity: int
    current_registrations: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Event":
        return cls(
            id=str(document["id"]),
            title=document["title"],
            date=document.get("date", ""),
            time=document.get("time", ""),
            location=document.get("location", ""),
            description=document.get("description", ""),
            category=document.get("category", ""),
            attendees=str(document.get("attendees", "0")),
            image=document.get("image") or DEFAULT_EVENT_IMAGE,
            status=EventStatus(document.get("status", EventStatus.UPCOMING.value)),
            max_capacity=int(document.get("max_capacity") or 0),
            current_registrations=int(document.get("current_registrations") or 0),
            created_at=parse_datetime(document["created_at"]),
            updated_at=parse_datetime(document["updated_at"]),
        )

    def to_public(self) -> Dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        data["created_at"] = format_datetime(self.created_at)
        data["updated_at"] = format_datetime(self.updated_at)
        return data
