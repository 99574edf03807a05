from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from ....core.dependencies import get_event_repository
from ....domain.models import Account, Permission
from ....infrastructure.repositories.event_repository import EventRepository
from ...api.dependencies import require_permission
from ...api.schemas.event_schemas import EventCreateRequest, EventUpdateRequest

router = APIRouter(prefix="/api/events", tags=["Events"])


@router.get("")
def list_events(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    limit: Optional[int] = Query(default=None, ge=1),
    events: EventRepository = Depends(get_event_repository),
) -> Dict[str, Any]:
    items = events.list(status=status_filter, limit=limit)
    return {"success": True, "events": [item.to_public() for item in items], "count": len(items)}


@router.get("/{event_id}")
def get_event(event_id: str, events: EventRepository = Depends(get_event_repository)) -> Dict[str, Any]:
    return {"success": True, "event": events.get(event_id).to_public()}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventCreateRequest,
    _: Account = Depends(require_permission(Permission.EVENTS)),
    events: EventRepository = Depends(get_event_repository),
) -> Dict[str, Any]:
    event = events.create(payload.model_dump())
    return {"success": True, "message": "Event created successfully", "event": event.to_public()}


@router.put("/{event_id}")
def update_event(
    event_id: str,
    payload: EventUpdateRequest,
    _: Account = Depends(require_permission(Permission.EVENTS)),
    events: EventRepository = Depends(get_event_repository),
) -> Dict[str, Any]:
    event = events.update(event_id, payload.model_dump(exclude_none=True))
    return {"success": True, "message": "Event updated successfully", "event": event.to_public()}


@router.delete("/{event_id}")
def delete_event(
    event_id: str,
    _: Account = Depends(require_permission(Permission.EVENTS)),
    events: EventRepository = Depends(get_event_repository),
) -> Dict[str, Any]:
    events.delete(event_id)
    return {"success": True, "message": "Event deleted successfully"}
