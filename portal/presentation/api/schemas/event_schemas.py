from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class EventCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    date: str
    time: str
    location: str
    description: str
    category: str
    attendees: Optional[str] = None
    image: Optional[str] = None
    status: Optional[str] = None
    max_capacity: Optional[int] = Field(default=None, alias="maxCapacity", ge=0)
    current_registrations: Optional[int] = Field(default=None, alias="currentRegistrations", ge=0)


class EventUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    attendees: Optional[str] = None
    image: Optional[str] = None
    status: Optional[str] = None
    max_capacity: Optional[int] = Field(default=None, alias="maxCapacity", ge=0)
    current_registrations: Optional[int] = Field(default=None, alias="currentRegistrations", ge=0)
