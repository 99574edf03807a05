"""Pydantic schemas for user management endpoints."""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator


def _merge_single_role(data: Any) -> Any:
    # Older clients send a single ``role`` instead of ``roles``.
    if isinstance(data, dict) and "roles" not in data and data.get("role"):
        data = {**data, "roles": [data["role"]]}
    return data


class UserCreateRequest(BaseModel):
    """Request schema for creating an admin account."""

    email: EmailStr
    name: str = Field(min_length=1)
    password: str = Field(min_length=6)
    roles: List[str] = Field(min_length=1)

    @model_validator(mode="before")
    @classmethod
    def merge_single_role(cls, data: Any) -> Any:
        return _merge_single_role(data)


class UserUpdateRequest(BaseModel):
    """Request schema for a partial account update."""

    model_config = ConfigDict(populate_by_name=True)

    email: Optional[EmailStr] = None
    name: Optional[str] = Field(default=None, min_length=1)
    password: Optional[str] = Field(default=None, min_length=6)
    roles: Optional[List[str]] = Field(default=None, min_length=1)
    is_active: Optional[bool] = Field(default=None, alias="isActive")

    @model_validator(mode="before")
    @classmethod
    def merge_single_role(cls, data: Any) -> Any:
        return _merge_single_role(data)
