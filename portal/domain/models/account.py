"""Administrator account domain model."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from ...utils.datetime import format_datetime, parse_datetime, parse_optional_datetime
from .roles import Permission, normalize_roles, permissions_for


@dataclass(slots=True)
class Account:
    """
    Account of a person allowed into the admin area.

    The password hash is deliberately not an attribute: it stays inside the
    account repository and never travels with the account.
    """

    id: str
    email: str
    name: str
    roles: List[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime
    last_login: Optional[datetime] = None
    created_by: Optional[str] = None
    permissions: List[str] = field(init=False, default_factory=list)

    def __post_init__(self) -> None:
        self.permissions = permissions_for(self.roles)

    @property
    def primary_role(self) -> Optional[str]:
        return self.roles[0] if self.roles else None

    def has_permission(self, permission: Union[Permission, str]) -> bool:
        value = permission.value if isinstance(permission, Permission) else permission
        return value in self.permissions

    def has_role(self, role: str) -> bool:
        return role in self.roles

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Account":
        roles = document.get("roles")
        if roles is None:
            roles = document.get("role")
        return cls(
            id=str(document["id"]),
            email=document["email"],
            name=document.get("name", ""),
            roles=normalize_roles(roles),
            is_active=bool(document.get("isActive", True)),
            created_at=parse_datetime(document["createdAt"]),
            updated_at=parse_datetime(document["updatedAt"]),
            last_login=parse_optional_datetime(document.get("lastLogin")),
            created_by=document.get("createdBy"),
        )

    def to_public(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.primary_role,
            "roles": list(self.roles),
            "isActive": self.is_active,
            "createdAt": format_datetime(self.created_at),
            "updatedAt": format_datetime(self.updated_at),
            "lastLogin": format_datetime(self.last_login) if self.last_login else None,
            "createdBy": self.created_by,
        }
