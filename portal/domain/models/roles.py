from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List, Union

from ..errors import ValidationError


class Role(str, Enum):
    SUPER_ADMIN = "super_admin"
    USER_MANAGER = "user_manager"
    EVENTS_MANAGER = "events_manager"
    NEWS_MANAGER = "news_manager"


class Permission(str, Enum):
    USERS = "users"
    EVENTS = "events"
    NEWS = "news"
    SETTINGS = "settings"


# Backend role names and the legacy single-admin role map onto the local tags.
ROLE_ALIASES: Dict[str, Role] = {
    "user_management": Role.USER_MANAGER,
    "events": Role.EVENTS_MANAGER,
    "news": Role.NEWS_MANAGER,
    "admin": Role.SUPER_ADMIN,
}

PERMISSIONS: Dict[Role, List[Permission]] = {
    Role.SUPER_ADMIN: [Permission.USERS, Permission.EVENTS, Permission.NEWS, Permission.SETTINGS],
    Role.USER_MANAGER: [Permission.USERS],
    Role.EVENTS_MANAGER: [Permission.EVENTS],
    Role.NEWS_MANAGER: [Permission.NEWS],
}


def normalize_role(value: Union[str, Role]) -> Role:
    if isinstance(value, Role):
        return value
    key = str(value).strip().lower()
    if key in ROLE_ALIASES:
        return ROLE_ALIASES[key]
    try:
        return Role(key)
    except ValueError as exc:
        raise ValidationError(f"Invalid role: {value}") from exc


def normalize_roles(values: Union[str, Role, Iterable[Union[str, Role]], None]) -> List[str]:
    """Return canonical role tags, de-duplicated, in the order supplied."""
    if values is None:
        return []
    if isinstance(values, (str, Role)):
        values = [values]
    result: List[str] = []
    for value in values:
        role = normalize_role(value).value
        if role not in result:
            result.append(role)
    return result


def permissions_for(roles: Iterable[str]) -> List[str]:
    granted: List[str] = []
    for role in roles:
        for permission in PERMISSIONS.get(normalize_role(role), []):
            if permission.value not in granted:
                granted.append(permission.value)
    return granted
