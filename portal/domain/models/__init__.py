"""Domain models for the training portal."""

from .account import Account
from .event import Event, EventStatus
from .news import NewsArticle, NewsStatus
from .roles import Permission, Role
from .session import Session

__all__ = [
    "Account",
    "Event",
    "EventStatus",
    "NewsArticle",
    "NewsStatus",
    "Permission",
    "Role",
    "Session",
]
