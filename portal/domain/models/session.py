from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict

from ...utils.datetime import parse_datetime


@dataclass(slots=True)
class Session:
    id: str
    account_id: str
    token: str
    expires_at: datetime
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Session":
        return cls(
            id=str(document["id"]),
            account_id=str(document["accountId"]),
            token=document["token"],
            expires_at=parse_datetime(document["expiresAt"]),
            created_at=parse_datetime(document["createdAt"]),
        )
