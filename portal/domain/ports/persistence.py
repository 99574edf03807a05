from __future__ import annotations

from typing import Any, Callable, Dict, List, Protocol

from ..models import Account

Document = Dict[str, Any]
Predicate = Callable[[Document], bool]


class StorageBackend(Protocol):
    """Whole-collection storage for one array of documents."""

    def load(self) -> List[Document]:
        ...

    def save(self, documents: List[Document]) -> None:
        ...

    def describe(self) -> str:
        ...


class AccountDirectory(Protocol):
    """Persistence functions related to admin accounts."""

    def find_by_email(self, email: str) -> Account:
        ...

    def find_by_id(self, account_id: str) -> Account:
        ...

    def find_credentials(self, email: str) -> tuple[Account, str]:
        ...

    def create(self, data: Dict[str, Any]) -> Account:
        ...

    def update(self, account_id: str, data: Dict[str, Any]) -> Account:
        ...

    def deactivate(self, account_id: str) -> bool:
        ...

    def touch_last_login(self, account_id: str) -> None:
        ...

    def list_by_role(self, role: str) -> List[Account]:
        ...

    def list_all(self) -> List[Account]:
        ...


class SessionStore(Protocol):
    """Issued session tokens with expiry, used for revocation lookups."""

    def create(self, account_id: str) -> str:
        ...

    def validate(self, token: str) -> str:
        ...

    def revoke(self, token: str) -> bool:
        ...

    def revoke_all_for_account(self, account_id: str) -> int:
        ...

    def prune_expired(self) -> int:
        ...
