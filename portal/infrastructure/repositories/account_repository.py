"""Repository for admin account persistence."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from email_validator import EmailNotValidError, validate_email

from ..persistence.document_store import DocumentStore
from ..security import Clock, PasswordHasher
from ...domain.errors import ConflictError, NotFoundError, ValidationError
from ...domain.models import Account
from ...domain.models.roles import normalize_role, normalize_roles
from ...domain.ports.persistence import Document
from ...utils.datetime import format_datetime, parse_datetime, utc_now

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = ("email", "name", "password", "roles", "role", "is_active", "isActive")


class AccountRepository:
    """
    Admin accounts stored as ``users.json`` style documents.

    Accounts are never hard deleted: deactivation keeps the record so that
    ``createdBy`` links and session history still resolve. Email uniqueness is
    only enforced among active accounts, which makes the address of a
    deactivated account reusable.
    """

    def __init__(
        self,
        store: DocumentStore,
        hasher: PasswordHasher,
        clock: Optional[Clock] = None,
    ) -> None:
        self._store = store
        self._hasher = hasher
        self._clock = clock or utc_now

    # Queries ----------------------------------------------------------------
    def find_by_email(self, email: str) -> Account:
        return Account.from_document(self._find_active_document(email))

    def find_by_id(self, account_id: str) -> Account:
        return Account.from_document(self._get_document(account_id))

    def find_credentials(self, email: str) -> tuple[Account, str]:
        """Return the active account and its password hash; for authentication only."""
        document = self._find_active_document(email)
        return Account.from_document(document), document.get("password", "")

    def list_all(self, include_inactive: bool = False) -> List[Account]:
        documents = self._store.find_where(
            lambda doc: include_inactive or doc.get("isActive", True)
        )
        return [Account.from_document(doc) for doc in documents]

    def list_by_role(self, role: str) -> List[Account]:
        wanted = normalize_role(role).value
        return [account for account in self.list_all() if account.has_role(wanted)]

    # Mutations --------------------------------------------------------------
    def create(self, data: Dict[str, Any]) -> Account:
        email = self._clean_email(data.get("email"))
        password = data.get("password")
        if not password:
            raise ValidationError("Password is required.")
        name = (data.get("name") or "").strip()
        roles = normalize_roles(data.get("roles", data.get("role")))

        password_hash = self._hasher.hash(password)
        now = format_datetime(self._clock())
        document: Document = {
            "email": email,
            "name": name,
            "password": password_hash,
            "roles": roles,
            "role": roles[0] if roles else None,
            "isActive": bool(data.get("is_active", True)),
            "createdAt": now,
            "updatedAt": now,
        }
        if data.get("created_by"):
            document["createdBy"] = str(data["created_by"])
        with self._store.write_lock():
            if self._email_taken(email):
                raise ConflictError("User with this email already exists")
            created = self._store.create(document, data.get("id"))
        logger.info("Created account %s (%s)", created["id"], email)
        return Account.from_document(created)

    def update(self, account_id: str, data: Dict[str, Any]) -> Account:
        unknown = set(data) - set(_UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unsupported account fields: {', '.join(sorted(unknown))}")

        changes: Document = {}
        if data.get("email") is not None:
            changes["email"] = self._clean_email(data["email"])
        if data.get("name") is not None:
            changes["name"] = str(data["name"]).strip()
        roles_value = data.get("roles", data.get("role"))
        if roles_value is not None:
            roles = normalize_roles(roles_value)
            changes["roles"] = roles
            changes["role"] = roles[0] if roles else None
        active_value = data.get("is_active", data.get("isActive"))
        if active_value is not None:
            changes["isActive"] = bool(active_value)
        if data.get("password"):
            changes["password"] = self._hasher.hash(data["password"])

        with self._store.write_lock():
            existing = self._get_document(account_id)
            will_be_active = changes.get("isActive", existing.get("isActive", True))
            email_after = changes.get("email", existing["email"])
            email_changed = email_after.casefold() != existing["email"].casefold()
            reactivated = will_be_active and not existing.get("isActive", True)
            if will_be_active and (email_changed or reactivated):
                if self._email_taken(email_after, exclude_id=account_id):
                    raise ConflictError("User with this email already exists")

            changes["updatedAt"] = self._timestamp_after(existing)
            updated = self._store.update(account_id, changes)
        return Account.from_document(updated)

    def deactivate(self, account_id: str) -> bool:
        existing = self._get_document(account_id)
        self._store.update(
            account_id,
            {"isActive": False, "updatedAt": self._timestamp_after(existing)},
        )
        logger.info("Deactivated account %s", account_id)
        return True

    def touch_last_login(self, account_id: str) -> None:
        existing = self._get_document(account_id)
        now = self._timestamp_after(existing)
        self._store.update(account_id, {"lastLogin": now, "updatedAt": now})

    # Helpers ----------------------------------------------------------------
    def _get_document(self, account_id: str) -> Document:
        try:
            return self._store.find_by_id(account_id)
        except NotFoundError as exc:
            raise NotFoundError("User not found") from exc

    def _find_active_document(self, email: str) -> Document:
        wanted = (email or "").strip().casefold()
        try:
            return self._store.find_one(
                lambda doc: doc.get("isActive", True) and doc.get("email", "").casefold() == wanted
            )
        except NotFoundError as exc:
            raise NotFoundError("User not found") from exc

    def _email_taken(self, email: str, exclude_id: Optional[str] = None) -> bool:
        wanted = email.casefold()
        return (
            self._store.count(
                lambda doc: doc.get("isActive", True)
                and doc.get("id") != exclude_id
                and doc.get("email", "").casefold() == wanted
            )
            > 0
        )

    def _timestamp_after(self, existing: Document) -> str:
        now = self._clock()
        created = parse_datetime(existing["createdAt"])
        return format_datetime(max(now, created))

    @staticmethod
    def _clean_email(value: Any) -> str:
        email = str(value or "").strip()
        if not email:
            raise ValidationError("Email is required.")
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError as exc:
            raise ValidationError("Invalid email format") from exc
        return email
