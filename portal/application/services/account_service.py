"""Service for admin user management."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ...domain.errors import ForbiddenError, ValidationError
from ...domain.models import Account, Permission, Role
from ...domain.models.roles import normalize_roles
from ...domain.ports.persistence import AccountDirectory, SessionStore

logger = logging.getLogger(__name__)

_SELF_EDITABLE_FIELDS = {"email", "name", "password"}


class AccountService:
    """
    Applies the admin-area rules on top of the account directory.

    Managers (``users`` permission) may manage everybody; other accounts may
    only read and edit their own profile. Only super administrators can hand
    out the ``super_admin`` role.
    """

    def __init__(self, accounts: AccountDirectory, sessions: SessionStore) -> None:
        self._accounts = accounts
        self._sessions = sessions

    def list_accounts(self, actor: Account, role: Optional[str] = None) -> List[Account]:
        self._require_manager(actor)
        if role:
            return self._accounts.list_by_role(role)
        return self._accounts.list_all()

    def get_account(self, actor: Account, account_id: str) -> Account:
        if actor.id != account_id:
            self._require_manager(actor)
        return self._accounts.find_by_id(account_id)

    def create_account(self, actor: Account, data: Dict[str, Any]) -> Account:
        self._require_manager(actor)
        roles = normalize_roles(data.get("roles"))
        if not roles:
            raise ValidationError("At least one role is required.")
        self._check_role_grant(actor, roles)
        payload = {**data, "roles": roles, "created_by": actor.id}
        account = self._accounts.create(payload)
        logger.info("Account %s created by %s", account.id, actor.id)
        return account

    def update_account(self, actor: Account, account_id: str, data: Dict[str, Any]) -> Account:
        changes = {key: value for key, value in data.items() if value is not None}
        is_manager = actor.has_permission(Permission.USERS)
        if not is_manager:
            if actor.id != account_id:
                raise ForbiddenError()
            if set(changes) - _SELF_EDITABLE_FIELDS:
                raise ForbiddenError("Insufficient permissions to change role or status")

        if "roles" in changes:
            roles = normalize_roles(changes["roles"])
            if not roles:
                raise ValidationError("At least one role is required.")
            self._check_role_grant(actor, roles)
            changes["roles"] = roles
        if changes.get("is_active") is False:
            return self._deactivate(actor, account_id, changes)

        return self._accounts.update(account_id, changes)

    def deactivate_account(self, actor: Account, account_id: str) -> bool:
        self._require_manager(actor)
        self._deactivate(actor, account_id, {})
        return True

    def toggle_status(self, actor: Account, account_id: str) -> Account:
        self._require_manager(actor)
        account = self._accounts.find_by_id(account_id)
        if account.is_active:
            return self._deactivate(actor, account_id, {"is_active": False})
        return self._accounts.update(account_id, {"is_active": True})

    # ------------------------------------------------------------------
    def _deactivate(self, actor: Account, account_id: str, changes: Dict[str, Any]) -> Account:
        if actor.id == account_id:
            raise ForbiddenError("You cannot deactivate your own account")
        if changes:
            account = self._accounts.update(account_id, {**changes, "is_active": False})
        else:
            self._accounts.deactivate(account_id)
            account = self._accounts.find_by_id(account_id)
        self._sessions.revoke_all_for_account(account_id)
        logger.info("Account %s deactivated by %s", account_id, actor.id)
        return account

    @staticmethod
    def _require_manager(actor: Account) -> None:
        if not actor.has_permission(Permission.USERS):
            raise ForbiddenError()

    @staticmethod
    def _check_role_grant(actor: Account, roles: List[str]) -> None:
        if Role.SUPER_ADMIN.value in roles and not actor.has_role(Role.SUPER_ADMIN.value):
            raise ForbiddenError("Only super administrators can create other super administrators")
