from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ...domain.errors import (
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    TokenExpiredError,
    UnauthorizedError,
)
from ...domain.models import Account, Role
from ...domain.ports.persistence import AccountDirectory, SessionStore
from ...infrastructure.security import PasswordHasher

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LoginResult:
    token: str
    account: Account


class AuthService:
    """Login, token verification and logout for admin accounts."""

    def __init__(
        self,
        accounts: AccountDirectory,
        sessions: SessionStore,
        hasher: PasswordHasher,
    ) -> None:
        self._accounts = accounts
        self._sessions = sessions
        self._hasher = hasher
        self._placeholder_hash: Optional[str] = None

    # ------------------------------------------------------------------
    def ensure_default_admin(
        self, email: Optional[str], password: Optional[str], name: str = "Administrator"
    ) -> Optional[Account]:
        if not email or not password:
            return None
        try:
            return self._accounts.find_by_email(email)
        except NotFoundError:
            pass
        logger.info("Creating default administrator account for %s", email)
        return self._accounts.create(
            {
                "email": email,
                "name": name,
                "password": password,
                "roles": [Role.SUPER_ADMIN.value],
            }
        )

    def login(self, email: str, password: str) -> LoginResult:
        self._sessions.prune_expired()

        try:
            account, password_hash = self._accounts.find_credentials(email)
        except NotFoundError:
            logger.info("Login rejected for %s: no active account", email)
            self._hasher.verify(password, self._dummy_hash())
            raise InvalidCredentialsError() from None

        if not self._hasher.verify(password, password_hash):
            logger.info("Login rejected for %s: password mismatch", email)
            raise InvalidCredentialsError()

        token = self._sessions.create(account.id)
        self._accounts.touch_last_login(account.id)
        logger.info("Account %s logged in", account.id)
        return LoginResult(token=token, account=self._accounts.find_by_id(account.id))

    def verify(self, token: str) -> Account:
        if not token:
            raise UnauthorizedError()
        try:
            account_id = self._sessions.validate(token)
        except TokenExpiredError as exc:
            raise UnauthorizedError("Session expired") from exc
        except NotFoundError as exc:
            raise UnauthorizedError("Invalid or expired token") from exc
        except InvalidTokenError as exc:
            logger.warning("Rejected token with invalid signature or payload")
            raise UnauthorizedError("Invalid or expired token") from exc

        try:
            account = self._accounts.find_by_id(account_id)
        except NotFoundError:
            logger.error("Session references missing account %s", account_id)
            raise
        if not account.is_active:
            raise UnauthorizedError("Account is deactivated")
        return account

    def _dummy_hash(self) -> str:
        # Unknown emails still pay for one bcrypt check so timing does not reveal them.
        if self._placeholder_hash is None:
            self._placeholder_hash = self._hasher.hash("placeholder-password")
        return self._placeholder_hash

    def logout(self, token: Optional[str]) -> bool:
        if not token:
            return False
        revoked = self._sessions.revoke(token)
        if revoked:
            logger.info("Session revoked")
        return revoked
