"""Repository for issued session tokens."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional

from ..security import Clock, TokenSigner
from ...domain.errors import InvalidTokenError, NotFoundError, SessionNotFoundError, TokenExpiredError
from ...domain.models import Session
from ...utils.datetime import format_datetime, parse_datetime, utc_now
from ..persistence.document_store import DocumentStore

logger = logging.getLogger(__name__)


class SessionRepository:
    """
    Session records layered on a document store.

    A token is only honoured while its record exists and has not expired, so
    deleting the record revokes the token even though its signature still checks out.
    """

    def __init__(
        self,
        store: DocumentStore,
        signer: TokenSigner,
        ttl: timedelta = timedelta(hours=24),
        clock: Optional[Clock] = None,
    ) -> None:
        self._store = store
        self._signer = signer
        self._ttl = ttl
        self._clock = clock or utc_now

    def create(self, account_id: str) -> str:
        token = self._signer.issue(account_id, self._ttl)
        now = self._clock()
        document = {
            "accountId": str(account_id),
            "token": token,
            "expiresAt": format_datetime(now + self._ttl),
            "createdAt": format_datetime(now),
        }
        self._store.create(document)
        return token

    def get(self, token: str) -> Session:
        try:
            document = self._store.find_one(lambda doc: doc.get("token") == token)
        except NotFoundError as exc:
            raise SessionNotFoundError() from exc
        return Session.from_document(document)

    def validate(self, token: str) -> str:
        account_id = self._signer.verify(token)
        session = self.get(token)
        if session.account_id != account_id:
            logger.warning("Session %s does not belong to token subject %s", session.id, account_id)
            raise InvalidTokenError()
        if session.is_expired(self._clock()):
            raise TokenExpiredError()
        return account_id

    def revoke(self, token: str) -> bool:
        if not token:
            return False
        return self._store.delete_where(lambda doc: doc.get("token") == token) > 0

    def revoke_all_for_account(self, account_id: str) -> int:
        removed = self._store.delete_where(lambda doc: doc.get("accountId") == account_id)
        if removed:
            logger.info("Revoked %s session(s) of account %s", removed, account_id)
        return removed

    def prune_expired(self) -> int:
        now = self._clock()
        removed = self._store.delete_where(lambda doc: parse_datetime(doc["expiresAt"]) <= now)
        if removed:
            logger.info("Pruned %s expired session(s)", removed)
        return removed
