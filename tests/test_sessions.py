"""Tests for the session repository."""

import pytest

from portal.domain.errors import InvalidTokenError, SessionNotFoundError, TokenExpiredError
from portal.utils.datetime import format_datetime


class TestSessionRepository:
    """Tests for session lifecycle."""

    def test_validate_returns_account_id(self, sessions):
        token = sessions.create("7")

        assert sessions.validate(token) == "7"

    def test_expired_after_ttl(self, sessions, clock):
        token = sessions.create("7")
        clock.advance(hours=25)

        with pytest.raises(TokenExpiredError):
            sessions.validate(token)

    def test_store_expiry_beats_valid_signature(self, sessions, make_store, clock):
        token = sessions.create("7")
        store = make_store("sessions")
        record = store.find_one(lambda doc: doc["token"] == token)
        store.update(record["id"], {"expiresAt": format_datetime(clock())})

        with pytest.raises(TokenExpiredError):
            sessions.validate(token)

    def test_revoked_token_never_validates_again(self, sessions):
        token = sessions.create("7")

        assert sessions.revoke(token) is True
        with pytest.raises(SessionNotFoundError):
            sessions.validate(token)
        with pytest.raises(SessionNotFoundError):
            sessions.validate(token)

    def test_revoke_is_idempotent(self, sessions):
        token = sessions.create("7")

        assert sessions.revoke(token) is True
        assert sessions.revoke(token) is False
        assert sessions.revoke("garbage") is False
        assert sessions.revoke("") is False

    def test_forged_token_is_invalid(self, sessions):
        with pytest.raises(InvalidTokenError):
            sessions.validate("garbage")

    def test_revoke_all_for_account(self, sessions):
        first = sessions.create("7")
        second = sessions.create("7")
        other = sessions.create("8")

        assert sessions.revoke_all_for_account("7") == 2
        with pytest.raises(SessionNotFoundError):
            sessions.validate(first)
        with pytest.raises(SessionNotFoundError):
            sessions.validate(second)
        assert sessions.validate(other) == "8"

    def test_prune_expired_only_removes_expired(self, sessions, clock):
        old = sessions.create("7")
        clock.advance(hours=12)
        fresh = sessions.create("8")
        clock.advance(hours=12)

        assert sessions.prune_expired() == 1
        assert sessions.prune_expired() == 0
        with pytest.raises(SessionNotFoundError):
            sessions.get(old)
        assert sessions.validate(fresh) == "8"
