"""Tests for login, verification and logout."""

import pytest

from portal.domain.errors import InvalidCredentialsError, UnauthorizedError


@pytest.fixture
def admin(accounts):
    return accounts.create({"email": "a@x.com", "name": "A", "password": "secret1", "roles": ["super_admin"]})


class TestLogin:
    """Tests for credential checks."""

    def test_successful_login(self, auth_service, admin):
        result = auth_service.login("a@x.com", "secret1")

        assert result.account.id == admin.id
        assert result.account.last_login is not None
        assert auth_service.verify(result.token).id == admin.id

    def test_email_lookup_ignores_case(self, auth_service, admin):
        assert auth_service.login("A@X.COM", "secret1").account.id == admin.id

    def test_wrong_password_and_unknown_email_look_the_same(self, auth_service, admin):
        with pytest.raises(InvalidCredentialsError) as wrong_password:
            auth_service.login("a@x.com", "wrong")
        with pytest.raises(InvalidCredentialsError) as unknown_email:
            auth_service.login("nobody@x.com", "whatever")

        assert wrong_password.value.message == unknown_email.value.message == "Invalid email or password"

    def test_inactive_account_cannot_login(self, auth_service, accounts, admin):
        accounts.deactivate(admin.id)

        with pytest.raises(InvalidCredentialsError):
            auth_service.login("a@x.com", "secret1")

    def test_login_prunes_expired_sessions(self, auth_service, sessions, admin, clock, make_store):
        auth_service.login("a@x.com", "secret1")
        clock.advance(hours=25)

        auth_service.login("a@x.com", "secret1")

        assert make_store("sessions").count() == 1


class TestVerifyAndLogout:
    """Tests for token verification."""

    def test_expired_session_is_unauthorized(self, auth_service, admin, clock):
        token = auth_service.login("a@x.com", "secret1").token
        clock.advance(hours=25)

        with pytest.raises(UnauthorizedError):
            auth_service.verify(token)

    def test_deactivated_account_is_unauthorized(self, auth_service, accounts, admin):
        token = auth_service.login("a@x.com", "secret1").token
        accounts.deactivate(admin.id)

        with pytest.raises(UnauthorizedError):
            auth_service.verify(token)

    def test_logout_is_idempotent(self, auth_service, admin):
        token = auth_service.login("a@x.com", "secret1").token

        assert auth_service.logout(token) is True
        assert auth_service.logout(token) is False
        assert auth_service.logout(None) is False
        with pytest.raises(UnauthorizedError):
            auth_service.verify(token)

    def test_garbage_token_is_unauthorized(self, auth_service):
        with pytest.raises(UnauthorizedError):
            auth_service.verify("garbage")

    def test_ensure_default_admin_only_once(self, auth_service, accounts):
        first = auth_service.ensure_default_admin("root@x.com", "secret1")
        second = auth_service.ensure_default_admin("root@x.com", "secret1")

        assert first.id == second.id
        assert first.roles == ["super_admin"]
        assert auth_service.ensure_default_admin(None, None) is None
        assert len(accounts.list_all()) == 1
