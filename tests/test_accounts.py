"""Tests for the account repository and account management rules."""

import json

import pytest

from portal.domain.errors import ConflictError, ForbiddenError, NotFoundError, SessionNotFoundError, ValidationError


def _create(accounts, email="a@x.com", roles=("super_admin",), **extra):
    data = {"email": email, "name": email.split("@")[0], "password": "secret1", "roles": list(roles)}
    data.update(extra)
    return accounts.create(data)


class TestAccountRepository:
    """Tests for account persistence."""

    def test_email_uniqueness_is_case_insensitive(self, accounts):
        _create(accounts, "a@x.com")

        with pytest.raises(ConflictError):
            _create(accounts, "A@X.com")

    def test_round_trip(self, accounts):
        created = _create(accounts, "a@x.com", roles=["events_manager", "news"])

        found = accounts.find_by_id(created.id)
        assert found == created
        assert found.roles == ["events_manager", "news_manager"]
        assert found.primary_role == "events_manager"
        assert set(found.permissions) == {"events", "news"}

    def test_password_never_leaves_the_repository(self, accounts, tmp_path):
        created = _create(accounts, "a@x.com")

        assert "password" not in created.to_public()
        assert not hasattr(created, "password")
        stored = json.loads((tmp_path / "users.json").read_text(encoding="utf-8"))
        assert stored[0]["password"] != "secret1"
        assert stored[0]["password"].startswith("$2")

    def test_update_to_taken_email_leaves_record_unchanged(self, accounts):
        _create(accounts, "taken@x.com")
        other = _create(accounts, "other@x.com")

        with pytest.raises(ConflictError):
            accounts.update(other.id, {"email": "taken@x.com"})
        assert accounts.find_by_id(other.id).email == "other@x.com"

    def test_update_keeping_own_email_is_allowed(self, accounts):
        created = _create(accounts, "a@x.com")

        updated = accounts.update(created.id, {"email": "A@x.com", "name": "Renamed"})

        assert updated.name == "Renamed"
        assert updated.updated_at >= updated.created_at

    def test_deactivation_is_soft_and_frees_the_email(self, accounts):
        created = _create(accounts, "a@x.com")

        accounts.deactivate(created.id)

        assert accounts.find_by_id(created.id).is_active is False
        with pytest.raises(NotFoundError):
            accounts.find_by_email("a@x.com")
        assert accounts.list_all() == []
        assert len(accounts.list_all(include_inactive=True)) == 1
        replacement = _create(accounts, "a@x.com")
        assert replacement.id != created.id

    def test_reactivation_conflicts_with_new_owner(self, accounts):
        created = _create(accounts, "a@x.com")
        accounts.deactivate(created.id)
        _create(accounts, "a@x.com")

        with pytest.raises(ConflictError):
            accounts.update(created.id, {"is_active": True})

    def test_invalid_input(self, accounts):
        with pytest.raises(ValidationError):
            _create(accounts, "not-an-email")
        with pytest.raises(ValidationError):
            accounts.create({"email": "a@x.com", "name": "A", "roles": ["super_admin"]})
        with pytest.raises(ValidationError):
            _create(accounts, "b@x.com", roles=["janitor"])
        created = _create(accounts, "c@x.com")
        with pytest.raises(ValidationError):
            accounts.update(created.id, {"password_hash": "x"})

    def test_list_by_role(self, accounts):
        _create(accounts, "a@x.com", roles=["super_admin"])
        _create(accounts, "b@x.com", roles=["events_manager"])

        assert [account.email for account in accounts.list_by_role("events")] == ["b@x.com"]

    def test_touch_last_login(self, accounts, clock):
        created = _create(accounts, "a@x.com")
        clock.advance(minutes=5)

        accounts.touch_last_login(created.id)

        found = accounts.find_by_id(created.id)
        assert found.last_login == clock()
        assert found.updated_at == clock()


class TestAccountService:
    """Tests for who may manage which accounts."""

    def test_manager_creates_accounts_with_creator(self, accounts, account_service):
        admin = _create(accounts, "admin@x.com")

        created = account_service.create_account(
            admin, {"email": "new@x.com", "name": "New", "password": "secret1", "roles": ["news_manager"]}
        )

        assert created.created_by == admin.id

    def test_only_super_admin_grants_super_admin(self, accounts, account_service):
        manager = _create(accounts, "manager@x.com", roles=["user_manager"])

        with pytest.raises(ForbiddenError):
            account_service.create_account(
                manager, {"email": "new@x.com", "name": "New", "password": "secret1", "roles": ["super_admin"]}
            )

    def test_non_manager_edits_only_own_profile(self, accounts, account_service):
        editor = _create(accounts, "editor@x.com", roles=["news_manager"])
        other = _create(accounts, "other@x.com", roles=["news_manager"])

        assert account_service.update_account(editor, editor.id, {"name": "Me"}).name == "Me"
        with pytest.raises(ForbiddenError):
            account_service.update_account(editor, other.id, {"name": "You"})
        with pytest.raises(ForbiddenError):
            account_service.update_account(editor, editor.id, {"roles": ["super_admin"]})
        with pytest.raises(ForbiddenError):
            account_service.list_accounts(editor)
        assert account_service.get_account(editor, editor.id).id == editor.id

    def test_cannot_deactivate_self(self, accounts, account_service):
        admin = _create(accounts, "admin@x.com")

        with pytest.raises(ForbiddenError):
            account_service.deactivate_account(admin, admin.id)

    def test_deactivation_revokes_sessions(self, accounts, sessions, account_service):
        admin = _create(accounts, "admin@x.com")
        target = _create(accounts, "target@x.com", roles=["events_manager"])
        token = sessions.create(target.id)

        account_service.deactivate_account(admin, target.id)

        with pytest.raises(SessionNotFoundError):
            sessions.validate(token)

    def test_toggle_status(self, accounts, account_service):
        admin = _create(accounts, "admin@x.com")
        target = _create(accounts, "target@x.com", roles=["events_manager"])

        assert account_service.toggle_status(admin, target.id).is_active is False
        assert account_service.toggle_status(admin, target.id).is_active is True
