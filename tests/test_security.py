"""Tests for password hashing and token signing."""

from datetime import timedelta

import pytest
from jose import jwt

from portal.domain.errors import ConfigurationError, InvalidTokenError, TokenExpiredError, ValidationError
from portal.infrastructure.security import PasswordHasher, TokenSigner

TEST_SECRET = "test-secret-key"


class TestPasswordHasher:
    """Tests for bcrypt hashing."""

    def test_hash_is_salted_and_verifies(self, hasher):
        first = hasher.hash("secret1")
        second = hasher.hash("secret1")

        assert first != second
        assert first.startswith("$2")
        assert hasher.verify("secret1", first)
        assert hasher.verify("secret1", second)
        assert not hasher.verify("secret2", first)

    def test_malformed_hash_does_not_verify(self, hasher):
        assert hasher.verify("secret1", "not-a-bcrypt-hash") is False
        assert hasher.verify("secret1", "") is False

    def test_password_over_72_bytes_is_rejected(self, hasher):
        with pytest.raises(ValidationError):
            hasher.hash("x" * 73)
        assert hasher.verify("x" * 73, hasher.hash("x" * 72)) is False

    def test_low_cost_factor_is_refused(self):
        with pytest.raises(ConfigurationError):
            PasswordHasher(rounds=4)


class TestTokenSigner:
    """Tests for JWT issue and verification."""

    def test_round_trip_returns_account_id(self, signer):
        token = signer.issue("42", timedelta(hours=1))

        assert signer.verify(token) == "42"

    def test_tokens_are_unique(self, signer):
        assert signer.issue("42", timedelta(hours=1)) != signer.issue("42", timedelta(hours=1))

    def test_claims(self, signer):
        token = signer.issue("42", timedelta(hours=1))
        claims = jwt.get_unverified_claims(token)

        assert claims["sub"] == "42"
        assert claims["exp"] - claims["iat"] == 3600
        assert claims["jti"]

    def test_wrong_secret_is_invalid(self, signer, clock):
        other = TokenSigner("another-secret", clock=clock)
        token = other.issue("42", timedelta(hours=1))

        with pytest.raises(InvalidTokenError):
            signer.verify(token)

    def test_garbage_is_invalid(self, signer):
        with pytest.raises(InvalidTokenError):
            signer.verify("not.a.token")

    def test_expiry_follows_the_injected_clock(self, signer, clock):
        token = signer.issue("42", timedelta(hours=24))
        clock.advance(hours=25)

        with pytest.raises(TokenExpiredError):
            signer.verify(token)

    def test_expired_by_wall_clock(self, clock):
        clock.advance(hours=-2)
        past_signer = TokenSigner(TEST_SECRET, clock=clock)
        token = past_signer.issue("42", timedelta(hours=1))

        with pytest.raises(TokenExpiredError):
            TokenSigner(TEST_SECRET).verify(token)

    def test_missing_secret_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError):
            TokenSigner("")
