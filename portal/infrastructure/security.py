from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta
from typing import Callable, Optional

import bcrypt
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError

from ..domain.errors import ConfigurationError, InvalidTokenError, TokenExpiredError, ValidationError
from ..utils.datetime import utc_now

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

MIN_BCRYPT_ROUNDS = 10
_BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    """Salted bcrypt hashing of account passwords."""

    def __init__(self, rounds: int = 12) -> None:
        if rounds < MIN_BCRYPT_ROUNDS:
            raise ConfigurationError(f"BCRYPT_ROUNDS must be at least {MIN_BCRYPT_ROUNDS}.")
        self._rounds = rounds

    def hash(self, password: str) -> str:
        encoded = self._encode(password)
        return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self._rounds)).decode("utf-8")

    def verify(self, password: str, password_hash: Optional[str]) -> bool:
        encoded = password.encode("utf-8")
        if not password_hash or len(encoded) > _BCRYPT_MAX_BYTES:
            return False
        try:
            return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash is not a valid bcrypt hash")
            return False

    @staticmethod
    def _encode(password: str) -> bytes:
        encoded = password.encode("utf-8")
        if len(encoded) > _BCRYPT_MAX_BYTES:
            raise ValidationError("Password must be at most 72 bytes long.")
        return encoded


class TokenSigner:
    """Signs and verifies the JWTs handed out as session tokens."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        clock: Optional[Clock] = None,
    ) -> None:
        if not secret_key:
            raise ConfigurationError("AUTH_TOKEN_SECRET is not configured.")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._clock = clock or utc_now

    def issue(self, account_id: str, ttl: timedelta) -> str:
        now = self._clock()
        payload = {
            "sub": str(account_id),
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> str:
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except JWTError as exc:
            raise InvalidTokenError() from exc
        account_id = payload.get("sub")
        expires = payload.get("exp")
        if not account_id or not isinstance(expires, (int, float)):
            raise InvalidTokenError()
        if expires <= self._clock().timestamp():
            raise TokenExpiredError()
        return str(account_id)
