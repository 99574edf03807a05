from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import httpx

from ...domain.errors import BackendNetworkError, BackendTimeoutError

logger = logging.getLogger(__name__)

_IDEMPOTENT_METHODS = {"GET", "HEAD", "OPTIONS"}


def unwrap(body: Any, *keys: str) -> List[Dict[str, Any]]:
    """Pull a list out of a backend envelope that may use any of ``keys``."""
    if isinstance(body, list):
        return body
    if not isinstance(body, Mapping):
        return []
    for key in keys:
        value = body.get(key)
        if isinstance(value, list):
            return value
        if isinstance(value, Mapping):
            nested = unwrap(value, *keys)
            if nested:
                return nested
    return []


class BackendClient:
    """
    Client for the external content backend.

    Every request is bounded by ``timeout``. Idempotent requests are retried
    with exponential backoff; writes are sent exactly once.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        max_retries: int = 3,
        retry_delay: float = 0.5,
        log_requests: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._max_retries = max(1, max_retries)
        self._retry_delay = retry_delay
        self._log_requests = log_requests
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    async def request(
        self,
        method: str,
        path: str,
        token: Optional[str] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        method = method.upper()
        attempts = self._max_retries if method in _IDEMPOTENT_METHODS else 1
        delay = self._retry_delay
        for attempt in range(1, attempts + 1):
            try:
                response = await self._send(method, path, token, **kwargs)
            except (BackendNetworkError, BackendTimeoutError) as exc:
                if attempt == attempts:
                    logger.error("Backend %s %s failed after %s attempt(s): %s", method, path, attempt, exc)
                    raise
                logger.warning(
                    "Backend %s %s failed (attempt %s/%s), retrying in %.1fs",
                    method,
                    path,
                    attempt,
                    attempts,
                    delay,
                )
            else:
                if response.status_code < 500 or attempt == attempts:
                    return response
                logger.warning(
                    "Backend %s %s answered %s (attempt %s/%s), retrying in %.1fs",
                    method,
                    path,
                    response.status_code,
                    attempt,
                    attempts,
                    delay,
                )
            await asyncio.sleep(delay)
            delay *= 2
        raise BackendNetworkError()  # pragma: no cover - loop always returns or raises

    async def forward(
        self,
        method: str,
        path: str,
        token: Optional[str] = None,
        **kwargs: Any,
    ) -> Tuple[int, Any]:
        response = await self.request(method, path, token, **kwargs)
        return response.status_code, self._decode(response)

    async def check_health(self, timeout: float = 5.0) -> bool:
        try:
            response = await self._send("GET", "/api/health", None, timeout=timeout)
        except (BackendNetworkError, BackendTimeoutError):
            return False
        return response.is_success

    # ------------------------------------------------------------------
    async def _send(
        self,
        method: str,
        path: str,
        token: Optional[str],
        headers: Optional[Dict[str, str]] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        merged = dict(headers or {})
        if token:
            merged["Authorization"] = f"Bearer {token}"
        if self._log_requests:
            logger.info("Backend request %s %s", method, path)
        try:
            response = await self._client.request(method, path, headers=merged, **kwargs)
        except httpx.TimeoutException as exc:
            raise BackendTimeoutError() from exc
        except httpx.TransportError as exc:
            raise BackendNetworkError() from exc
        if self._log_requests:
            logger.info("Backend response %s %s -> %s", method, path, response.status_code)
        return response

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return {
                "success": response.is_success,
                "error": None if response.is_success else response.text[:200] or response.reason_phrase,
            }


def normalize_backend_user(user: Mapping[str, Any]) -> Dict[str, Any]:
    """Give a backend user the same keys whichever naming the backend used."""
    roles: Iterable[Any] = user.get("roles") or ([user["role"]] if user.get("role") else [])
    role_names = [role.get("name") if isinstance(role, Mapping) else role for role in roles]
    return {
        "id": str(user.get("id", "")),
        "email": user.get("email"),
        "name": user.get("name"),
        "roles": [name for name in role_names if name],
        "isActive": bool(user.get("is_active", user.get("isActive", True))),
        "lastLogin": user.get("last_login") or user.get("lastLogin"),
        "createdAt": user.get("created_at") or user.get("createdAt"),
        "updatedAt": user.get("updated_at") or user.get("updatedAt"),
    }
