"""Shared fixtures: isolated stores, a settable clock and a wired application."""

from datetime import timedelta
from typing import Any, Callable, Dict, List, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

from portal.application.services.account_service import AccountService
from portal.application.services.auth_service import AuthService
from portal.core.app_factory import create_application
from portal.core.config import Settings
from portal.infrastructure.clients.backend_client import BackendClient
from portal.infrastructure.persistence.backends import JsonFileBackend
from portal.infrastructure.persistence.document_store import DocumentStore
from portal.infrastructure.repositories.account_repository import AccountRepository
from portal.infrastructure.repositories.event_repository import EventRepository
from portal.infrastructure.repositories.news_repository import NewsRepository
from portal.infrastructure.repositories.session_repository import SessionRepository
from portal.infrastructure.security import PasswordHasher, TokenSigner
from portal.utils.datetime import utc_now

TEST_SECRET = "test-secret-key"
ADMIN_EMAIL = "admin@portal.io"
ADMIN_PASSWORD = "Admin123!"


class FakeClock:
    """Callable clock that only moves when a test advances it."""

    def __init__(self) -> None:
        # Starts at the real time so the JWT library's own exp check agrees.
        self.now = utc_now()

    def __call__(self):
        return self.now

    def advance(self, **kwargs: Any) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_store(tmp_path) -> Callable[[str], DocumentStore]:
    def factory(name: str) -> DocumentStore:
        return DocumentStore(JsonFileBackend(tmp_path / f"{name}.json"), name)

    return factory


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=10)


@pytest.fixture
def signer(clock) -> TokenSigner:
    return TokenSigner(TEST_SECRET, clock=clock)


@pytest.fixture
def accounts(make_store, hasher, clock) -> AccountRepository:
    return AccountRepository(make_store("users"), hasher, clock=clock)


@pytest.fixture
def sessions(make_store, signer, clock) -> SessionRepository:
    return SessionRepository(make_store("sessions"), signer, ttl=timedelta(hours=24), clock=clock)


@pytest.fixture
def auth_service(accounts, sessions, hasher) -> AuthService:
    return AuthService(accounts, sessions, hasher)


@pytest.fixture
def account_service(accounts, sessions) -> AccountService:
    return AccountService(accounts, sessions)


@pytest.fixture
def events(make_store, clock) -> EventRepository:
    return EventRepository(make_store("events"), clock=clock)


@pytest.fixture
def news(make_store, clock) -> NewsRepository:
    return NewsRepository(make_store("news"), clock=clock)


class BackendStub:
    """Programmable handler for ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.routes: Dict[Tuple[str, str], httpx.Response] = {}
        self.error: Exception = None  # type: ignore[assignment]

    def respond(self, method: str, path: str, status_code: int = 200, json: Any = None) -> None:
        self.routes[(method, path)] = httpx.Response(status_code, json=json)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        response = self.routes.get((request.method, request.url.path))
        if response is None:
            return httpx.Response(404, json={"success": False, "error": "Not found"})
        return response


@pytest.fixture
def backend_stub() -> BackendStub:
    return BackendStub()


@pytest.fixture
def app_env(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("APP_ENV", "development")
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("BACKEND_BASE_URL", "http://backend.test")
    monkeypatch.setenv("AUTH_TOKEN_SECRET", TEST_SECRET)
    monkeypatch.setenv("STORAGE_BACKEND", "json")
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("BCRYPT_ROUNDS", "10")
    monkeypatch.setenv("ADMIN_EMAIL", ADMIN_EMAIL)
    monkeypatch.setenv("ADMIN_PASSWORD", ADMIN_PASSWORD)
    monkeypatch.setenv("SMTP_HOST", "")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://localhost:3000")


@pytest.fixture
def client(app_env, clock, backend_stub):
    backend = BackendClient(
        "http://backend.test",
        max_retries=2,
        retry_delay=0,
        transport=httpx.MockTransport(backend_stub),
    )
    app = create_application(Settings(), clock=clock, backend_client=backend)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_client(client):
    response = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client
