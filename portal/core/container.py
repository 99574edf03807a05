from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Dict, Optional

from ..application.services.account_service import AccountService
from ..application.services.auth_service import AuthService
from ..infrastructure.clients.backend_client import BackendClient
from ..infrastructure.mail.contact_mailer import ContactMailer
from ..infrastructure.persistence.backends import JsonFileBackend, MemoryBackend, SQLiteDatabase
from ..infrastructure.persistence.document_store import DocumentStore
from ..infrastructure.repositories.account_repository import AccountRepository
from ..infrastructure.repositories.event_repository import EventRepository
from ..infrastructure.repositories.news_repository import NewsRepository
from ..infrastructure.repositories.session_repository import SessionRepository
from ..infrastructure.security import Clock, PasswordHasher, TokenSigner
from .config import Settings

COLLECTIONS = ("users", "sessions", "events", "news")


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    settings: Settings
    stores: Dict[str, DocumentStore]
    accounts: AccountRepository
    sessions: SessionRepository
    events: EventRepository
    news: NewsRepository
    auth_service: AuthService
    account_service: AccountService
    backend_client: BackendClient
    contact_mailer: ContactMailer
    sqlite: Optional[SQLiteDatabase] = field(default=None)

    async def close(self) -> None:
        await self.backend_client.aclose()
        if self.sqlite is not None:
            self.sqlite.close()


def build_stores(settings: Settings) -> tuple[Dict[str, DocumentStore], Optional[SQLiteDatabase]]:
    """Create one document store per collection on the configured backend."""
    if settings.storage_backend == "sqlite":
        database = SQLiteDatabase(settings.data_dir / "portal.db")
        return {name: DocumentStore(database.collection(name), name) for name in COLLECTIONS}, database
    if settings.storage_backend == "memory":
        return {name: DocumentStore(MemoryBackend(), name) for name in COLLECTIONS}, None
    return (
        {
            name: DocumentStore(JsonFileBackend(settings.data_dir / f"{name}.json"), name)
            for name in COLLECTIONS
        },
        None,
    )


def build_container(
    settings: Settings,
    clock: Optional[Clock] = None,
    backend_client: Optional[BackendClient] = None,
) -> ApplicationContainer:
    stores, sqlite = build_stores(settings)
    hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    signer = TokenSigner(settings.auth_token_secret, clock=clock)
    accounts = AccountRepository(stores["users"], hasher, clock=clock)
    sessions = SessionRepository(
        stores["sessions"],
        signer,
        ttl=timedelta(seconds=settings.session_timeout),
        clock=clock,
    )
    client = backend_client or BackendClient(
        settings.backend_base_url,
        timeout=settings.api_timeout,
        max_retries=settings.api_max_retries,
        retry_delay=settings.api_retry_delay,
        log_requests=settings.enable_api_logging or settings.debug,
    )
    return ApplicationContainer(
        settings=settings,
        stores=stores,
        accounts=accounts,
        sessions=sessions,
        events=EventRepository(stores["events"], clock=clock),
        news=NewsRepository(stores["news"], clock=clock),
        auth_service=AuthService(accounts, sessions, hasher),
        account_service=AccountService(accounts, sessions),
        backend_client=client,
        contact_mailer=ContactMailer(
            recipient=settings.contact_recipient,
            smtp_host=settings.smtp_host,
            smtp_port=settings.smtp_port,
            smtp_username=settings.smtp_username,
            smtp_password=settings.smtp_password,
            from_email=settings.smtp_from_email,
            from_name=settings.app_name,
        ),
        sqlite=sqlite,
    )
