from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings
from .container import ApplicationContainer, build_container
from .logging import configure_logging
from ..domain.errors import ConfigurationError
from ..infrastructure.clients.backend_client import BackendClient
from ..infrastructure.security import Clock
from ..presentation.api.errors import register_exception_handlers
from ..presentation.api.routers import auth as auth_router
from ..presentation.api.routers import backend as backend_router
from ..presentation.api.routers import config as config_router
from ..presentation.api.routers import contact as contact_router
from ..presentation.api.routers import events as events_router
from ..presentation.api.routers import news as news_router
from ..presentation.api.routers import users as users_router

logger = logging.getLogger(__name__)


def create_application(
    settings: Optional[Settings] = None,
    clock: Optional[Clock] = None,
    backend_client: Optional[BackendClient] = None,
) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=_create_lifespan(settings, clock, backend_client),
    )

    # Cookies only travel with credentialed requests, which rule out a wildcard origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials="*" not in settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(auth_router.router)
    app.include_router(users_router.router)
    app.include_router(events_router.router)
    app.include_router(news_router.router)
    app.include_router(backend_router.router)
    app.include_router(contact_router.router)
    app.include_router(config_router.router)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        container: ApplicationContainer = app.state.container  # type: ignore[attr-defined]
        return {
            "ok": True,
            "storage": container.settings.storage_backend,
            "backend": await container.backend_client.check_health(),
        }

    return app


def _create_lifespan(
    settings: Settings,
    clock: Optional[Clock],
    backend_client: Optional[BackendClient],
):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.log_level)

        errors, warnings = settings.validate()
        for warning in warnings:
            logger.warning("Configuration warning: %s", warning)
        if errors:
            raise ConfigurationError("; ".join(errors))

        container = build_container(settings, clock=clock, backend_client=backend_client)
        container.auth_service.ensure_default_admin(
            settings.admin_default_email,
            settings.admin_default_password,
            settings.admin_default_name,
        )
        app.state.container = container  # type: ignore[attr-defined]
        for name, store in container.stores.items():
            logger.debug("Collection %s stored at %s", name, store.describe())
        logger.info(
            "%s %s started (env=%s, storage=%s)",
            settings.app_name,
            settings.app_version,
            settings.app_env,
            settings.storage_backend,
        )

        try:
            yield
        finally:
            await container.close()

    return lifespan
