from fastapi import Depends, Request

from .container import ApplicationContainer


def get_container(request: Request) -> ApplicationContainer:
    container = getattr(request.app.state, "container", None)
    if not container:
        raise RuntimeError("Application container not initialised.")
    return container


def get_settings(container: ApplicationContainer = Depends(get_container)):
    return container.settings


def get_auth_service(container: ApplicationContainer = Depends(get_container)):
    return container.auth_service


def get_account_service(container: ApplicationContainer = Depends(get_container)):
    return container.account_service


def get_event_repository(container: ApplicationContainer = Depends(get_container)):
    return container.events


def get_news_repository(container: ApplicationContainer = Depends(get_container)):
    return container.news


def get_backend_client(container: ApplicationContainer = Depends(get_container)):
    return container.backend_client


def get_contact_mailer(container: ApplicationContainer = Depends(get_container)):
    return container.contact_mailer
