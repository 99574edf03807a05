from typing import Callable, Optional

from fastapi import Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...application.services.auth_service import AuthService
from ...core.config import Settings
from ...core.dependencies import get_auth_service, get_settings
from ...domain.errors import ForbiddenError, NotFoundError, UnauthorizedError
from ...domain.models import Account, Permission

_bearer_scheme = HTTPBearer(auto_error=False)


def get_request_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> Optional[str]:
    if credentials is not None and credentials.scheme.lower() == "bearer":
        return credentials.credentials
    return request.cookies.get(settings.auth_cookie_name)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
) -> str:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthorizedError("Authentication required - no bearer token")
    return credentials.credentials


def require_account(
    token: Optional[str] = Depends(get_request_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> Account:
    if not token:
        raise UnauthorizedError()
    try:
        return auth_service.verify(token)
    except NotFoundError as exc:
        raise UnauthorizedError("Invalid or expired token") from exc


def optional_account(
    token: Optional[str] = Depends(get_request_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> Optional[Account]:
    if not token:
        return None
    try:
        return auth_service.verify(token)
    except (UnauthorizedError, NotFoundError):
        return None


def require_permission(permission: Permission) -> Callable[..., Account]:
    def dependency(account: Account = Depends(require_account)) -> Account:
        if not account.has_permission(permission):
            raise ForbiddenError(f"Insufficient permissions. Required: {permission.value}")
        return account

    return dependency


def set_auth_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        settings.auth_cookie_name,
        token,
        max_age=settings.session_timeout,
        path="/",
        secure=settings.is_production,
        httponly=True,
        samesite="strict",
    )


def clear_auth_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        settings.auth_cookie_name,
        path="/",
        secure=settings.is_production,
        httponly=True,
        samesite="strict",
    )
