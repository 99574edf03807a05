from typing import Any, Dict, Optional

from email_validator import EmailNotValidError, validate_email
from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from ....application.services.auth_service import AuthService
from ....core.config import Settings
from ....core.dependencies import get_auth_service, get_settings
from ....domain.errors import NotFoundError, UnauthorizedError, ValidationError
from ....domain.models import Account
from ...api.dependencies import (
    clear_auth_cookie,
    get_request_token,
    require_account,
    set_auth_cookie,
)
from ...api.errors import error_response
from ...api.schemas.auth import LoginRequest

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/login")
def login(
    payload: LoginRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    email = (payload.email or "").strip()
    if not email or not payload.password:
        raise ValidationError("Email and password are required")
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValidationError("Invalid email format") from exc

    result = auth_service.login(email, payload.password)
    set_auth_cookie(response, result.token, settings)
    return {"success": True, "message": "Login successful", "admin": result.account.to_public()}


@router.options("/login")
def login_options() -> Dict[str, Any]:
    return {}


@router.post("/logout")
def logout(
    response: Response,
    token: Optional[str] = Depends(get_request_token),
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    auth_service.logout(token)
    clear_auth_cookie(response, settings)
    return {"success": True, "message": "Logout successful"}


@router.options("/logout")
def logout_options() -> Dict[str, Any]:
    return {}


@router.get("/verify")
def verify(
    token: Optional[str] = Depends(get_request_token),
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    try:
        if not token:
            raise UnauthorizedError("No authentication token")
        account = auth_service.verify(token)
    except (UnauthorizedError, NotFoundError) as exc:
        failure = error_response(401, exc.message if isinstance(exc, UnauthorizedError) else "Invalid or expired token")
        clear_auth_cookie(failure, settings)
        return failure
    return JSONResponse({"success": True, "admin": account.to_public()})


@router.get("/profile")
def profile(account: Account = Depends(require_account)) -> Dict[str, Any]:
    return {"success": True, "admin": account.to_public(), "permissions": list(account.permissions)}
