from typing import Any, Dict

from fastapi import APIRouter, Depends

from ....core.config import Settings
from ....core.dependencies import get_settings

router = APIRouter(prefix="/api/config", tags=["Configuration"])


@router.get("")
def get_client_config(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    """Non-secret settings the admin frontend needs at boot."""
    return {
        "appName": settings.app_name,
        "appVersion": settings.app_version,
        "environment": settings.app_env,
        "apiBaseUrl": settings.backend_base_url,
        "apiTimeout": settings.api_timeout,
        "tokenStorageKey": settings.token_storage_key,
        "sessionTimeout": settings.session_timeout,
    }
