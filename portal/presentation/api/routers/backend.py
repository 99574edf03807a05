"""Authenticated pass-through to the external content backend."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ....core.dependencies import get_backend_client
from ....domain.errors import ValidationError
from ....infrastructure.clients.backend_client import BackendClient, normalize_backend_user, unwrap
from ...api.dependencies import get_bearer_token

router = APIRouter(prefix="/api/backend", tags=["Backend Proxy"])


async def _json_body(request: Request) -> Any:
    raw = await request.body()
    if not raw:
        return None
    try:
        return await request.json()
    except ValueError as exc:
        raise ValidationError("Invalid JSON body") from exc


async def _relay(client: BackendClient, method: str, path: str, token: str, **kwargs: Any) -> JSONResponse:
    status_code, body = await client.forward(method, path, token, **kwargs)
    return JSONResponse(status_code=status_code, content=body)


@router.get("/news")
async def list_backend_news(
    request: Request,
    token: str = Depends(get_bearer_token),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    return await _relay(client, "GET", "/api/news", token, params=dict(request.query_params))


@router.post("/news")
async def create_backend_news(
    request: Request,
    token: str = Depends(get_bearer_token),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    return await _relay(client, "POST", "/api/news", token, json=await _json_body(request))


@router.get("/news/{news_id}")
async def get_backend_news(
    news_id: str,
    token: str = Depends(get_bearer_token),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    return await _relay(client, "GET", f"/api/news/{news_id}", token)


@router.put("/news/{news_id}")
async def update_backend_news(
    news_id: str,
    request: Request,
    token: str = Depends(get_bearer_token),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    return await _relay(client, "PUT", f"/api/news/{news_id}", token, json=await _json_body(request))


@router.delete("/news/{news_id}")
async def delete_backend_news(
    news_id: str,
    token: str = Depends(get_bearer_token),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    return await _relay(client, "DELETE", f"/api/news/{news_id}", token)


@router.patch("/news/{news_id}/reactivate")
async def reactivate_backend_news(
    news_id: str,
    token: str = Depends(get_bearer_token),
    client: BackendClient = Depends(get_backend_client),
) -> JSONResponse:
    return await _relay(client, "PATCH", f"/api/news/{news_id}/reactivate", token)


@router.get("/users")
async def list_backend_users(
    token: str = Depends(get_bearer_token),
    client: BackendClient = Depends(get_backend_client),
):
    status_code, body = await client.forward("GET", "/api/users", token)
    if status_code >= 400:
        return JSONResponse(status_code=status_code, content=body)
    users = [normalize_backend_user(user) for user in unwrap(body, "data", "users", "items")]
    payload: Dict[str, Any] = {"success": True, "users": users, "count": len(users)}
    return JSONResponse(payload)
