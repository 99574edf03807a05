from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from ....application.services.account_service import AccountService
from ....core.dependencies import get_account_service
from ....domain.models import Account
from ...api.dependencies import require_account
from ...api.schemas.user_schemas import UserCreateRequest, UserUpdateRequest

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("")
def list_users(
    role: Optional[str] = Query(default=None),
    actor: Account = Depends(require_account),
    service: AccountService = Depends(get_account_service),
) -> Dict[str, Any]:
    accounts = service.list_accounts(actor, role=role)
    return {"success": True, "users": [item.to_public() for item in accounts], "count": len(accounts)}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreateRequest,
    actor: Account = Depends(require_account),
    service: AccountService = Depends(get_account_service),
) -> Dict[str, Any]:
    account = service.create_account(actor, payload.model_dump())
    return {"success": True, "message": "User created successfully", "user": account.to_public()}


@router.get("/{account_id}")
def get_user(
    account_id: str,
    actor: Account = Depends(require_account),
    service: AccountService = Depends(get_account_service),
) -> Dict[str, Any]:
    return {"success": True, "user": service.get_account(actor, account_id).to_public()}


@router.put("/{account_id}")
def update_user(
    account_id: str,
    payload: UserUpdateRequest,
    actor: Account = Depends(require_account),
    service: AccountService = Depends(get_account_service),
) -> Dict[str, Any]:
    account = service.update_account(actor, account_id, payload.model_dump(exclude_none=True))
    return {"success": True, "message": "User updated successfully", "user": account.to_public()}


@router.delete("/{account_id}")
def delete_user(
    account_id: str,
    actor: Account = Depends(require_account),
    service: AccountService = Depends(get_account_service),
) -> Dict[str, Any]:
    service.deactivate_account(actor, account_id)
    return {"success": True, "message": "User deactivated successfully"}


@router.patch("/{account_id}/toggle-status")
def toggle_user_status(
    account_id: str,
    actor: Account = Depends(require_account),
    service: AccountService = Depends(get_account_service),
) -> Dict[str, Any]:
    account = service.toggle_status(actor, account_id)
    state = "activated" if account.is_active else "deactivated"
    return {"success": True, "message": f"User {state} successfully", "user": account.to_public()}
