"""Role permission lookup endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_user_role, verify_api_key
from api.models.responses import ErrorCodes, RolePermissionsResponse
from core.rbac import (
    ROLE_DISPLAY_INFO,
    USER_ROLES,
    filter_navigation,
    get_role_permissions,
)

router = APIRouter(prefix="/v1", dependencies=[Depends(verify_api_key)])


def _describe_role(role: str) -> RolePermissionsResponse:
    info = ROLE_DISPLAY_INFO[role]
    return RolePermissionsResponse(
        role=role,
        name=info["name"],
        description=info["description"],
        permissions=get_role_permissions(role),
        navigation=filter_navigation(role),
    )


@router.get("/permissions", response_model=list[RolePermissionsResponse])
async def list_role_permissions():
    """The full role-to-permission table."""
    return [_describe_role(role) for role in USER_ROLES]


@router.get("/permissions/me", response_model=RolePermissionsResponse)
async def my_permissions(user_role: str | None = Depends(get_user_role)):
    """Permissions and navigation for the caller's X-User-Role."""
    return await role_permissions(user_role or "")


@router.get("/permissions/{role}", response_model=RolePermissionsResponse)
async def role_permissions(role: str):
    if role not in ROLE_DISPLAY_INFO:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": f"Unknown role '{role}'",
                "code": ErrorCodes.NOT_FOUND,
                "details": [f"Expected one of: {', '.join(USER_ROLES)}"],
            },
        )
    return _describe_role(role)
