"""FastAPI dependencies for authentication, permissions and shared resources."""

import secrets
import sqlite3
from collections.abc import Iterator

from fastapi import Depends, Header, HTTPException, status

from api.models.responses import ErrorCodes
from core import config
from core.database import get_connection
from core.rbac import has_permission


async def verify_api_key(x_api_key: str = Header(..., alias="X-API-Key")) -> str:
    """
    Verify API key from X-API-Key header.

    Raises:
        HTTPException: 401 if key is missing or invalid
    """
    if not config.STAFFING_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "API key not configured on server",
                "code": ErrorCodes.INTERNAL_ERROR,
                "details": [],
            },
        )

    # Use constant-time comparison to prevent timing attacks
    if not secrets.compare_digest(x_api_key, config.STAFFING_API_KEY):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "Invalid or missing API key",
                "code": ErrorCodes.UNAUTHORIZED,
                "details": [],
            },
        )

    return x_api_key


def get_db() -> Iterator[sqlite3.Connection]:
    """Yield a database connection for the duration of a request."""
    conn = get_connection(config.DB_PATH)
    try:
        yield conn
    finally:
        conn.close()


async def get_user_role(
    x_user_role: str | None = Header(default=None, alias="X-User-Role"),
) -> str | None:
    """Caller's role, as forwarded by the identity provider."""
    return x_user_role.strip().lower() if x_user_role else None


def require_permission(permission: str):
    """
    Build a dependency that rejects callers whose role lacks a permission.

    Raises:
        HTTPException: 403 if the role is missing or not granted the permission
    """

    async def checker(user_role: str | None = Depends(get_user_role)) -> str:
        if not has_permission(user_role, permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "error": "Insufficient permissions",
                    "code": ErrorCodes.FORBIDDEN,
                    "details": [f"Requires permission: {permission}"],
                },
            )
        return user_role

    return checker
