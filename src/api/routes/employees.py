"""Employee directory endpoint."""

import sqlite3

from fastapi import APIRouter, Depends

from api.dependencies import get_db, require_permission, verify_api_key
from api.models.responses import EmployeeResponse
from core import database
from core.rbac import VIEW_EMPLOYEES

router = APIRouter(prefix="/v1", dependencies=[Depends(verify_api_key)])


@router.get("/employees", response_model=list[EmployeeResponse])
def list_employees(
    conn: sqlite3.Connection = Depends(get_db),
    _role: str = Depends(require_permission(VIEW_EMPLOYEES)),
):
    return database.list_employees(conn)
