"""Allocation check endpoints."""

import asyncio
import sqlite3
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Request, status

from api.dependencies import get_db, require_permission, verify_api_key
from api.logging import start_request_log, write_request_log
from api.models.requests import AllocationCheckRequest
from api.models.responses import AllocationCheckResponse, AllocationEntryResponse, ErrorCodes
from core.allocations import DateWindow, RoleRef, format_warning
from core.rbac import ASSIGN_PROJECT_MEMBERS, VIEW_EMPLOYEES
from services.allocations import AllocationDataError, check_allocations, current_allocation

router = APIRouter(prefix="/v1", dependencies=[Depends(verify_api_key)])


@router.post("/employees/allocations", response_model=AllocationCheckResponse)
async def check_allocations_endpoint(
    request: Request,
    body: AllocationCheckRequest,
    conn: sqlite3.Connection = Depends(get_db),
    user_role: str = Depends(require_permission(ASSIGN_PROJECT_MEMBERS)),
):
    """
    Sum each employee's allocation across opportunities overlapping a window.

    The role being edited (currentOpportunityId + currentRoleId) is left out of
    the totals. When currentAllocation is given, a warning is computed for
    adding that allocation on top.
    """
    request_log = start_request_log(request, user_role)
    request_log.employees_checked = len(body.employee_ids)

    exclude = None
    if body.current_opportunity_id is not None and body.current_role_id is not None:
        exclude = RoleRef(body.current_opportunity_id, body.current_role_id)

    try:
        # Use thread pool for sync database reads
        entries, scanned = await asyncio.to_thread(
            check_allocations,
            conn,
            body.employee_ids,
            DateWindow(start=body.start_date, end=body.end_date),
            exclude,
        )
        request_log.opportunities_scanned = scanned

        warning = None
        if body.current_allocation is not None:
            warning = format_warning(entries, body.current_allocation)
            if warning.message:
                request_log.details.append(("allocation_warning", warning.message.strip()))

        request_log.finish(200)
        return AllocationCheckResponse(
            allocations=[AllocationEntryResponse.model_validate(e) for e in entries],
            warning=asdict(warning) if warning else None,
        )

    except AllocationDataError as e:
        request_log.finish(500)
        request_log.error_code = ErrorCodes.INTERNAL_ERROR
        request_log.error_message = str(e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Failed to check allocations",
                "code": ErrorCodes.INTERNAL_ERROR,
                "details": [],
            },
        )

    finally:
        await asyncio.to_thread(write_request_log, conn, request_log)


@router.get("/employees/{employee_id}/allocations", response_model=AllocationEntryResponse)
async def employee_allocations(
    employee_id: str,
    conn: sqlite3.Connection = Depends(get_db),
    _role: str = Depends(require_permission(VIEW_EMPLOYEES)),
):
    """An employee's commitments from today onwards."""
    try:
        entry = await asyncio.to_thread(current_allocation, conn, employee_id)
    except AllocationDataError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Failed to fetch employee allocations",
                "code": ErrorCodes.INTERNAL_ERROR,
                "details": [],
            },
        )
    return AllocationEntryResponse.model_validate(entry)
