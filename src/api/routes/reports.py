"""Allocation report download endpoint."""

import asyncio
import sqlite3
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import Response

from api.dependencies import get_db, require_permission, verify_api_key
from api.logging import start_request_log, write_request_log
from api.models.responses import ErrorCodes
from core.allocations import DateWindow
from core.rbac import VIEW_ANALYTICS
from services.allocations import AllocationDataError, team_allocations
from services.reports import generate_report_to_bytes

router = APIRouter(prefix="/v1", dependencies=[Depends(verify_api_key)])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _build_in_thread(conn: sqlite3.Connection, window: DateWindow) -> tuple[bytes, str, int]:
    """
    Load allocations and render the workbook (runs in thread pool).

    Returns:
        Tuple of (excel_bytes, filename, employee_count)
    """
    entries = team_allocations(conn, window)
    excel_bytes, filename = generate_report_to_bytes(entries, window)
    return excel_bytes, filename, len(entries)


@router.get("/reports/allocations")
async def allocation_report(
    request: Request,
    start_date: Annotated[date, Query(alias="startDate", description="Window start (YYYY-MM-DD)")],
    end_date: Annotated[date | None, Query(alias="endDate", description="Window end (YYYY-MM-DD)")] = None,
    conn: sqlite3.Connection = Depends(get_db),
    user_role: str = Depends(require_permission(VIEW_ANALYTICS)),
):
    """Excel workbook of every employee's allocation over the window."""
    request_log = start_request_log(request, user_role)

    try:
        if end_date is not None and end_date < start_date:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={
                    "error": "Invalid report window",
                    "code": ErrorCodes.VALIDATION_ERROR,
                    "details": ["endDate must not be before startDate"],
                },
            )

        window = DateWindow(start=start_date, end=end_date)
        excel_bytes, filename, employee_count = await asyncio.to_thread(_build_in_thread, conn, window)

        request_log.employees_checked = employee_count
        request_log.finish(200)
        return Response(
            content=excel_bytes,
            media_type=XLSX_MEDIA_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    except HTTPException as e:
        request_log.record_http_error(e)
        raise

    except AllocationDataError as e:
        request_log.finish(500)
        request_log.error_code = ErrorCodes.INTERNAL_ERROR
        request_log.error_message = str(e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Failed to build allocation report",
                "code": ErrorCodes.INTERNAL_ERROR,
                "details": [],
            },
        )

    finally:
        await asyncio.to_thread(write_request_log, conn, request_log)
