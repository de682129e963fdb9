"""Opportunity and role endpoints."""

import sqlite3

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_db, require_permission, verify_api_key
from api.models.requests import (
    ActivateRequest,
    MoveRequest,
    OpportunityCreate,
    OpportunityUpdate,
    RoleCreate,
    RoleStatusUpdate,
    RoleUpdate,
)
from api.models.responses import ErrorCodes, OpportunityPage, OpportunityResponse
from core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from core.rbac import ASSIGN_PROJECT_MEMBERS, CREATE_PROJECTS, EDIT_PROJECTS, VIEW_PROJECTS
from services import opportunities as service

router = APIRouter(prefix="/v1/opportunities", dependencies=[Depends(verify_api_key)])


def not_found(e: LookupError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"error": str(e), "code": ErrorCodes.NOT_FOUND, "details": []},
    )


def invalid(e: ValueError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={"error": "Opportunity validation failed", "code": ErrorCodes.VALIDATION_ERROR, "details": [str(e)]},
    )


def build_filters(
    client: str | None = None,
    grades: str | None = None,
    needs_hire: str | None = Query(default=None, alias="needsHire"),
    probability: str | None = None,
    opportunity_status: str | None = Query(default=None, alias="status"),
) -> service.OpportunityFilters:
    """Parse listing query parameters, e.g. ?grades=SE,SC&probability=50-100."""
    return service.OpportunityFilters(
        client=client or "",
        grades=service.parse_grades(grades),
        needs_hire=service.parse_needs_hire(needs_hire),
        probability=service.parse_probability_range(probability),
        status=opportunity_status,
    )


@router.get("", response_model=OpportunityPage)
def list_opportunities(
    filters: service.OpportunityFilters = Depends(build_filters),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, alias="pageSize"),
    conn: sqlite3.Connection = Depends(get_db),
    _role: str = Depends(require_permission(VIEW_PROJECTS)),
):
    return service.paginate(service.list_opportunities(conn, filters), page, page_size)


@router.get("/completed", response_model=list[OpportunityResponse])
def list_completed_opportunities(
    filters: service.OpportunityFilters = Depends(build_filters),
    conn: sqlite3.Connection = Depends(get_db),
    _role: str = Depends(require_permission(VIEW_PROJECTS)),
):
    filters.status = "Done"
    return service.list_opportunities(conn, filters)


@router.post("", response_model=OpportunityResponse, status_code=status.HTTP_201_CREATED)
def create_opportunity(
    body: OpportunityCreate,
    conn: sqlite3.Connection = Depends(get_db),
    _role: str = Depends(require_permission(CREATE_PROJECTS)),
):
    try:
        return service.create_opportunity(conn, body.model_dump(mode="json"))
    except ValueError as e:
        raise invalid(e)


@router.get("/{opportunity_id}", response_model=OpportunityResponse)
def get_opportunity(
    opportunity_id: str,
    conn: sqlite3.Connection = Depends(get_db),
    _role: str = Depends(require_permission(VIEW_PROJECTS)),
):
    try:
        return service.get_opportunity(conn, opportunity_id)
    except LookupError as e:
        raise not_found(e)


@router.put("/{opportunity_id}", response_model=OpportunityResponse)
def update_opportunity(
    opportunity_id: str,
    body: OpportunityUpdate,
    conn: sqlite3.Connection = Depends(get_db),
    _role: str = Depends(require_permission(EDIT_PROJECTS)),
):
    """Replace opportunity fields; probability changes may (de)activate it."""
    try:
        return service.update_opportunity(conn, opportunity_id, body.model_dump(mode="json"))
    except LookupError as e:
        raise not_found(e)
    except ValueError as e:
        raise invalid(e)


@router.patch("/{opportunity_id}/activate", response_model=OpportunityResponse)
def activate_opportunity(
    opportunity_id: str,
    body: ActivateRequest,
    conn: sqlite3.Connection = Depends(get_db),
    _role: str = Depends(require_permission(EDIT_PROJECTS)),
):
    try:
        return service.set_active(conn, opportunity_id, body.is_active)
    except LookupError as e:
        raise not_found(e)


@router.patch("/{opportunity_id}/move", response_model=OpportunityResponse)
def move_opportunity(
    opportunity_id: str,
    body: MoveRequest,
    conn: sqlite3.Connection = Depends(get_db),
    _role: str = Depends(require_permission(EDIT_PROJECTS)),
):
    try:
        return service.move_opportunity(conn, opportunity_id, body.to_status)
    except LookupError as e:
        raise not_found(e)


@router.post("/{opportunity_id}/roles", response_model=OpportunityResponse)
def add_role(
    opportunity_id: str,
    body: RoleCreate,
    conn: sqlite3.Connection = Depends(get_db),
    _role: str = Depends(require_permission(EDIT_PROJECTS)),
):
    try:
        return service.add_role(conn, opportunity_id, body.model_dump(mode="json"))
    except LookupError as e:
        raise not_found(e)


@router.put("/{opportunity_id}/roles/{role_id}", response_model=OpportunityResponse)
def update_role_status(
    opportunity_id: str,
    role_id: str,
    body: RoleStatusUpdate,
    conn: sqlite3.Connection = Depends(get_db),
    _role: str = Depends(require_permission(EDIT_PROJECTS)),
):
    try:
        return service.update_role_status(conn, opportunity_id, role_id, body.status)
    except LookupError as e:
        raise not_found(e)


@router.patch("/{opportunity_id}/roles/{role_id}", response_model=OpportunityResponse)
def edit_role(
    opportunity_id: str,
    role_id: str,
    body: RoleUpdate,
    conn: sqlite3.Connection = Depends(get_db),
    _role: str = Depends(require_permission(ASSIGN_PROJECT_MEMBERS)),
):
    """Partially update a role, e.g. to assign members."""
    try:
        return service.edit_role(conn, opportunity_id, role_id, body.model_dump(exclude_unset=True))
    except LookupError as e:
        raise not_found(e)
    except ValueError as e:
        raise invalid(e)
