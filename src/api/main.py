"""FastAPI application entry point."""

import warnings
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.models.responses import ErrorCodes, ErrorResponse
from api.routes import (
    allocations_router,
    employees_router,
    health_router,
    opportunities_router,
    permissions_router,
    reports_router,
)
from core.config import API_DEBUG, API_VERSION


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup: verify the database has been created
    from core.config import DB_PATH

    if not DB_PATH.exists():
        warnings.warn(f"Database not found at {DB_PATH}; run src/scripts/init_db.py")

    yield


app = FastAPI(
    title="Staffing Allocation API",
    description="REST API for tracking opportunities, staffing roles and checking employee allocations",
    version=API_VERSION,
    debug=API_DEBUG,
    lifespan=lifespan,
)

# CORS middleware (for development)
if API_DEBUG:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def format_validation_error(error: dict) -> str:
    """e.g. 'body.startDate: Field required'"""
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error.get('msg', 'Invalid value')}"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reject malformed requests with 400 and field-level details."""
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error="Invalid request data",
            code=ErrorCodes.VALIDATION_ERROR,
            details=[format_validation_error(e) for e in exc.errors()],
        ).model_dump(),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Return structured error details as the response body."""
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = ErrorResponse(
            error=str(exc.detail),
            code=ErrorCodes.INVALID_REQUEST,
            details=[],
        ).model_dump()
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


# Global exception handler for unexpected errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with standard error format."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            code=ErrorCodes.INTERNAL_ERROR,
            details=[],
        ).model_dump(),
    )


# Include routers
app.include_router(health_router)
app.include_router(opportunities_router)
app.include_router(employees_router)
app.include_router(allocations_router)
app.include_router(reports_router)
app.include_router(permissions_router)


# Entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    from core.config import API_HOST, API_PORT

    uvicorn.run(
        "api.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_DEBUG,
    )
