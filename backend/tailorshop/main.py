"""
Main FastAPI application for the tailor shop backend.
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from contextlib import asynccontextmanager
from typing import Dict, Optional
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .exceptions import NotFoundError, RecordValidationError, StageTransitionError, StoreUnavailableError
from .routers.admin import router as admin_router
from .routers.billing import router as billing_router
from .routers.config import router as config_router
from .routers.health import router as health_router
from .routers.workflow import router as workflow_router
from .services.store import open_store
from .utils.validation import describe_validation_error


settings = get_settings()
logger = logging.getLogger(__name__)
logging.getLogger("tailorshop").setLevel(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: one store handle for the whole process
    app.state.store = open_store(get_settings())
    try:
        yield
    finally:
        # Shutdown
        store = getattr(app.state, "store", None)
        if store is not None:
            store.close()
            app.state.store = None


app = FastAPI(
    title="Tailor Shop API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(health_router, prefix=settings.API_PREFIX)
app.include_router(config_router, prefix=settings.API_PREFIX)
app.include_router(billing_router, prefix=settings.API_PREFIX)
app.include_router(workflow_router, prefix=settings.API_PREFIX)
app.include_router(admin_router, prefix=settings.API_PREFIX)


def _error(status_code: int, message: str, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message}, headers=headers)


@app.exception_handler(RecordValidationError)
async def _on_validation(request: Request, exc: RecordValidationError) -> JSONResponse:
    return _error(400, str(exc))


@app.exception_handler(RequestValidationError)
async def _on_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error(400, describe_validation_error(exc))


@app.exception_handler(StarletteHTTPException)
async def _on_http(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # unknown routes, wrong methods and any HTTPException raised by FastAPI itself
    return _error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(NotFoundError)
async def _on_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return _error(404, str(exc))


@app.exception_handler(StageTransitionError)
async def _on_transition(request: Request, exc: StageTransitionError) -> JSONResponse:
    return _error(409, str(exc))


@app.exception_handler(StoreUnavailableError)
async def _on_store_unavailable(request: Request, exc: StoreUnavailableError) -> JSONResponse:
    logger.error("%s %s: store unavailable: %s", request.method, request.url.path, exc)
    return _error(503, str(exc))


@app.exception_handler(Exception)
async def _on_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s: unexpected error", request.method, request.url.path)
    return _error(500, "Unexpected internal error")


@app.get("/", tags=["root"])
async def root() -> dict:
    """Simple root endpoint."""
    return {"name": app.title, "version": app.version}
