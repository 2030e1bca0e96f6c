"""FastAPI application factory."""

import logging
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..ai import AIClient
from ..config import Config
from ..database import create_store
from ..database.base import Store
from ..errors import BidManagementError
from .container import Services
from .routes import ai, auth, company, dashboard, documents, finance, meetings, tenders, users

logger = logging.getLogger(__name__)


def _field_name(loc) -> str:
    parts = [str(p) for p in loc if p not in ("body", "query", "path")]
    return ".".join(parts) or "body"


def create_app(config: Config, store: Optional[Store] = None, ai_client: Optional[AIClient] = None) -> FastAPI:
    """Build the application.

    Args:
        config: Validated configuration
        store: Store to use instead of the one selected by ``config``
        ai_client: AI client to use instead of one built from ``config``
    """
    app = FastAPI(title="Bid Management System", version=__version__)
    app.state.services = Services.build(config, store or create_store(config), ai_client)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.monotonic()
        response = await call_next(request)
        duration_ms = int((time.monotonic() - started) * 1000)
        logger.info(
            f"request method={request.method} path={request.url.path} "
            f"status={response.status_code} duration_ms={duration_ms}"
        )
        return response

    @app.exception_handler(BidManagementError)
    async def handle_app_error(request: Request, exc: BidManagementError):
        body = {"error": exc.message}
        if exc.details is not None:
            body["details"] = exc.details
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        errors = [{"field": _field_name(e.get("loc", ())), "message": e.get("msg", "")} for e in exc.errors()]
        return JSONResponse(status_code=400, content={"message": "Validation error", "errors": errors})

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"error": "Request failed", "details": str(exc)})

    for module in (auth, users, tenders, finance, meetings, documents, company, dashboard, ai):
        app.include_router(module.router)

    return app
