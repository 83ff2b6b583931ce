"""
FastAPI application.

Builds the app, wires CORS from ``APISettings`` and maps the job board
error taxonomy onto HTTP responses.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jobboard import __version__
from jobboard.core.exceptions import FieldError, JobBoardError
from jobboard.data.database import DatabaseManager, get_database_manager
from jobboard.utils.config import get_settings
from jobboard.utils.constants import APP_DISPLAY_NAME
from jobboard.utils.logger import get_logger

from .dependencies import get_db_manager
from .routes import router

logger = get_logger(__name__)

STATUS_CODES: dict[str, int] = {
    "validation": 400,
    "authentication": 401,
    "authorization": 403,
    "not_found": 404,
    "persistence": 500,
    "internal": 500,
}


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    yield
    get_database_manager().close_all()


async def handle_job_board_error(_request: Request, exc: JobBoardError) -> JSONResponse:
    status_code = STATUS_CODES.get(exc.kind, 500)
    if status_code >= 500:
        logger.error(f"{exc.kind}: {exc.message}")
    else:
        logger.info(f"Request rejected ({exc.kind}): {exc.message}")
    body = exc.to_dict()
    body.setdefault("errors", [])
    return JSONResponse(status_code=status_code, content=body)


async def handle_request_validation_error(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        FieldError(".".join(str(p) for p in err["loc"] if p != "body") or "body", err["msg"])
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid request",
            "kind": "validation",
            "errors": [e.to_dict() for e in errors],
        },
    )


async def handle_unexpected_error(_request: Request, exc: Exception) -> JSONResponse:
    logger.opt(exception=exc).error("Unhandled error")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "kind": "internal", "errors": []},
    )


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=APP_DISPLAY_NAME,
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(JobBoardError, handle_job_board_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    @app.get("/api/health")
    def health_check(db: DatabaseManager = Depends(get_db_manager)) -> dict:
        return {"status": "ok", "database": db.check_sync_connection()}

    app.include_router(router)
    return app


app = create_app()
