# user_api/main.py

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from user_api.api.api import api_router
from user_api.api.routes_health import router as health_router
from user_api.core.config import Settings, get_settings
from user_api.core.errors import UserApiError
from user_api.core.logging_setup import configure_logging
from user_api.db.init_db import init_db
from user_api.db.session import build_engine, build_session_factory

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: create tables. Shutdown: dispose the engine's pool.
    """
    settings: Settings = app.state.settings
    logger.info("Starting %s v%s", settings.PROJECT_NAME, settings.VERSION)
    await init_db(app.state.engine)

    yield

    logger.info("Shutting down %s", settings.PROJECT_NAME)
    await app.state.engine.dispose()


def _error_detail(settings: Settings, exc: Exception, generic: str) -> str:
    return str(exc) if settings.debug else generic


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(UserApiError)
    async def user_api_error_handler(request: Request, exc: UserApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message, **exc.extra()},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return JSONResponse(status_code=400, content={"message": message})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # A known path with an unrouted method is just another unmatched route
        if exc.status_code == 405:
            return JSONResponse(status_code=404, content={"message": "Not Found"})
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("Store error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"message": "Server error", "error": _error_detail(settings, exc, "Database error")},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled exception on %s %s",
            request.method,
            request.url.path,
            exc_info=(type(exc), exc, exc.__traceback__),
        )
        return JSONResponse(
            status_code=500,
            content={
                "message": "Internal Server Error",
                "error": _error_detail(settings, exc, "Unexpected error"),
            },
        )


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    # ---------- STORE ----------
    app.state.settings = settings
    app.state.engine = build_engine(settings.database_url)
    app.state.session_factory = build_session_factory(app.state.engine)

    # ---------- CORS ----------
    if settings.backend_cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.backend_cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app, settings)

    # ---------- ROUTERS ----------
    app.include_router(health_router)
    app.include_router(api_router, prefix=settings.api_prefix)

    return app


app = create_application()
