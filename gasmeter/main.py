from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gasmeter.api.routes import auth, config, health, readings, reports
from gasmeter.core.config import Settings, get_settings
from gasmeter.core.errors import StorageError, ValidationError
from gasmeter.db import session as db_session
from gasmeter.services.identity_service import IdentityService


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Inicjalizacja zasobów podczas startu aplikacji."""
    db_session.create_tables()
    _bootstrap_identities(get_settings())
    yield


def _bootstrap_identities(settings: Settings) -> None:
    """Tworzy konta domyślne, jeśli lista kont jest pusta."""
    if not settings.seed_default_identities:
        return
    IdentityService(db_session.session_store(), settings).ensure_default_identities()


async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": str(exc)})


async def _storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": str(exc)})


def create_app() -> FastAPI:
    """Buduje instancję FastAPI."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        lifespan=lifespan,
        openapi_url="/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(StorageError, _storage_error_handler)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(config.router)
    app.include_router(readings.router)
    app.include_router(reports.router)

    return app


app = create_app()
