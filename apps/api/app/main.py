"""FastAPI application entrypoint."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.adapters.storage import InMemoryStorageProvider
from app.core.config import Settings, get_settings
from app.core.error_handling import render_error
from app.core.request_logging import RequestLoggingMiddleware
from app.errors import ApiError, AppError, AuthRejection, RequestValidationFailed
from app.repositories.memory import InMemoryStore
from app.routes import (
    admin_router,
    claims_router,
    documents_router,
    health_router,
    messages_router,
    payments_router,
    policies_router,
    users_router,
)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    environment = settings.environment

    app = FastAPI(
        title="AssureMe API",
        version="1.0.0",
        description="Insurance client and admin portal API",
    )
    app.state.settings = settings
    app.state.store = InMemoryStore()
    app.state.storage = InMemoryStorageProvider()

    app.add_middleware(RequestLoggingMiddleware, environment=environment)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AuthRejection)
    async def handle_auth_rejection(_, exc: AuthRejection) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.payload.model_dump(mode="json", exclude_none=True),
        )

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
        return render_error(request, exc, environment=environment)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        tagged = RequestValidationFailed.from_errors(exc.errors())
        tagged.__cause__ = exc
        return render_error(request, tagged, environment=environment)

    @app.exception_handler(ValidationError)
    async def handle_model_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        tagged = RequestValidationFailed.from_errors(exc.errors())
        tagged.__cause__ = exc
        return render_error(request, tagged, environment=environment)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        tagged = ApiError(status_code=exc.status_code, message=str(exc.detail))
        tagged.__cause__ = exc
        return render_error(request, tagged, environment=environment)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        return render_error(request, exc, environment=environment)

    app.include_router(health_router)

    api_prefix = "/api"
    app.include_router(users_router, prefix=api_prefix)
    app.include_router(policies_router, prefix=api_prefix)
    app.include_router(claims_router, prefix=api_prefix)
    app.include_router(documents_router, prefix=api_prefix)
    app.include_router(messages_router, prefix=api_prefix)
    app.include_router(payments_router, prefix=api_prefix)
    app.include_router(admin_router, prefix=api_prefix)

    return app


app = create_app()
