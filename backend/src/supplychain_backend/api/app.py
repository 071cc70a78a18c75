"""Factory for constructing the FastAPI application."""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from supplychain_backend.api.models import ErrorResponse
from supplychain_backend.api.routers import game_router, levels_router
from supplychain_backend.game_logic.errors import (
    AffordabilityError,
    EngineError,
    ProcessingError,
    ValidationError,
)
from supplychain_backend.settings import get_settings
from supplychain_backend.shared.logger import get_logger

logger = get_logger(__name__)


def _error_response(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


async def _handle_affordability_error(
    _request: Request, exc: AffordabilityError
) -> JSONResponse:
    report = exc.report
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        ErrorResponse(
            error=exc.message,
            total_cost=report.total_cost,
            holding_cost=report.holding_cost,
            available_cash=report.available_cash,
            shortfall=report.shortfall,
            dominant_component=report.dominant_component,
            cost_breakdown=report.cost_breakdown,
        ),
    )


async def _handle_validation_error(
    _request: Request, exc: ValidationError
) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        ErrorResponse(error=exc.message, details=exc.detail or None),
    )


async def _handle_processing_error(
    _request: Request, exc: ProcessingError
) -> JSONResponse:
    logger.error("Day processing failed: %s", exc.message)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorResponse(error=exc.message, details=exc.detail or None),
    )


async def _handle_engine_error(_request: Request, exc: EngineError) -> JSONResponse:
    logger.error("Unhandled engine error: %s", exc.message)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorResponse(error=exc.message, details=exc.detail or None),
    )


async def _handle_unexpected_error(_request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unexpected failure while serving a game request", exc_info=exc)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorResponse(
            error="Failed to process game day", details={"message": str(exc)}
        ),
    )


async def _handle_request_validation_error(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        ErrorResponse(
            error="Invalid request payload.",
            details=_jsonable_errors(exc),
        ),
    )


async def _handle_http_exception(
    _request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return _error_response(exc.status_code, ErrorResponse(error=str(exc.detail)))


def _jsonable_errors(exc: RequestValidationError) -> list[dict[str, object]]:
    """Return the validation errors without non-serialisable context."""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
        for error in exc.errors()
    ]


def create_api() -> FastAPI:
    """Instantiate and configure the FastAPI application."""
    settings = get_settings()
    app = FastAPI(title="Supply Chain Game API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(AffordabilityError, _handle_affordability_error)
    app.add_exception_handler(ValidationError, _handle_validation_error)
    app.add_exception_handler(ProcessingError, _handle_processing_error)
    app.add_exception_handler(EngineError, _handle_engine_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)
    app.add_exception_handler(Exception, _handle_unexpected_error)
    app.include_router(game_router)
    app.include_router(levels_router)
    return app
