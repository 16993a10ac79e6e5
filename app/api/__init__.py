# app/api/__init__.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routers import carts, health, orders, users
from app.domain.errors import DomainError, StorageError
from app.utils.logging import get_logger

logger = get_logger(__name__)


def _envelope(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
        headers=headers,
    )


async def domain_error_handler(request: Request, exc: DomainError):
    # status z typu błędu, treść komunikatu nie jest analizowana
    if isinstance(exc, StorageError):
        logger.error(f"{request.method} {request.url.path} failed: storage error")
        return _envelope(exc.status_code, exc.public_message)
    return _envelope(exc.status_code, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{field}: {first.get('msg', 'Invalid request')}" if field else "Invalid request body"
    return _envelope(400, message)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # nieznana ścieżka / zła metoda z routingu
    message = "Endpoint not found" if exc.status_code == 404 else str(exc.detail)
    return _envelope(exc.status_code, message, getattr(exc, "headers", None))


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _envelope(500, "Internal server error")


def create_app() -> FastAPI:
    app = FastAPI(
        title="FreshMart Cart & Orders",
        version="1.0.0",
    )

    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(carts.router)
    app.include_router(orders.router)

    return app
