from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
import logging
import traceback
from typing import Callable

from ..exceptions import ChronosAIError, CircuitOpenError, NoProviderConfigured, ProviderError

logger = logging.getLogger(__name__)


def _error_body(exc: ChronosAIError) -> dict:
    return {"error": type(exc).__name__, "message": exc.message}


async def no_provider_handler(request: Request, exc: NoProviderConfigured):
    return JSONResponse(status_code=503, content=_error_body(exc))


async def circuit_open_handler(request: Request, exc: CircuitOpenError):
    return JSONResponse(
        status_code=503,
        content=_error_body(exc),
        headers={"Retry-After": str(exc.retry_in)},
    )


async def provider_error_handler(request: Request, exc: ProviderError):
    logger.warning(f"{request.method} {request.url.path} failed on {exc.provider or 'provider'}: {exc.message}")
    return JSONResponse(status_code=502, content=_error_body(exc))


def register_exception_handlers(app: FastAPI) -> None:
    # Most specific first; Starlette resolves handlers along the exception MRO
    app.add_exception_handler(NoProviderConfigured, no_provider_handler)
    app.add_exception_handler(CircuitOpenError, circuit_open_handler)
    app.add_exception_handler(ProviderError, provider_error_handler)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable):
        try:
            response = await call_next(request)
            return response
        except Exception as e:
            logger.error(
                f"Unhandled exception: {str(e)}\n"
                f"Path: {request.url.path}\n"
                f"Method: {request.method}\n"
                f"Traceback: {traceback.format_exc()}"
            )

            return JSONResponse(
                status_code=500,
                content={
                    "error": "InternalServerError",
                    "message": "An unexpected error occurred",
                    "detail": str(e) if request.app.debug else None
                }
            )
