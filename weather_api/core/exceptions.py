"""
Exception types and FastAPI exception handlers.

Goals:
- one error response shape: {error, message?, details?}
- upstream status codes forwarded as-is
- safe messages for clients, tracebacks only in server logs
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import RequestResponseEndpoint
from starlette.responses import Response

from weather_api.models.response import ErrorResponse

logger = logging.getLogger(__name__)

NOT_FOUND_ERROR = "找不到此路徑"
SERVER_ERROR = "伺服器錯誤"


class AppError(Exception):
    """Base application error, carries the HTTP mapping with it."""

    def __init__(
        self,
        *,
        error: str,
        message: Optional[str] = None,
        http_status: int = 500,
        details: Any = None,
    ) -> None:
        super().__init__(message or error)
        self.error = error
        self.message = message
        self.http_status = http_status
        self.details = details

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(error=self.error, message=self.message, details=self.details)


class ConfigurationError(AppError):
    """Raised when the CWA API key is not configured."""

    def __init__(self) -> None:
        super().__init__(
            error="伺服器設定錯誤",
            message="請在 .env 檔案中設定 CWA_API_KEY",
            http_status=500,
        )


class UpstreamHTTPError(AppError):
    """CWA answered with a non-2xx status."""

    def __init__(self, *, status_code: int, body: Any) -> None:
        message = body.get("message") if isinstance(body, dict) else None
        if not isinstance(message, str):
            message = None
        super().__init__(
            error="CWA API 錯誤",
            message=message or "無法取得天氣資料",
            http_status=status_code,
            details=body,
        )


class UpstreamUnavailableError(AppError):
    """No usable response from CWA (network failure or undecodable body)."""

    def __init__(self) -> None:
        super().__init__(
            error=SERVER_ERROR,
            message="無法取得天氣資料，請稍後再試",
            http_status=500,
        )


class NoForecastDataError(AppError):
    """CWA returned no locations."""

    def __init__(self) -> None:
        super().__init__(
            error="查無資料",
            message="無法取得任何縣市天氣資料",
            http_status=404,
        )


class ForecastDataError(AppError):
    """CWA records break the shared time-window layout."""

    def __init__(self, message: str) -> None:
        super().__init__(error="CWA 資料格式錯誤", message=message, http_status=502)


def error_body(response: ErrorResponse) -> dict[str, Any]:
    return response.model_dump(exclude_none=True)


def install_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers on the app.

    Call before adding CORSMiddleware so CORS stays the outer layer.
    """

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
        logger.warning(
            "AppError",
            extra={
                "path": request.url.path,
                "error": exc.error,
                "http_status": exc.http_status,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=error_body(exc.to_response())
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        # unknown path and known path with another method both count as unmatched
        if exc.status_code in (404, 405):
            return JSONResponse(
                status_code=404, content=error_body(ErrorResponse(error=NOT_FOUND_ERROR))
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(ErrorResponse(error=str(exc.detail))),
            headers=getattr(exc, "headers", None),
        )

    # Runs as middleware rather than an Exception handler so that middleware
    # added afterwards (CORS) still wraps the 500 response.
    @app.middleware("http")
    async def handle_unhandled(
        request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception("Unhandled exception", extra={"path": request.url.path})
            return JSONResponse(
                status_code=500,
                content=error_body(ErrorResponse(error=SERVER_ERROR, message=str(exc))),
            )
