"""
Error handling middleware for CSV Insights.

Translates domain errors raised by the ingestion and query services into
JSON responses with a matching status code, and turns anything else into
a generic 500 instead of a raw traceback.

Implemented as pure ASGI middleware so it sits outside FastAPI's own
exception handling and sees every error the routes let through.
"""

import json
import logging
import traceback
from typing import Dict, Type

from starlette.types import ASGIApp, Receive, Scope, Send

from ..core.errors import (
    CsvInsightsError,
    EncodingError,
    InputFormatError,
    InvalidColumnError,
    UnknownChartError,
)

logger = logging.getLogger("csvinsights.middleware.error_handler")

STATUS_BY_ERROR: Dict[Type[CsvInsightsError], int] = {
    InputFormatError: 400,
    EncodingError: 400,
    InvalidColumnError: 422,
    UnknownChartError: 404,
}


def status_for(exc: CsvInsightsError) -> int:
    for error_type, status in STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return status
    return 400


class ErrorHandlerMiddleware:
    """Maps CsvInsightsError to 4xx and unexpected exceptions to 500."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "unknown")
        try:
            await self.app(scope, receive, send)
        except CsvInsightsError as exc:
            status = status_for(exc)
            logger.warning("%s on %s: %s", type(exc).__name__, path, exc.message)
            await self._send_json(send, status, {
                "error": exc.code,
                "message": exc.message,
            })
        except Exception as exc:
            method = scope.get("method", "unknown")
            logger.error("Unhandled exception on %s %s: %s", method, path, exc)
            logger.debug(traceback.format_exc())
            await self._send_json(send, 500, {
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again.",
                "path": path,
            })

    @staticmethod
    async def _send_json(send: Send, status: int, payload: dict) -> None:
        body = json.dumps(payload).encode("utf-8")
        await send({
            "type": "http.response.start",
            "status": status,
            "headers": [
                [b"content-type", b"application/json"],
                [b"content-length", str(len(body)).encode()],
            ],
        })
        await send({
            "type": "http.response.body",
            "body": body,
        })
