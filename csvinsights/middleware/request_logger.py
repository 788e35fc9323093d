"""
Request logging middleware for CSV Insights.

Logs method, path, query string, status code and duration of every HTTP
request, and reports the duration to the client in a response header.
"""

import logging
import time

from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger("csvinsights.middleware.request_logger")

TIMING_HEADER = b"x-response-time-ms"


class RequestLoggerMiddleware:
    """Logs one line per completed HTTP request."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = time.perf_counter()
        status_code = 0

        def elapsed_ms() -> float:
            return round((time.perf_counter() - started) * 1000, 2)

        async def send_wrapper(message: Message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 0)
                headers = list(message.get("headers", []))
                headers.append([TIMING_HEADER, str(elapsed_ms()).encode()])
                message = {**message, "headers": headers}
            elif message["type"] == "http.response.body" and not message.get("more_body", False):
                query = scope.get("query_string", b"").decode("latin-1")
                target = scope.get("path", "?") + (f"?{query}" if query else "")
                logger.info("%s %s -> %s (%.2fms)", scope.get("method", "?"), target,
                            status_code, elapsed_ms())
            await send(message)

        await self.app(scope, receive, send_wrapper)
