"""
Request Context Middleware

Binds a request id, method and path to every log line emitted while the
request is handled. The id is taken from an incoming X-Request-ID header
when present and echoed back on the response.
"""

from uuid import uuid4

from fastapi import FastAPI, Request

from src.shared.core.logging import clear_log_context, log_context


REQUEST_ID_HEADER = "X-Request-ID"


def setup_request_context(app: FastAPI) -> None:
    """Register the request context middleware on the application."""

    @app.middleware("http")
    async def bind_request_context(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex

        clear_log_context()
        log_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        try:
            response = await call_next(request)
        finally:
            clear_log_context()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
