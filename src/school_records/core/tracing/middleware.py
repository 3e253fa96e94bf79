# src/school_records/core/tracing/middleware.py
"""
Trace id middleware (pure ASGI).

Purpose
-------
Give every HTTP request exactly one trace id, make it visible to all code that
runs for the request (through the trace context), and return it to the client in
the `X-Trace-Id` response header, on success and on failure alike.

It is also the last line of error handling: exceptions that no registered
exception handler dealt with are normalized here into the same error envelope
the handlers produce, inside the trace scope, so even unexpected 500s carry
`traceId` in the body and in the header.

How it works
------------
1. A scope is opened with `trace_scope(...)` before anything else runs.
   - A fresh UUID4 by default.
   - When `TRUST_INBOUND_TRACE_ID` is enabled, the first UUID-shaped value found
     in one of `INBOUND_TRACE_HEADERS` is reused for end-to-end correlation.
     Anything else sent by the caller is ignored.
2. `send` is wrapped:
   - the trace header is added to `http.response.start`;
   - we remember whether the response has started.
3. If the downstream app raises:
   - response not started yet -> normalize and send one JSON error response;
   - response already started -> the status line is gone, a second response
     would corrupt the stream. Log the anomaly and send nothing more.
4. The scope is closed in `finally`, so nothing leaks into the next request
   handled by the same task.

Why not BaseHTTPMiddleware?
---------------------------
`call_next` hides `http.response.start` from us, which is exactly what we need
to see to enforce "at most one response" and to stamp the header on responses
produced by exception handlers.

Integration
-----------
Registered last in `create_app`, so it is the outermost user middleware:

    app.add_middleware(TraceIdMiddleware, settings=settings, normalizer=normalizer)
"""

from typing import Any

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ...config import Settings
from ...exceptions.normalizer import ErrorNormalizer
from ..logging.adapter import get_trace_logger
from .context import is_valid_trace_id, trace_scope

logger = get_trace_logger(__name__)


class TraceIdMiddleware:
    """
    ASGI middleware that owns the trace scope of each HTTP request.

    Args:
        app: the downstream ASGI app.
        settings: provides TRACE_HEADER, TRUST_INBOUND_TRACE_ID and INBOUND_TRACE_HEADERS.
        normalizer: the same ErrorNormalizer the exception handlers use.
    """

    def __init__(self, app: ASGIApp, *, settings: Settings, normalizer: ErrorNormalizer):
        self.app = app
        self.normalizer = normalizer
        self.header_name = settings.TRACE_HEADER
        self.trust_inbound = settings.TRUST_INBOUND_TRACE_ID
        self.inbound_headers = list(settings.INBOUND_TRACE_HEADERS)

    def inbound_trace_id(self, scope: Scope) -> str | None:
        if not self.trust_inbound:
            return None
        headers = Headers(scope=scope)
        for name in self.inbound_headers:
            value = headers.get(name)
            if value and is_valid_trace_id(value.strip()):
                return value.strip()
        return None

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            # lifespan / websocket: nothing to trace
            await self.app(scope, receive, send)
            return

        with trace_scope(self.inbound_trace_id(scope)) as trace_id:
            state: dict[str, Any] = {"started": False}

            async def send_with_trace(message: Message) -> None:
                if message["type"] == "http.response.start":
                    if state["started"]:
                        logger.error("Response already started; dropping a second response start")
                        return
                    state["started"] = True
                    headers = MutableHeaders(scope=message)
                    headers[self.header_name] = trace_id
                await send(message)

            try:
                await self.app(scope, receive, send_with_trace)
            except Exception as exc:
                if state["started"]:
                    # the envelope cannot be written any more; keep the one log entry
                    logger.error(
                        "Unhandled error after the response started; no error response sent",
                        exc_info=(type(exc), exc, exc.__traceback__),
                    )
                    return

                response = self.normalizer.render(exc)
                await response(scope, receive, send_with_trace)
