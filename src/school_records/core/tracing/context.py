# src/school_records/core/tracing/context.py
"""
Trace context: the request-scoped holder of the current trace id.

Every inbound HTTP request gets exactly one trace id (a UUID4 string). The
tracing middleware opens a scope for it with `trace_scope(...)`; any code that
runs on behalf of that request (routers, services, repositories, the error
normalizer, log filters) reads it back with `get_current_trace_id()`.

Storage is a `contextvars.ContextVar`:
  - each asyncio task runs in its own copy of the context, so two requests
    interleaved on the same event loop never see each other's id;
  - the value survives `await` boundaries (a request suspended on a DB call
    resumes with its own id);
  - outside any scope the var holds its default (None), which callers treat as
    "no trace id", never as an error.

Scopes nest: `trace_scope` restores whatever was active before it on exit
(including on exceptions) by resetting the token returned from `ContextVar.set`.
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Iterator

_trace_id_ctx: ContextVar[str | None] = ContextVar("trace_id", default=None)


def new_trace_id() -> str:
    """Return a fresh, opaque trace id (canonical UUID4 text form)."""
    return str(uuid.uuid4())


def is_valid_trace_id(value: str | None) -> bool:
    """
    True when `value` looks like a UUID. Used before honoring a trace id sent by
    an upstream caller, so arbitrary header content never reaches the logs.
    """
    if not value or len(value) > 64:
        return False
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


def get_current_trace_id() -> str | None:
    """
    Return the trace id of the innermost active scope, or None outside a request.
    Never raises.
    """
    return _trace_id_ctx.get()


def set_trace_id(trace_id: str | None) -> Token:
    """
    Low-level setter. Returns the token that `reset_trace_id` needs to restore
    the previous value. Prefer `trace_scope` which pairs both calls.
    """
    return _trace_id_ctx.set(trace_id)


def reset_trace_id(token: Token) -> None:
    _trace_id_ctx.reset(token)


@contextmanager
def trace_scope(trace_id: str | None = None) -> Iterator[str]:
    """
    Make `trace_id` (or a new one) the current trace id for the body of the block.

    Usage:
        with trace_scope() as trace_id:
            await handle(request)

    The previous value is restored when the block exits, normal or not.
    """
    trace_id = trace_id or new_trace_id()
    token = set_trace_id(trace_id)
    try:
        yield trace_id
    finally:
        reset_trace_id(token)
