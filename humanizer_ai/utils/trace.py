from __future__ import annotations

import uuid
from contextvars import ContextVar

import structlog
from fastapi import Request

TRACE_HEADER = "x-trace-id"

trace_id_ctx: ContextVar[str] = ContextVar("trace_id", default="")


def make_trace_id() -> str:
    return uuid.uuid4().hex


async def trace_context_middleware(request: Request, call_next):
    trace_id = request.headers.get(TRACE_HEADER) or make_trace_id()
    token = trace_id_ctx.set(trace_id)
    structlog.contextvars.bind_contextvars(trace_id=trace_id, path=request.url.path)
    try:
        response = await call_next(request)
        response.headers[TRACE_HEADER] = trace_id
        return response
    finally:
        structlog.contextvars.unbind_contextvars("trace_id", "path")
        trace_id_ctx.reset(token)


def get_trace_id() -> str:
    return trace_id_ctx.get() or make_trace_id()
