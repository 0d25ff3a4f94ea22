"""
Centralized error handling and structured error logs for the HTTP API

Every error response carries ``error`` plus the request's ``trace_id`` and a
``timestamp``; the same trace id is echoed in the X-Trace-ID header and written
to the JSON log entry so a failed request can be found in the logs.
"""

import json
import logging
import traceback
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from cleartech.services.errors import StorageError

TRACE_HEADER = "X-Trace-ID"

# Trace id of the request being handled
trace_id_var: ContextVar[str] = ContextVar("trace_id", default="")

logger = logging.getLogger(__name__)

class LogRedaction:
    """Applicant identity and credentials never reach the error log"""

    ENABLED = True
    REDACTED = "***REDACTED***"
    # Identification fields of a case record, in stored and attribute form
    IDENTITY_FIELDS = {
        "firstname", "first_name", "lastname", "last_name",
        "streetaddress", "street_address", "streetaddress2", "street_address2",
        "postalcode", "postal_code", "birthdate", "birth_date",
    }
    CREDENTIAL_MARKERS = ("token", "secret", "password", "authorization", "api-key", "api_key")
    MAX_STRING = 2000

    @classmethod
    def hides(cls, key: str) -> bool:
        lowered = key.lower()
        return lowered in cls.IDENTITY_FIELDS or any(marker in lowered for marker in cls.CREDENTIAL_MARKERS)

    @classmethod
    def apply(cls, value: Any) -> Any:
        if not cls.ENABLED:
            return value
        if isinstance(value, dict):
            return {k: cls.REDACTED if cls.hides(str(k)) else cls.apply(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [cls.apply(item) for item in value]
        if isinstance(value, str) and len(value) > cls.MAX_STRING:
            return f"{value[:cls.MAX_STRING]}...[TRUNCATED]"
        return value

def _now() -> str:
    return datetime.now(timezone.utc).isoformat()

def current_trace_id() -> str:
    return trace_id_var.get() or uuid.uuid4().hex[:8]

def log_http_error(
    kind: str,
    message: str,
    request: Optional[Request] = None,
    exc: Optional[BaseException] = None,
    context: Optional[Dict[str, Any]] = None,
    with_traceback: bool = False,
) -> str:
    """Write one JSON error entry and return the trace id it was logged under"""
    trace_id = current_trace_id()
    entry: Dict[str, Any] = {
        "timestamp": _now(),
        "trace_id": trace_id,
        "kind": kind,
        "message": message,
    }

    if request is not None:
        entry["request"] = {
            "method": request.method,
            "path": request.url.path,
            "query": LogRedaction.apply(dict(request.query_params)),
        }

    if exc is not None:
        entry["exception"] = {"type": type(exc).__name__, "message": str(exc)}
        if with_traceback:
            entry["exception"]["traceback"] = traceback.format_exception(type(exc), exc, exc.__traceback__)

    if context:
        entry["context"] = LogRedaction.apply(context)

    logger.error(json.dumps(entry, default=str))
    return trace_id

def error_body(trace_id: str, **content: Any) -> Dict[str, Any]:
    return {**content, "trace_id": trace_id, "timestamp": _now()}

class TraceIdMiddleware(BaseHTTPMiddleware):
    """Tags each request with a trace id, reusing the caller's X-Trace-ID when sent"""

    async def dispatch(self, request: Request, call_next):
        trace_id = request.headers.get(TRACE_HEADER) or uuid.uuid4().hex[:8]
        token = trace_id_var.set(trace_id)
        try:
            response = await call_next(request)
        finally:
            trace_id_var.reset(token)
        response.headers[TRACE_HEADER] = trace_id
        return response

async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Dict details are the response body as-is; anything else becomes ``error``"""
    content = dict(exc.detail) if isinstance(exc.detail, dict) else {"error": exc.detail}

    if exc.status_code >= 500:
        trace_id = log_http_error(f"http_{exc.status_code}", str(content.get("error")), request=request)
    else:
        trace_id = current_trace_id()
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {content.get('error')}")

    return JSONResponse(status_code=exc.status_code, content=error_body(trace_id, **content))

async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies or parameters (422)"""
    fields = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg", "Invalid value"),
        }
        for error in exc.errors()
    ]
    trace_id = log_http_error(
        "request_validation",
        f"{len(fields)} invalid request field(s)",
        request=request,
        context={"fields": fields},
    )
    return JSONResponse(
        status_code=422,
        content=error_body(trace_id, error="Validation Error", details=fields),
    )

async def storage_exception_handler(request: Request, exc: StorageError) -> JSONResponse:
    """Case record store unreachable outside a route's own handling (503)"""
    trace_id = log_http_error(
        "storage_unavailable",
        "Case record store failure",
        request=request,
        exc=exc,
        context={"client_id": exc.client_id},
    )
    return JSONResponse(
        status_code=503,
        content=error_body(trace_id, error="Storage Unavailable", message="Case record store is unavailable"),
    )

async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    trace_id = log_http_error("unhandled", "Unhandled exception", request=request, exc=exc, with_traceback=True)
    return JSONResponse(
        status_code=500,
        content=error_body(trace_id, error="Internal Server Error", message="An unexpected error occurred"),
    )

def setup_error_handling(app):
    """Register the trace id middleware and the exception handlers on ``app``"""
    app.add_middleware(TraceIdMiddleware)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StorageError, storage_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    logger.info("Error handling configured")
