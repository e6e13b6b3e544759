"""FastAPI web service for Markdown to Google Docs conversion.

Endpoints::

    POST /api/markdown/convert  Create a Google Doc from Markdown.
    GET  /health                Health check (never API-key gated).

Settings come from the environment (see :meth:`ServerConfig.from_env`):
``API_KEY`` turns on the ``X-API-Key`` gate, ``ENABLE_RATE_LIMIT`` turns on
per-client limiting of ``/api`` routes, ``GDOCIFY_ENV=development`` adds
error details to failure responses.

Run::

    uvicorn gdocify.server:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, StrictStr, field_validator
from starlette.exceptions import HTTPException as StarletteHTTPException

from gdocify import __version__
from gdocify.client import GdocifyClient
from gdocify.config import ServerConfig
from gdocify.docs_api.rate_limit import KeyedRateLimiter
from gdocify.errors import (
    GdocifyAuthError,
    GdocifyError,
    GdocifyInputError,
    GdocifyNotFoundError,
    GdocifyPermissionError,
    GdocifyRateLimitError,
    GdocifyValidationError,
)
from gdocify.observability import get_logger, log_fields

log = get_logger("gdocify.server")

ClientFactory = Callable[[str], GdocifyClient]

MAX_DOC_NAME_LENGTH = 255

_STATUS_BY_ERROR: tuple[tuple[type[GdocifyError], int], ...] = (
    (GdocifyInputError, 400),
    (GdocifyValidationError, 400),
    (GdocifyAuthError, 401),
    (GdocifyPermissionError, 403),
    (GdocifyNotFoundError, 404),
    (GdocifyRateLimitError, 429),
)

# (message when missing, message when not a string) per request field
_FIELD_MESSAGES: dict[str, tuple[str, str]] = {
    "docName": ("Document name is required", "Document name must be a string"),
    "markdown": ("Markdown content is required", "Markdown content must be a string"),
    "credentials": ("OAuth credentials are required", "Credentials must be an object"),
    "credentials.access_token": (
        "access_token is required in credentials",
        "access_token must be a string",
    ),
}


# ---------------------------------------------------------------------------
# Request model
# ---------------------------------------------------------------------------

class Credentials(BaseModel):
    """OAuth credentials supplied by the caller.  Only ``access_token`` is
    used; other keys (``refresh_token``, ``scope`` ...) are accepted."""

    model_config = ConfigDict(extra="allow")

    access_token: StrictStr

    @field_validator("access_token")
    @classmethod
    def _access_token_present(cls, value: str) -> str:
        if not value:
            raise ValueError("access_token is required in credentials")
        return value


class ConvertRequest(BaseModel):
    docName: StrictStr
    markdown: StrictStr
    credentials: Credentials

    @field_validator("docName")
    @classmethod
    def _doc_name_valid(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Document name is required")
        if len(value) > MAX_DOC_NAME_LENGTH:
            raise ValueError(
                f"Document name must be between 1 and {MAX_DOC_NAME_LENGTH} characters"
            )
        return value

    @field_validator("markdown")
    @classmethod
    def _markdown_present(cls, value: str) -> str:
        if not value:
            raise ValueError("Markdown content is required")
        return value


def _validation_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Flatten pydantic errors into ``[{"field", "message"}]``."""
    errors: list[dict[str, Any]] = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        field = ".".join(loc) or "body"
        kind = err.get("type", "")
        missing_msg, type_msg = _FIELD_MESSAGES.get(field, (None, None))
        if kind == "value_error":
            message = str(err.get("ctx", {}).get("error", err.get("msg", "")))
        elif kind == "missing" and missing_msg:
            message = missing_msg
        elif type_msg and kind.endswith("_type"):
            message = type_msg
        else:
            message = str(err.get("msg", "Invalid value"))
        errors.append({"field": field, "message": message})
    return errors


def _utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _status_for(exc: GdocifyError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 500


def _default_client_factory(token: str) -> GdocifyClient:
    return GdocifyClient(token=token)


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------

def create_app(
    settings: ServerConfig | None = None,
    client_factory: ClientFactory | None = None,
) -> FastAPI:
    """Build the service.

    Parameters
    ----------
    settings:
        Service settings.  Read from the environment when omitted.
    client_factory:
        Builds a :class:`GdocifyClient` from the caller's access token.
    """
    settings = settings if settings is not None else ServerConfig.from_env()
    make_client = client_factory or _default_client_factory

    app = FastAPI(
        title="gdocify",
        description="Markdown to Google Docs conversion service",
        version=__version__,
    )
    app.state.settings = settings

    # Middleware added later runs first: CORS, request log, API key, rate
    # limit, then the body-size cap.
    @app.middleware("http")
    async def body_limit(
        request: Request, call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        declared = request.headers.get("content-length")
        if declared is not None and declared.isdigit():
            size = int(declared)
        else:
            size = len(await request.body())
        if size > settings.max_body_bytes:
            log.warning(
                "Request body too large",
                extra=log_fields(
                    op="body_limit", path=request.url.path,
                    size=size, limit=settings.max_body_bytes,
                ),
            )
            return JSONResponse(
                status_code=413,
                content={"success": False, "error": "Request entity too large"},
            )
        return await call_next(request)

    if settings.enable_rate_limit:
        limiter = KeyedRateLimiter(
            max_requests=settings.rate_limit_max,
            window_seconds=settings.rate_limit_window_ms / 1000,
        )

        @app.middleware("http")
        async def rate_limit(
            request: Request, call_next: Callable[[Request], Awaitable[Response]],
        ) -> Response:
            path = request.url.path
            if path == "/api" or path.startswith("/api/"):
                key = request.client.host if request.client else "unknown"
                if not limiter.allow(key):
                    log.warning(
                        "Rate limit exceeded",
                        extra=log_fields(op="rate_limit", client=key, path=path),
                    )
                    return JSONResponse(
                        status_code=429,
                        content={
                            "success": False,
                            "error": "Too many requests, please try again later.",
                        },
                    )
            return await call_next(request)

    if settings.api_key:
        @app.middleware("http")
        async def api_key_auth(
            request: Request, call_next: Callable[[Request], Awaitable[Response]],
        ) -> Response:
            if request.url.path != "/health" and request.headers.get(
                "x-api-key"
            ) != settings.api_key:
                log.warning(
                    "Unauthorized access attempt",
                    extra=log_fields(
                        op="api_key_auth",
                        client=request.client.host if request.client else None,
                        path=request.url.path,
                    ),
                )
                return JSONResponse(
                    status_code=401,
                    content={"success": False, "error": "Unauthorized: Invalid API key"},
                )
            return await call_next(request)

    @app.middleware("http")
    async def request_log(
        request: Request, call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        t0 = time.monotonic()
        response = await call_next(request)
        log.info(
            "request",
            extra=log_fields(
                op="http",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                elapsed_ms=round((time.monotonic() - t0) * 1000, 1),
            ),
        )
        return response

    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"],
                       allow_headers=["*"])

    # -- error handlers ----------------------------------------------------

    def _failure(status: int, error: str, details: str | None = None) -> JSONResponse:
        content: dict[str, Any] = {"success": False, "error": error}
        if settings.debug and details is not None:
            content["details"] = details
        return JSONResponse(status_code=status, content=content)

    @app.exception_handler(RequestValidationError)
    async def on_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = _validation_errors(exc)
        log.warning(
            "Validation error for markdown payload",
            extra=log_fields(op="validate", path=request.url.path, errors=errors),
        )
        return JSONResponse(status_code=400, content={"success": False, "errors": errors})

    @app.exception_handler(StarletteHTTPException)
    async def on_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            log.warning(
                "Route not found",
                extra=log_fields(op="http", method=request.method, path=request.url.path),
            )
            return JSONResponse(
                status_code=404, content={"success": False, "error": "Route not found"},
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(GdocifyError)
    async def on_gdocify_error(request: Request, exc: GdocifyError) -> JSONResponse:
        status = _status_for(exc)
        log.error(
            "Error converting markdown to Google Doc",
            extra=log_fields(
                op="convert",
                path=request.url.path,
                code=getattr(exc.code, "value", exc.code),
                status_code=status,
                error=exc.message,
            ),
        )
        return _failure(status, "Failed to convert markdown to Google Doc", exc.message)

    @app.exception_handler(Exception)
    async def on_unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        log.error(
            "Unhandled error",
            exc_info=exc,
            extra=log_fields(op="http", path=request.url.path),
        )
        return _failure(500, "Internal server error", str(exc))

    # -- routes ------------------------------------------------------------

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "timestamp": _utc_timestamp()}

    @app.post("/api/markdown/convert", status_code=201)
    def convert_markdown(payload: ConvertRequest) -> dict[str, Any]:
        """Convert Markdown and publish it as a new Google Doc.

        - **docName**: title of the new document (1-255 characters)
        - **markdown**: Markdown source text
        - **credentials**: OAuth credentials holding ``access_token``
        """
        log.info(
            "Creating Google Doc",
            extra=log_fields(op="convert", doc_name=payload.docName),
        )
        with make_client(payload.credentials.access_token) as client:
            result = client.create_document_from_markdown(payload.docName, payload.markdown)
        return {
            "success": True,
            "message": "Google Doc created successfully",
            "docId": result.document_id,
            "docUrl": result.document_url,
        }

    return app


app = create_app()
