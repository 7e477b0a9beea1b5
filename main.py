import copy
import logging
import uuid
from contextlib import asynccontextmanager
from contextvars import ContextVar
from datetime import datetime, UTC
from typing import Any, Dict, List, Optional

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from jsonschema import Draft7Validator, ValidationError as JsonSchemaError

from tm_partner_mcp.config import Settings, load_settings
from tm_partner_mcp.core.services.search_router import SearchRouter
from tm_partner_mcp.mcp_server import build_tools, find_tool
from tm_partner_mcp.shared.exceptions import ErrorResponse, PartnerError
from tm_partner_mcp.tools.search_tools import (
    SEARCH_INPUT_SCHEMA,
    SEARCH_TOOL_DESCRIPTION,
    SEARCH_TOOL_NAME,
)

# Configure logger for this module
logger = logging.getLogger(__name__)

# Application constants
APP_VERSION = "0.1.0"
MAX_REQUEST_SIZE = 1_000_000  # 1MB

# Correlation ID context variable for log records
_correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="-")


class CorrelationIdFilter(logging.Filter):
    """Add correlation ID to log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        record.correlation_id = _correlation_id_var.get()
        return True


def _error_response(exc: PartnerError) -> JSONResponse:
    resp = ErrorResponse(
        error_code=exc.error_code,
        message=exc.message,
        details=exc.details,
        timestamp=datetime.now(UTC),
    )
    return JSONResponse(status_code=exc.http_status, content=jsonable_encoder(resp))


def _request_schema(schema: Dict[str, Any]) -> Dict[str, Any]:
    """Return ``schema`` without the ``kind`` enum.

    An unknown kind is left for the tool to reject with INVALID_ARGUMENT.
    """
    relaxed = copy.deepcopy(schema)
    relaxed.get("properties", {}).get("kind", {}).pop("enum", None)
    return relaxed


# MCP Tools Integration
def build_mcp_endpoint(tool_name: str, schema: Dict[str, Any]):
    """Build a FastAPI endpoint for the tool registered as ``tool_name``."""
    validator = Draft7Validator(_request_schema(schema))

    async def endpoint(request: Request):
        if not getattr(request.app.state, "mcp_ready", False):
            return JSONResponse(status_code=503, content={"detail": "MCP server not ready"})

        try:
            data = await request.json()
        except ValueError as e:
            return JSONResponse(
                status_code=422,
                content={"detail": f"Invalid JSON: {str(e)}"}
            )
        if not isinstance(data, dict):
            return JSONResponse(
                status_code=422,
                content={"detail": "Request body must be a JSON object"}
            )

        # Validate allowed parameters
        allowed = set(schema.get("properties", {}).keys())
        extra = set(data) - allowed
        if extra:
            return JSONResponse(
                status_code=422,
                content={"detail": f"Unexpected parameters: {', '.join(sorted(extra))}"}
            )

        # Validate schema
        try:
            validator.validate(data)
        except JsonSchemaError as exc:
            return JSONResponse(
                status_code=422,
                content={"detail": f"Schema validation error: {exc.message}"}
            )

        tool = find_tool(request.app.state.tools, tool_name)
        text = await tool._implementation(**data)
        return {"content": [{"type": "text", "text": text}]}

    return endpoint


def create_app(
    settings: Optional[Settings] = None, router: Optional[SearchRouter] = None
) -> FastAPI:
    """Build the HTTP app.

    Settings are read from the environment at startup when not supplied, so a
    missing credential stops the app before it serves any request.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Configure logging and resolve configuration."""
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s - %(levelname)s - %(correlation_id)s - %(name)s - %(message)s",
        )
        for handler in logging.getLogger().handlers:
            handler.addFilter(CorrelationIdFilter())

        resolved = settings or load_settings()
        if resolved.ERROR_TRACKING_DSN:
            sentry_sdk.init(dsn=resolved.ERROR_TRACKING_DSN)
            logger.info("Sentry error tracking enabled")

        app.state.settings = resolved
        app.state.started_at = datetime.now(UTC)
        app.state.router = router or SearchRouter(resolved)
        app.state.tools = build_tools(app.state.router)
        app.state.mcp_ready = True
        logger.info("Registered %d MCP tools", len(app.state.tools))
        yield
        app.state.mcp_ready = False

    app = FastAPI(
        title="Ticketmaster Partner MCP API",
        version=APP_VERSION,
        lifespan=lifespan,
    )
    app.state.mcp_ready = False

    @app.middleware("http")
    async def add_correlation_id(request: Request, call_next):
        """Add correlation ID to each request for tracing."""
        correlation_id = (
            request.headers.get("X-Request-ID")
            or request.headers.get("X-Correlation-ID")
            or uuid.uuid4().hex
        )
        request.state.correlation_id = correlation_id
        token = _correlation_id_var.set(correlation_id)
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = correlation_id
            response.headers["X-Correlation-ID"] = correlation_id
            return response
        finally:
            _correlation_id_var.reset(token)

    @app.middleware("http")
    async def limit_request_size(request: Request, call_next):
        """Limit request body size to prevent memory issues."""
        content_length = request.headers.get("content-length")
        if content_length and int(content_length) > MAX_REQUEST_SIZE:
            return JSONResponse(
                status_code=413,
                content={
                    "error": "Request too large",
                    "message": f"Request size exceeds {MAX_REQUEST_SIZE} bytes limit"
                },
            )
        return await call_next(request)

    @app.exception_handler(PartnerError)
    async def handle_partner_error(request: Request, exc: PartnerError):
        """Convert tool failures to the shared error response."""
        logger.warning("%s on %s: %s", exc.error_code, request.url.path, exc.message)
        return _error_response(exc)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        """Convert unexpected errors to JSON with traceback logging."""
        logger.exception(
            "Unhandled exception during request to %s %s",
            request.method,
            request.url.path,
        )
        resp = ErrorResponse(
            error_code="UNEXPECTED_ERROR",
            message=str(exc) or "Internal server error",
            details=None,
            timestamp=datetime.now(UTC),
        )
        return JSONResponse(status_code=500, content=jsonable_encoder(resp))

    # Register MCP tools as HTTP endpoints
    app.post(
        f"/{SEARCH_TOOL_NAME}",
        operation_id=SEARCH_TOOL_NAME,
        summary=SEARCH_TOOL_DESCRIPTION,
        openapi_extra={
            "requestBody": {
                "content": {"application/json": {"schema": SEARCH_INPUT_SCHEMA}},
                "required": True
            }
        },
        tags=["mcp-tools"],
    )(build_mcp_endpoint(SEARCH_TOOL_NAME, SEARCH_INPUT_SCHEMA))

    @app.get("/tools", tags=["mcp"])
    async def list_tools(request: Request) -> Dict[str, List[Dict[str, Any]]]:
        """Return a dictionary of available MCP tools."""
        return {"tools": [t.to_dict() for t in request.app.state.tools]}

    @app.get("/health", tags=["system"])
    async def health(request: Request) -> Dict[str, Any]:
        """Report process health; the upstream API is not probed."""
        started_at = request.app.state.started_at
        return {
            "status": "healthy" if request.app.state.mcp_ready else "unhealthy",
            "timestamp": datetime.now(UTC).isoformat(),
            "version": APP_VERSION,
            "uptime": (datetime.now(UTC) - started_at).total_seconds(),
            "checks": {
                "upstream": {"base_url": request.app.state.settings.TM_PARTNER_BASE_URL},
            },
        }

    @app.get("/health/mcp", tags=["system"])
    async def health_mcp(request: Request) -> Dict[str, Any]:
        """Return health information about the MCP tools."""
        tools = request.app.state.tools
        return {
            "status": "healthy",
            "server": request.app.state.settings.SERVER_NAME,
            "tool_count": len(tools),
            "tools": [tool.name for tool in tools],
        }

    @app.get("/", tags=["system"])
    async def root() -> Dict[str, Any]:
        """API root endpoint with basic information."""
        return {
            "name": app.title,
            "version": APP_VERSION,
            "status": "running",
            "docs_url": "/docs",
            "health_url": "/health"
        }

    return app


app = create_app()
