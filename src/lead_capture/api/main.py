"""
FastAPI application serving both functions.
Routes mirror the serverless deployment paths: /api/webhook-proxy and /api/kajabi-tag.
"""

from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from loguru import logger

from lead_capture.config.settings import get_settings
from lead_capture.utils.json_utils import loads_strict
from lead_capture.utils.logging import ensure_logging
from lead_capture.webhooks.handlers import handle_kajabi_tag, handle_webhook_proxy
from lead_capture.webhooks.models import HandlerResponse

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

Handler = Callable[[str, Any], Awaitable[HandlerResponse]]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logger.info("Starting lead capture service")
    yield
    logger.info("Shutting down lead capture service")


async def _parse_request_body(request: Request) -> Any:
    """Decode the JSON body; an empty or undecodable body is treated as absent."""
    raw = await request.body()
    if not raw:
        return None
    try:
        return loads_strict(raw)
    except ValueError:
        logger.warning("Request body is not valid JSON; treating it as absent")
        return None


def to_http_response(result: HandlerResponse) -> Response:
    """Translate a handler result into a Starlette response."""
    if result.empty:
        return Response(status_code=result.status_code, headers=result.headers)
    return JSONResponse(
        content=result.body, status_code=result.status_code, headers=result.headers
    )


def _function_endpoint(name: str, handler: Handler):
    async def endpoint(request: Request) -> Response:
        logger.info(f"{name}: {request.method} {request.url.path}")
        body = await _parse_request_body(request) if request.method == "POST" else None
        result = await handler(request.method, body)
        return to_http_response(result)

    endpoint.__name__ = name.replace("-", "_")
    return endpoint


def create_app() -> FastAPI:
    """Create the FastAPI app with both functions mounted."""
    settings = get_settings()
    ensure_logging(settings.app_name)

    app = FastAPI(
        title="Lead Capture Functions",
        description="Make.com webhook relay and Kajabi contact tagging",
        version="1.0.0",
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None,
        lifespan=lifespan,
    )

    for name, handler in (
        ("webhook-proxy", handle_webhook_proxy),
        ("kajabi-tag", handle_kajabi_tag),
    ):
        endpoint = _function_endpoint(name, handler)
        app.add_api_route(f"/api/{name}", endpoint, methods=ALL_METHODS)
        app.add_api_route(f"/api/{name}/{{path:path}}", endpoint, methods=ALL_METHODS)

    @app.get("/health")
    async def health_check():
        """Liveness endpoint."""
        return {
            "service": settings.app_name,
            "status": "healthy",
            "environment": settings.environment,
            "timestamp": datetime.utcnow().isoformat(),
        }

    return app


app = create_app()
