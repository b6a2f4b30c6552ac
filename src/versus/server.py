"""
Versus Server - FastAPI application
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Tuple

from fastapi import Depends, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .errors import CompareError, ClientInputError, RateLimitedError
from .schemas import CompareRaw, CompareRequest, ErrorEnvelope
from .secure_config import check_api_key, get_config_summary
from .service import CompareService, ITEMS_REQUIRED
from .settings import Settings, get_settings, settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Versus server...")
    logger.info(f"Configuration: {get_config_summary(settings)}")
    check_api_key(settings.gemini_api_key)
    yield
    for _, service in _services.values():
        logger.info(f"Compare stats: {service.get_stats()}")
    logger.info("Versus server shutdown complete")


# Initialize FastAPI app; only /api/compare is routable
app = FastAPI(
    title="Versus",
    description="LLM-backed two-item comparison engine",
    version="1.0.0",
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
    lifespan=lifespan,
)


@app.middleware("http")
async def cors_middleware(request: Request, call_next):
    """Answer preflight requests and stamp CORS headers on every response"""
    if request.method == "OPTIONS":
        return Response(status_code=204, headers=CORS_HEADERS)
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException):
    """Unknown paths and wrong methods are both plain 404s"""
    if exc.status_code in (404, 405):
        return PlainTextResponse("Not Found", status_code=404)
    return await http_exception_handler(request, exc)


# Services are kept per settings object so their counters outlive a request
_services: Dict[int, Tuple[Settings, CompareService]] = {}


def get_service(config: Settings) -> CompareService:
    """Return the service built for these settings, creating it on first use"""
    cached = _services.get(id(config))
    if cached is None or cached[0] is not config:
        cached = (config, CompareService.from_settings(config))
        _services[id(config)] = cached
    return cached[1]


def error_response(exc: CompareError) -> JSONResponse:
    """Convert a pipeline error into the JSON error envelope"""
    envelope = ErrorEnvelope(error=exc.message, details=exc.details)
    headers: Dict[str, str] = {}
    if isinstance(exc, RateLimitedError):
        envelope.retry_after = exc.retry_after
        headers["Retry-After"] = str(exc.retry_after)
    return JSONResponse(
        envelope.model_dump(by_alias=True, exclude_none=True),
        status_code=exc.status_code,
        headers=headers,
    )


async def read_compare_request(request: Request) -> CompareRequest:
    """Parse the body; anything without two usable item names is a 400"""
    try:
        body: Any = await request.json()
    except ValueError:
        raise ClientInputError(ITEMS_REQUIRED)
    if not isinstance(body, dict):
        raise ClientInputError(ITEMS_REQUIRED)

    attributes = body.get("attributes")
    if attributes is not None and not (
        isinstance(attributes, list) and all(isinstance(a, str) for a in attributes)
    ):
        logger.warning("Ignoring malformed attributes in request")
        attributes = None

    try:
        return CompareRequest(items=body.get("items"), attributes=attributes)
    except ValidationError:
        raise ClientInputError(ITEMS_REQUIRED)


@app.post("/api/compare")
async def compare(request: Request, config: Settings = Depends(get_settings)):
    """Compare two items"""
    try:
        service = get_service(config)
        payload = await read_compare_request(request)
        outcome = await service.compare(payload.items, payload.attributes)
    except CompareError as e:
        logger.warning(f"Comparison failed with {e.status_code}: {e.message}")
        return error_response(e)
    except Exception as e:
        logger.exception(f"Unexpected error while comparing: {e}")
        return JSONResponse(
            ErrorEnvelope(error=str(e)).model_dump(by_alias=True, exclude_none=True),
            status_code=500,
        )

    if outcome.result is None:
        return JSONResponse(CompareRaw(raw=outcome.raw).model_dump())
    return JSONResponse({"ok": True, "result": outcome.result.to_wire()})


def main():
    """Main entry point for running the server"""
    import uvicorn

    uvicorn.run(
        "versus.server:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
