"""FastAPI application exposing CLMM math and route selection."""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from clmm import __version__
from clmm.api.endpoints import router
from clmm.errors import ClmmError, MathError, NoRouteFound, PoolDataError

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("CLMM_HOST", "0.0.0.0")
PORT = int(os.environ.get("CLMM_PORT", "8000"))
DEBUG = os.environ.get("CLMM_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (10 MB)
MAX_REQUEST_SIZE = 10 * 1024 * 1024

app = FastAPI(
    title="CLMM Router",
    description="Concentrated-liquidity math and multi-hop route selection",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(MathError)
async def math_error_handler(request: Request, exc: MathError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc), "code": exc.code.value})


@app.exception_handler(NoRouteFound)
async def no_route_handler(request: Request, exc: NoRouteFound) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(PoolDataError)
async def pool_data_error_handler(request: Request, exc: PoolDataError) -> JSONResponse:
    logger.warning("pool_data_unavailable", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.exception_handler(ClmmError)
async def clmm_error_handler(request: Request, exc: ClmmError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the API server.

    Configuration via environment variables:
    - CLMM_HOST: Host to bind to (default: 0.0.0.0)
    - CLMM_PORT: Port to bind to (default: 8000)
    - CLMM_DEBUG: Enable debug/reload mode (default: false)
    """
    uvicorn.run(
        "clmm.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
