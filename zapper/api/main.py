"""FastAPI application for the zapper."""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from zapper import __version__
from zapper.api.endpoints import router
from zapper.errors import ZapperError

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("ZAPPER_HOST", "0.0.0.0")
PORT = int(os.environ.get("ZAPPER_PORT", "8000"))
DEBUG = os.environ.get("ZAPPER_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (1 MB)
MAX_REQUEST_SIZE = 1024 * 1024

app = FastAPI(
    title="Zapper",
    description="Single-token liquidity deposits for UniswapV2 pairs",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(ZapperError)
async def zapper_error_handler(request: Request, exc: ZapperError) -> JSONResponse:
    logger.warning("request_rejected", path=request.url.path, reason=exc.reason)
    return JSONResponse(status_code=400, content={"detail": exc.reason})


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the zapper API server.

    Configuration via environment variables:
    - ZAPPER_HOST: Host to bind to (default: 0.0.0.0)
    - ZAPPER_PORT: Port to bind to (default: 8000)
    - ZAPPER_DEBUG: Enable debug/reload mode (default: false)
    """
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ]
    )
    uvicorn.run(
        "zapper.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
