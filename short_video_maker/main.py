"""
FastAPI entrypoint for the Short Video Maker API.

* POST /render renders a video and returns its public URL
* Finished files are served from /files
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from short_video_maker.api.routes_render import router as render_router
from short_video_maker.core.config import settings
from short_video_maker.core.logging_config import get_logger, setup_logging

# Setup logging
setup_logging(
    log_level=settings.log_level,
    log_file=settings.log_file,
    json_file=settings.log_json,
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    Path(settings.output_dir).mkdir(parents=True, exist_ok=True)
    Path(settings.work_dir).mkdir(parents=True, exist_ok=True)
    logger.info("=" * 60)
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Output dir: {settings.output_dir} | work dir: {settings.work_dir}")
    if not settings.webhook_secret:
        logger.warning("WEBHOOK_SECRET is not set; every /render request will be rejected")
    if not settings.pexels_api_key:
        logger.warning("PEXELS_API_KEY is not set; renders will fail at footage search")
    logger.info("=" * 60)
    yield
    # Shutdown
    logger.info("Shutting down application")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Short Video Maker - narrated stock-footage shorts assembled on demand",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "x-webhook-secret"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed payloads in the same {error} shape as pipeline failures."""
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(status_code=400, content={"error": f"{location}: {message}" if location else message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


app.include_router(render_router)
app.mount("/files", StaticFiles(directory=settings.output_dir, check_dir=False), name="files")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "short_video_maker.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
