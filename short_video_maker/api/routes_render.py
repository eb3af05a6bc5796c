"""FastAPI routes for video rendering."""

import hmac
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from short_video_maker.core import errors
from short_video_maker.core.config import Settings
from short_video_maker.core.logging_config import get_logger
from short_video_maker.models.schemas import RenderRequest, RenderResponse
from short_video_maker.pipelines.render_pipeline import RenderPipeline
from short_video_maker.utils.budget import RenderBudget

router = APIRouter(tags=["render"])


def get_settings() -> Settings:
    """Settings dependency (overridden in tests)."""
    from short_video_maker.core.config import settings

    return settings


def verify_secret(sent: Optional[str], expected: Optional[str]) -> bool:
    """Constant-time shared-secret check; an unset secret rejects everything."""
    if not expected or not sent:
        return False
    return hmac.compare_digest(sent.encode("utf-8"), expected.encode("utf-8"))


def require_webhook_secret(
    x_webhook_secret: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Reject the request before the body is read unless the shared secret matches."""
    if not verify_secret(x_webhook_secret, settings.webhook_secret):
        get_logger(__name__).warning("Rejected render request with missing or wrong x-webhook-secret")
        raise HTTPException(status_code=401, detail="Unauthorized")


def base_url(request: Request) -> str:
    """Public base URL, honoring reverse-proxy forwarding headers."""
    proto = request.headers.get("x-forwarded-proto") or request.url.scheme or "http"
    host = request.headers.get("x-forwarded-host") or request.headers.get("host") or request.url.netloc
    return f"{proto}://{host}"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post(
    "/render",
    response_model=RenderResponse,
    response_model_by_alias=True,
    dependencies=[Depends(require_webhook_secret)],
)
def render_video(
    body: RenderRequest,
    request: Request,
    settings: Settings = Depends(get_settings),
):
    """
    Render a narrated video from an ordered scene list.

    Runs synchronously in FastAPI's worker thread pool; the response is sent
    once the file is in the output directory.
    """
    budget = RenderBudget(settings.request_budget_seconds)
    logger = get_logger(__name__, scenes=len(body.scenes))

    try:
        output = RenderPipeline(settings, logger).run(body, budget=budget)
    except errors.ValidationError as e:
        return error_response(400, str(e))
    except errors.RenderTimeoutError as e:
        return error_response(503, str(e))
    except errors.VideoMakerError as e:
        return error_response(500, str(e) or "Render failed")
    except Exception as e:
        logger.exception(f"Unexpected error rendering video: {e}")
        return error_response(500, f"Render failed: {e}" if str(e) else "Render failed")

    return RenderResponse(
        status="done",
        file_url=f"{base_url(request)}/files/{output.filename}",
        meta={
            "mode": "scenes+voice",
            "scenes": output.scene_count,
            "segments": output.segment_count,
            "orientation": output.orientation.value,
            "quality": output.quality.value,
            "durationSec": round(output.duration_sec, 3),
        },
    )


@router.get("/healthz", response_class=PlainTextResponse)
async def healthz() -> str:
    """Health check endpoint."""
    return "ok"


@router.get("/debug/list")
async def debug_list(settings: Settings = Depends(get_settings)):
    """List finished files in the output directory."""
    out_dir = Path(settings.output_dir)
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        files = sorted(p.name for p in out_dir.iterdir() if p.is_file())
    except OSError as e:
        return error_response(500, str(e) or "read dir failed")
    return {"outDir": str(out_dir), "files": files}
