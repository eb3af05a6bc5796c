"""Segment Renderer - cuts one captioned, fixed-size segment from a stock clip."""

from typing import Any

from short_video_maker.core.config import Settings
from short_video_maker.core.errors import RenderError
from short_video_maker.models.schemas import CaptionPosition, FootageCandidate, Orientation, QualityTier, VideoSegment
from short_video_maker.services.media_ops import MediaToolkit
from short_video_maker.storage.workspace import RenderWorkspace
from short_video_maker.utils.io_utils import download_to
from short_video_maker.utils.text_utils import caption_font_size, escape_drawtext

# Portrait (width, height) per tier; landscape is the transpose.
PORTRAIT_SIZES = {
    QualityTier.LOW: (480, 852),
    QualityTier.MEDIUM: (720, 1280),
    QualityTier.HIGH: (1080, 1920),
}

# x264 (preset, crf) per tier. Every segment of a request shares one profile.
ENCODE_PROFILES = {
    QualityTier.LOW: ("ultrafast", 28),
    QualityTier.MEDIUM: ("veryfast", 26),
    QualityTier.HIGH: ("fast", 23),
}

CAPTION_Y = {
    CaptionPosition.CENTER: "(h-text_h)/2",
    CaptionPosition.TOP: "text_h*0.8",
    CaptionPosition.BOTTOM: "h-(text_h*2)",
}


def target_size(orientation: Orientation, quality: QualityTier) -> tuple[int, int]:
    """Return the (width, height) every segment is scaled and padded to."""
    width, height = PORTRAIT_SIZES[QualityTier(quality)]
    if orientation == Orientation.LANDSCAPE:
        return height, width
    return width, height


def scale_pad_filter(orientation: Orientation, quality: QualityTier) -> str:
    """Fit inside the target size, then pad to fill it with the image centered."""
    tw, th = target_size(orientation, quality)
    return (
        f"scale={tw}:{th}:force_original_aspect_ratio=decrease,"
        f"pad={tw}:{th}:({tw}-iw)/2:({th}-ih)/2,setsar=1"
    )


def drawtext_filter(text: str, position: CaptionPosition, font_path: str) -> str:
    """Build the caption overlay filter."""
    safe = escape_drawtext(text)
    y_expr = CAPTION_Y[CaptionPosition(position)]
    size = caption_font_size(safe)
    return (
        f"drawtext=fontfile='{font_path}':text='{safe}':x=(w-text_w)/2:y={y_expr}"
        f":fontsize={size}:fontcolor=white:box=1:boxcolor=black@0.5:boxborderw=12:line_spacing=6"
    )


def build_filter_chain(
    orientation: Orientation,
    quality: QualityTier,
    caption_text: str,
    caption_position: CaptionPosition,
    font_path: str,
) -> str:
    """Scale, pad, then caption."""
    return f"{scale_pad_filter(orientation, quality)},{drawtext_filter(caption_text, caption_position, font_path)}"


class SegmentRenderer:
    """Renders footage candidates into uniform, captioned segments."""

    def __init__(self, settings: Settings, logger: Any, media: MediaToolkit, workspace: RenderWorkspace):
        """
        Initialize segment renderer.

        Args:
            settings: Application settings
            logger: Logger instance
            media: Media toolkit running ffmpeg
            workspace: Request workspace for downloads and segments
        """
        self.settings = settings
        self.logger = logger
        self.media = media
        self.workspace = workspace

    def render(
        self,
        candidate: FootageCandidate,
        target_seconds: float,
        orientation: Orientation,
        quality: QualityTier,
        caption_text: str,
        caption_position: CaptionPosition,
        label: str = "seg",
    ) -> VideoSegment:
        """
        Download a clip and encode one captioned segment of the requested length.

        Args:
            candidate: Footage to cut from
            target_seconds: Segment duration (floored at settings.min_segment_seconds)
            orientation: Target orientation
            quality: Quality tier (frame size and encode preset)
            caption_text: Caption drawn over the footage
            caption_position: Caption anchor
            label: File name prefix, usually "<scene>-<take>"

        Returns:
            The rendered VideoSegment

        Raises:
            DownloadError: If the clip cannot be fetched
            RenderError: If ffmpeg fails
        """
        source_path = self.workspace.path(f"src-{label}", ".mp4")
        self.logger.info(f"Downloading footage {candidate.video_id or candidate.url} -> {source_path.name}")
        download_to(
            candidate.url,
            source_path,
            timeout=self.settings.http_timeout_seconds,
            chunk_bytes=self.settings.download_chunk_bytes,
        )

        duration = max(self.settings.min_segment_seconds, target_seconds)
        width, height = target_size(orientation, quality)
        preset, crf = ENCODE_PROFILES[QualityTier(quality)]
        vf = build_filter_chain(
            orientation, quality, caption_text, caption_position, self.settings.caption_font_path
        )

        segment_path = self.workspace.path(f"seg-{label}", ".mp4")
        self.media.run_ffmpeg(
            [
                # Loop short sources so the take is always filled
                "-stream_loop", "-1",
                "-i", source_path,
                "-t", f"{duration:.3f}",
                "-vf", vf,
                "-an",
                "-r", self.settings.output_fps,
                "-c:v", "libx264",
                "-preset", preset,
                "-crf", crf,
                "-pix_fmt", "yuv420p",
                "-movflags", "+faststart",
                segment_path,
            ],
            error_cls=RenderError,
            action=f"render segment {label}",
        )

        self.logger.info(f"Rendered segment {segment_path.name}: {duration:.2f}s at {width}x{height}")
        return VideoSegment(
            path=segment_path,
            duration_sec=duration,
            width=width,
            height=height,
            source_url=candidate.url,
        )
