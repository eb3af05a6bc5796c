"""Pydantic models and schemas for the scene assembly pipeline."""

from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Enums
# ============================================================================


class Orientation(str, Enum):
    """Target aspect of the rendered video."""

    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class QualityTier(str, Enum):
    """Named preset controlling frame size and encode speed."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class CaptionPosition(str, Enum):
    """Vertical anchor of the caption overlay."""

    BOTTOM = "bottom"
    CENTER = "center"
    TOP = "top"


class OutputFormat(str, Enum):
    """Container of the final deliverable."""

    MP4 = "mp4"
    MOV = "mov"
    MKV = "mkv"


# ============================================================================
# Request Models
# ============================================================================


class SceneRequest(BaseModel):
    """One narration + visual unit requested by the caller."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str = Field(default="", description="Narration text, also used as caption")
    search: Optional[str] = Field(default=None, description="Stock footage search hint (falls back to text)")
    min_clip_sec: Optional[float] = Field(
        default=None, alias="minClipSec", ge=0.0, description="Minimum seconds taken from each footage clip"
    )
    max_clips: Optional[int] = Field(
        default=None, alias="maxClips", ge=1, description="Maximum footage clips used for this scene"
    )
    lang: Optional[str] = Field(default=None, description="Narration language tag (e.g. 'en')")

    def search_query(self, default: str) -> str:
        """Return the footage query, falling back to narration text, then to a default."""
        return (self.search or "").strip() or self.text.strip() or default


class RenderRequest(BaseModel):
    """Full render request: ordered scenes plus rendering options."""

    model_config = ConfigDict(populate_by_name=True)

    scenes: list[SceneRequest] = Field(default_factory=list, description="Ordered scene list (playback order)")
    orientation: Orientation = Field(default=Orientation.PORTRAIT, description="portrait or landscape")
    text_position: CaptionPosition = Field(
        default=CaptionPosition.BOTTOM, alias="textPosition", description="Caption anchor"
    )
    out_format: OutputFormat = Field(default=OutputFormat.MP4, alias="outFormat", description="Output container")
    quality: QualityTier = Field(default=QualityTier.LOW, description="Quality tier")


# ============================================================================
# Intermediate Assets
# ============================================================================


class NarrationAsset(BaseModel):
    """One synthesized narration file and its probed duration."""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(..., description="Audio file path")
    duration_sec: float = Field(..., ge=0.0, description="Probed duration in seconds")
    chunk_count: int = Field(default=1, ge=1, description="Number of synthesis calls joined into this file")


class FootageCandidate(BaseModel):
    """A stock clip chosen for one provider result."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="Direct file URL")
    width: int = Field(default=0, ge=0, description="File width in pixels")
    height: int = Field(default=0, ge=0, description="File height in pixels")
    duration_sec: float = Field(default=0.0, ge=0.0, description="Source clip duration in seconds")
    video_id: Optional[str] = Field(default=None, description="Provider video identifier")


class VideoSegment(BaseModel):
    """One rendered, captioned, fixed-size clip."""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(..., description="Encoded segment path")
    duration_sec: float = Field(..., gt=0.0, description="Rendered duration in seconds")
    width: int = Field(..., description="Frame width")
    height: int = Field(..., description="Frame height")
    source_url: str = Field(..., description="Footage the segment was cut from")


class SceneAsset(BaseModel):
    """A scene's video paired with its narration."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0, description="Position in the request (0-indexed)")
    video_path: Path = Field(..., description="Scene video (single segment or concatenation)")
    narration: NarrationAsset = Field(..., description="Scene narration")
    segments: list[VideoSegment] = Field(..., min_length=1, description="Segments making up the scene video")
    target_sec: float = Field(..., description="Clamped visual duration the segments were sized to")


class FinalOutput(BaseModel):
    """The muxed deliverable."""

    path: Path = Field(..., description="Output file path")
    filename: str = Field(..., description="Output file name, as served under /files")
    duration_sec: float = Field(..., ge=0.0, description="Probed output duration")
    scene_count: int = Field(..., ge=1, description="Number of scenes in the timeline")
    segment_count: int = Field(..., ge=1, description="Number of rendered segments")
    orientation: Orientation = Field(..., description="Orientation used")
    quality: QualityTier = Field(..., description="Quality tier used")


# ============================================================================
# API Response Models
# ============================================================================


class RenderResponse(BaseModel):
    """Response returned by POST /render."""

    model_config = ConfigDict(populate_by_name=True)

    status: str = Field(default="done", description="Render status")
    file_url: str = Field(..., alias="fileUrl", description="Public URL of the produced file")
    meta: dict[str, Any] = Field(default_factory=dict, description="Render summary")
