"""Timeline Assembler - joins per-scene videos and narrations in request order."""

from pathlib import Path
from typing import Any, Sequence

from short_video_maker.core.config import Settings
from short_video_maker.core.errors import ConcatenationError, ProbeError
from short_video_maker.models.schemas import NarrationAsset
from short_video_maker.services.media_ops import MediaToolkit
from short_video_maker.storage.workspace import RenderWorkspace


class TimelineAssembler:
    """Copy-concatenates scene assets into one video stream and one audio stream."""

    def __init__(self, settings: Settings, logger: Any, media: MediaToolkit, workspace: RenderWorkspace):
        """
        Initialize timeline assembler.

        Args:
            settings: Application settings
            logger: Logger instance
            media: Media toolkit
            workspace: Request workspace
        """
        self.settings = settings
        self.logger = logger
        self.media = media
        self.workspace = workspace

    def assemble_video(self, scene_videos: Sequence[Path]) -> Path:
        """
        Join scene videos, in order, without re-encoding.

        Args:
            scene_videos: Scene video files in playback order

        Returns:
            Path of the joined video stream

        Raises:
            ConcatenationError: If an input is missing, empty or has a different encoding profile
        """
        self._check_inputs(scene_videos, "video")
        if self.settings.verify_concat_uniformity:
            self._check_uniform(scene_videos)

        output_path = self.workspace.path("video", ".mp4")
        self.logger.info(f"Assembling {len(scene_videos)} scene videos -> {output_path.name}")
        return self.media.concat_copy(scene_videos, output_path)

    def assemble_audio(self, narrations: Sequence[NarrationAsset]) -> Path:
        """
        Join narration files, in order, without re-encoding.

        Args:
            narrations: Narration assets in playback order

        Returns:
            Path of the joined audio stream
        """
        paths = [n.path for n in narrations]
        self._check_inputs(paths, "audio")

        output_path = self.workspace.path("voice-all", ".mp3")
        total = sum(n.duration_sec for n in narrations)
        self.logger.info(f"Assembling {len(paths)} narrations ({total:.2f}s) -> {output_path.name}")
        return self.media.concat_copy(paths, output_path)

    def _check_inputs(self, paths: Sequence[Path], kind: str) -> None:
        if not paths:
            raise ConcatenationError(f"No {kind} inputs to assemble")
        for i, path in enumerate(paths):
            if path is None or not Path(path).is_file():
                raise ConcatenationError(f"Missing {kind} input #{i}: {path}")
            if Path(path).stat().st_size == 0:
                raise ConcatenationError(f"Empty {kind} input #{i}: {path}")

    def _check_uniform(self, paths: Sequence[Path]) -> None:
        """Reject copy concatenation of videos with different encoding profiles."""
        try:
            formats = [self.media.probe_video_format(Path(p)) for p in paths]
        except ProbeError as e:
            raise ConcatenationError(f"Unreadable video input: {e}") from e

        reference = formats[0]
        for i, fmt in enumerate(formats[1:], start=1):
            if fmt != reference:
                raise ConcatenationError(
                    f"Scene video #{i} format {fmt} differs from {reference}; copy concatenation needs uniform inputs"
                )
