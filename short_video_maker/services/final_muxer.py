"""Final Muxer - combines the visual track and the narration track."""

from pathlib import Path
from typing import Any

from short_video_maker.core.config import Settings
from short_video_maker.core.errors import MuxError
from short_video_maker.models.schemas import FinalOutput, Orientation, OutputFormat, QualityTier
from short_video_maker.services.media_ops import MediaToolkit
from short_video_maker.utils.io_utils import output_filename

FASTSTART_FORMATS = {OutputFormat.MP4, OutputFormat.MOV}


class FinalMuxer:
    """Muxes the assembled streams into the deliverable in the output directory."""

    def __init__(self, settings: Settings, logger: Any, media: MediaToolkit):
        """
        Initialize final muxer.

        Args:
            settings: Application settings
            logger: Logger instance
            media: Media toolkit
        """
        self.settings = settings
        self.logger = logger
        self.media = media
        self.output_dir = Path(settings.output_dir)

    def build_args(self, video_stream: Path, audio_stream: Path, output_path: Path, out_format: OutputFormat) -> list:
        """ffmpeg arguments: copy video, encode audio, stop at the shorter stream."""
        args = [
            "-i", video_stream,
            "-i", audio_stream,
            "-map", "0:v:0",
            "-map", "1:a:0",
            "-c:v", "copy",
            "-c:a", "aac",
            "-b:a", self.settings.audio_bitrate,
            "-shortest",
        ]
        if OutputFormat(out_format) in FASTSTART_FORMATS:
            args += ["-movflags", "+faststart"]
        return args + [output_path]

    def mux(
        self,
        video_stream: Path,
        audio_stream: Path,
        out_format: OutputFormat = OutputFormat.MP4,
        scene_count: int = 1,
        segment_count: int = 1,
        orientation: Orientation = Orientation.PORTRAIT,
        quality: QualityTier = QualityTier.LOW,
    ) -> FinalOutput:
        """
        Mux the streams; the output lasts min(video, audio).

        Args:
            video_stream: Assembled video-only stream
            audio_stream: Assembled narration stream
            out_format: Output container
            scene_count: Scenes in the timeline (reported)
            segment_count: Segments rendered (reported)
            orientation: Orientation used (reported)
            quality: Quality tier used (reported)

        Returns:
            FinalOutput describing the deliverable

        Raises:
            MuxError: If ffmpeg fails
        """
        out_format = OutputFormat(out_format)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        output_path = self.output_dir / output_filename(out_format.value)

        self.logger.info(f"Muxing {video_stream.name} + {audio_stream.name} -> {output_path.name}")
        try:
            self.media.run_ffmpeg(
                self.build_args(video_stream, audio_stream, output_path, out_format),
                error_cls=MuxError,
                action="mux",
            )
        except MuxError:
            # never serve a truncated deliverable
            output_path.unlink(missing_ok=True)
            raise

        duration = self.media.probe_duration(output_path)
        self.logger.info(f"Final output ready: {output_path} ({duration:.2f}s)")
        return FinalOutput(
            path=output_path,
            filename=output_path.name,
            duration_sec=duration,
            scene_count=scene_count,
            segment_count=segment_count,
            orientation=orientation,
            quality=quality,
        )
