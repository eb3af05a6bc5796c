"""Media operations - the single place where ffmpeg and ffprobe are invoked."""

import json
import math
import subprocess
from pathlib import Path
from typing import Any, Optional, Sequence

from short_video_maker.core.config import Settings
from short_video_maker.core.errors import ConcatenationError, MediaToolError, ProbeError


class MediaToolkit:
    """
    Narrow facade over ffmpeg/ffprobe.

    Every ffmpeg call goes through ``run_ffmpeg`` so thread pinning and
    stderr tail capture are applied uniformly.
    """

    def __init__(self, settings: Settings, logger: Any):
        """
        Initialize media toolkit.

        Args:
            settings: Application settings
            logger: Logger instance
        """
        self.settings = settings
        self.logger = logger
        self.ffmpeg = settings.ffmpeg_binary
        self.ffprobe = settings.ffprobe_binary
        self.threads = settings.ffmpeg_threads
        self.tail_lines = settings.log_tail_lines

    def log_tail(self, stderr: Optional[str]) -> str:
        """Return the last configured lines of a diagnostic stream."""
        lines = (stderr or "").rstrip("\n").split("\n")
        return "\n".join(lines[-self.tail_lines :])

    def run_ffmpeg(
        self,
        args: Sequence[str],
        error_cls: type[MediaToolError] = MediaToolError,
        action: str = "ffmpeg",
    ) -> None:
        """
        Run ffmpeg with the given arguments; the last argument is the output path.

        Args:
            args: Input/filter/codec arguments ending with the output path
            error_cls: Error raised on failure
            action: Short description used in log and error messages

        Raises:
            error_cls: On a missing binary or non-zero exit
        """
        *options, output = [str(a) for a in args]
        cmd = [self.ffmpeg, "-hide_banner", "-y", *options, "-threads", str(self.threads), output]
        self.logger.debug(f"Running {action}: {' '.join(cmd)}")

        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except OSError as e:
            raise error_cls(f"{action} could not start {self.ffmpeg}: {e}") from e

        if result.returncode != 0:
            raise error_cls(
                f"{action}: ffmpeg exited {result.returncode}",
                returncode=result.returncode,
                log_tail=self.log_tail(result.stderr),
            )

    def _ffprobe_json(self, args: Sequence[str], path: Path) -> dict[str, Any]:
        cmd = [self.ffprobe, "-v", "error", "-threads", str(self.threads), "-print_format", "json", *args, str(path)]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except OSError as e:
            raise ProbeError(f"Could not start {self.ffprobe}: {e}") from e

        if result.returncode != 0:
            raise ProbeError(
                f"ffprobe exited {result.returncode} for {path.name}",
                returncode=result.returncode,
                log_tail=self.log_tail(result.stderr),
            )
        try:
            return json.loads(result.stdout or "{}")
        except json.JSONDecodeError as e:
            raise ProbeError(f"ffprobe returned invalid JSON for {path.name}: {e}") from e

    def probe_duration(self, path: Path) -> float:
        """
        Measure a media file's duration from its container.

        Args:
            path: Media file

        Returns:
            Duration in seconds (0.0 when the container does not report one)
        """
        data = self._ffprobe_json(["-show_format"], path)
        try:
            duration = float(data.get("format", {}).get("duration", 0) or 0)
        except (TypeError, ValueError):
            return 0.0
        return duration if math.isfinite(duration) else 0.0

    def probe_video_format(self, path: Path) -> tuple[Any, ...]:
        """
        Read the first video stream's (codec, width, height, pixel format).

        Args:
            path: Video file

        Returns:
            Tuple identifying the encoding profile
        """
        data = self._ffprobe_json(["-select_streams", "v:0", "-show_streams"], path)
        streams = data.get("streams") or []
        if not streams:
            raise ProbeError(f"No video stream in {path.name}")
        stream = streams[0]
        return (stream.get("codec_name"), stream.get("width"), stream.get("height"), stream.get("pix_fmt"))

    def concat_copy(
        self,
        inputs: Sequence[Path],
        output_path: Path,
        error_cls: type[MediaToolError] = ConcatenationError,
    ) -> Path:
        """
        Join already-encoded files with the concat demuxer, without re-encoding.

        Args:
            inputs: Files in playback order (must share one encoding profile)
            output_path: Joined file
            error_cls: Error raised on failure

        Returns:
            The output path
        """
        list_path = output_path.with_suffix(".txt")
        list_path.write_text("\n".join(_concat_entry(p) for p in inputs) + "\n", encoding="utf-8")
        self.run_ffmpeg(
            ["-f", "concat", "-safe", "0", "-i", list_path, "-c", "copy", output_path],
            error_cls=error_cls,
            action=f"concat of {len(inputs)} files",
        )
        return output_path


def _concat_entry(path: Path) -> str:
    # concat demuxer quoting: close the quote, emit an escaped quote, reopen
    quoted = str(Path(path).resolve()).replace("'", "'\\''")
    return f"file '{quoted}'"
