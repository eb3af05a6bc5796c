"""Error taxonomy for the render pipeline.

Every failure aborts the whole request. Media tool errors carry only the
trailing lines of the tool's stderr so messages stay bounded.
"""

from typing import Optional


class VideoMakerError(Exception):
    """Base class for all pipeline failures."""

    # set by the pipeline when the failure happened while composing a scene
    scene_index: Optional[int] = None


class ConfigurationError(VideoMakerError):
    """A required credential or setting is missing."""


class ValidationError(VideoMakerError):
    """The caller supplied a malformed scene list or option."""


class RenderTimeoutError(VideoMakerError, TimeoutError):
    """The request budget was exhausted before work could start."""


class ProviderError(VideoMakerError):
    """The stock footage provider answered with an error."""


class NoResultsError(ProviderError):
    """The stock footage provider returned nothing usable for a query."""

    def __init__(self, query: str):
        super().__init__(f'No stock videos for "{query}"')
        self.query = query


class SynthesisError(VideoMakerError):
    """A speech synthesis call failed."""


class DownloadError(VideoMakerError):
    """Fetching a remote asset failed."""


class MediaToolError(VideoMakerError):
    """An ffmpeg or ffprobe invocation failed."""

    def __init__(self, message: str, returncode: Optional[int] = None, log_tail: str = ""):
        detail = f"{message}:\n{log_tail}" if log_tail else message
        super().__init__(detail)
        self.returncode = returncode
        self.log_tail = log_tail


class RenderError(MediaToolError):
    """Rendering a video segment failed."""


class ConcatenationError(MediaToolError):
    """Joining segments or narration files failed."""


class MuxError(MediaToolError):
    """Combining the video and audio streams failed."""


class ProbeError(MediaToolError):
    """Reading media metadata failed."""
