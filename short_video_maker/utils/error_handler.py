"""Error Handler - operator-facing messages for failed renders."""

from typing import Optional

from short_video_maker.core import errors


def format_error_message(
    error: Exception,
    request_id: Optional[str] = None,
    scene_count: Optional[int] = None,
    suggestion: Optional[str] = None,
) -> str:
    """
    Describe a failed render in one block for the log.

    The first line names the request and, when the failure happened while
    composing a scene, which one. Media tool failures add the tool's exit
    code; their stderr tail is already part of the message.

    Args:
        error: The exception that aborted the render
        request_id: Render request id
        scene_count: Scenes in the request, shown next to the failing scene
        suggestion: Optional hint for the operator

    Returns:
        Formatted multi-line message
    """
    where = f"Render {request_id}" if request_id else "Render"
    scene_index = getattr(error, "scene_index", None)
    if scene_index is not None:
        where += f", scene {scene_index + 1}" + (f"/{scene_count}" if scene_count else "")

    lines = [f"❌ {where} failed: {type(error).__name__}"]
    returncode = getattr(error, "returncode", None)
    if isinstance(error, errors.MediaToolError) and returncode is not None:
        lines[0] += f" (exit {returncode})"
    lines.append(f"   {error}")
    if suggestion:
        lines.append(f"   💡 {suggestion}")
    return "\n".join(lines)


def get_error_suggestion(error: Exception) -> Optional[str]:
    """
    Get a suggestion for how to resolve a pipeline failure.

    Args:
        error: The exception

    Returns:
        Suggestion string or None
    """
    if isinstance(error, errors.ConfigurationError):
        return "Check PEXELS_API_KEY (and TTS credentials) in the .env file."
    if isinstance(error, errors.NoResultsError):
        return "Try a broader search term for this scene."
    if isinstance(error, errors.ProviderError):
        error_msg = str(error).lower()
        if "429" in error_msg:
            return "Pexels rate limit exceeded. Wait a few minutes and try again."
        return "Stock footage search failed. Check the API key and network access."
    if isinstance(error, errors.SynthesisError):
        return "Speech synthesis failed. Check the TTS provider settings and network access."
    if isinstance(error, errors.DownloadError):
        return "A remote file could not be fetched. Check network access."
    if isinstance(error, errors.MediaToolError):
        return "ffmpeg failed. Check that ffmpeg/ffprobe are installed and the caption font exists."
    if isinstance(error, errors.RenderTimeoutError):
        return "The server is busy. Retry later or raise REQUEST_BUDGET_SECONDS."
    return None
