"""Text utility functions for narration and captions."""

# This module is part of short_video_maker.utils package

TTS_BREAK_CHARS = ".!?,;:"

# Order matters: the backslash must be escaped first.
_DRAWTEXT_ESCAPES = (
    ("\\", "\\\\"),
    (":", "\\:"),
    ("'", "\\'"),
    ("%", "\\%"),
    (",", "\\,"),
    ("[", "\\["),
    ("]", "\\]"),
    ("\n", "\\n"),
)


def split_for_tts(text: str, max_len: int = 180) -> list[str]:
    """
    Split narration into chunks a synthesis provider accepts in one call.

    Each cut is made right after the last punctuation mark in ``.!?,;:`` at or
    before ``max_len``. When the window holds no such mark the whole remainder
    becomes one chunk, so words are never cut in half.

    Args:
        text: Narration text.
        max_len: Maximum chunk length in characters.

    Returns:
        Ordered, non-empty list of stripped chunks.
    """
    remaining = (text or "").strip()
    chunks: list[str] = []

    while len(remaining) > max_len:
        window = remaining[:max_len]
        cut = max(window.rfind(ch) for ch in TTS_BREAK_CHARS)
        if cut < 0:
            break
        chunk = remaining[: cut + 1].strip()
        if chunk:
            chunks.append(chunk)
        remaining = remaining[cut + 1 :].strip()

    if remaining:
        chunks.append(remaining)
    return chunks or [text]


def escape_drawtext(text: str) -> str:
    """
    Escape text for ffmpeg's drawtext ``text='...'`` literal.

    Args:
        text: Raw caption text.

    Returns:
        Escaped caption text.
    """
    escaped = text or ""
    for raw, replacement in _DRAWTEXT_ESCAPES:
        escaped = escaped.replace(raw, replacement)
    return escaped


def caption_font_size(escaped_text: str) -> int:
    """Pick a caption font size that shrinks as the caption grows."""
    if len(escaped_text) > 220:
        return 28
    if len(escaped_text) > 120:
        return 32
    return 36


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp ``value`` into ``[lower, upper]``."""
    return max(lower, min(upper, value))
