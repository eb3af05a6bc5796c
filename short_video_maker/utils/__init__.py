"""Utility functions for Short Video Maker."""

from short_video_maker.utils.io_utils import download_to, output_filename, random_id
from short_video_maker.utils.text_utils import caption_font_size, clamp, escape_drawtext, split_for_tts

__all__ = [
    "download_to",
    "output_filename",
    "random_id",
    "caption_font_size",
    "clamp",
    "escape_drawtext",
    "split_for_tts",
]
