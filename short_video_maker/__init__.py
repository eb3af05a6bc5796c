"""Short Video Maker - narrated stock-footage shorts assembled with ffmpeg."""

__version__ = "1.0.0"
