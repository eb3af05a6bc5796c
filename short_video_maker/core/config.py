"""Application configuration using pydantic-settings."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be configured via environment variables or a .env file.
    One instance is built at startup and passed down to every service.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================================================
    # Application Settings
    # ========================================================================
    app_name: str = Field(default="Short Video Maker", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    log_file: Optional[str] = Field(default=None, description="Optional log file path (rotated)")
    log_json: bool = Field(default=False, description="Write the log file as JSON lines")

    # ========================================================================
    # Security
    # ========================================================================
    webhook_secret: Optional[str] = Field(
        default=None,
        description="Shared secret expected in the x-webhook-secret header. Requests are rejected when unset.",
    )

    # ========================================================================
    # Storage Settings
    # ========================================================================
    output_dir: str = Field(default="/tmp/out", description="Directory where finished videos are written and served from")
    work_dir: str = Field(default="/tmp", description="Parent directory for per-request working directories")
    keep_intermediates: bool = Field(
        default=False,
        description="Keep per-request working directories after the request finishes (debugging)",
    )

    # ========================================================================
    # Stock Footage (Pexels)
    # ========================================================================
    pexels_api_key: Optional[str] = Field(default=None, description="Pexels API key")
    pexels_api_url: str = Field(default="https://api.pexels.com", description="Pexels API base URL")
    pexels_page_size: int = Field(default=25, description="Number of candidate videos requested per search")
    http_timeout_seconds: float = Field(default=30.0, description="Timeout for provider HTTP calls")
    download_chunk_bytes: int = Field(default=1024 * 1024, description="Chunk size for streamed downloads")

    # ========================================================================
    # TTS (Text-to-Speech) Settings
    # ========================================================================
    tts_provider: str = Field(default="google", description="TTS provider: 'google' or 'elevenlabs'")
    tts_language: str = Field(default="en", description="Default narration language tag")
    tts_chunk_max_chars: int = Field(default=180, description="Maximum characters per synthesis call")
    gtts_tld: str = Field(default="com", description="Google host suffix used by gTTS (e.g. com, co.uk)")
    elevenlabs_api_key: Optional[str] = Field(default=None, description="ElevenLabs API key")
    elevenlabs_voice_id: Optional[str] = Field(default=None, description="ElevenLabs voice ID")
    elevenlabs_model_id: str = Field(default="eleven_turbo_v2", description="ElevenLabs model ID")

    # ========================================================================
    # Scene Timing
    # ========================================================================
    min_scene_seconds: float = Field(default=3.0, description="Shortest scene video, regardless of narration length")
    max_scene_seconds: float = Field(default=60.0, description="Longest scene video, regardless of narration length")
    default_min_clip_seconds: float = Field(default=3.0, description="Default minimum take per footage clip")
    max_clips_per_scene: Optional[int] = Field(
        default=None, description="Default cap on footage clips per scene (None: use as many as the target needs)"
    )
    min_take_seconds: float = Field(
        default=0.75,
        description="Takes contributing this much or less are skipped; coverage stops once this little remains",
    )
    min_segment_seconds: float = Field(default=0.6, description="Floor for a rendered segment duration")
    max_scenes: int = Field(default=60, description="Maximum scenes accepted per request")
    default_search_query: str = Field(default="nature", description="Footage query when a scene has no text or search")

    # ========================================================================
    # Media Tooling (ffmpeg)
    # ========================================================================
    ffmpeg_binary: str = Field(default="ffmpeg", description="ffmpeg executable")
    ffprobe_binary: str = Field(default="ffprobe", description="ffprobe executable")
    ffmpeg_threads: int = Field(default=1, description="Worker threads per ffmpeg process")
    output_fps: int = Field(default=30, description="Frame rate of every rendered segment")
    audio_bitrate: str = Field(default="160k", description="AAC bitrate of the muxed narration track")
    caption_font_path: str = Field(
        default="/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        description="TrueType font used for captions",
    )
    log_tail_lines: int = Field(default=12, description="Trailing stderr lines kept in media error messages")
    verify_concat_uniformity: bool = Field(
        default=True,
        description="Probe video stream formats before copy concatenation and reject mismatches",
    )

    # ========================================================================
    # Request Budget
    # ========================================================================
    request_budget_seconds: float = Field(default=900.0, description="Soft wall-clock budget per request")
    budget_check_between_scenes: bool = Field(
        default=False,
        description="Also check the budget before each scene (default: admission check only)",
    )

    # ========================================================================
    # Server
    # ========================================================================
    host: str = Field(default="0.0.0.0", description="HTTP bind address")
    port: int = Field(default=8080, description="HTTP port")


# Global settings instance
settings = Settings()
