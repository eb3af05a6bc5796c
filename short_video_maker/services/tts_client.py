"""TTS (Text-to-Speech) client producing one narration asset per scene."""

from pathlib import Path
from typing import Any, Optional

import requests
from gtts import gTTS, gTTSError

from short_video_maker.core.config import Settings
from short_video_maker.core.errors import SynthesisError
from short_video_maker.models.schemas import NarrationAsset
from short_video_maker.services.media_ops import MediaToolkit
from short_video_maker.storage.workspace import RenderWorkspace
from short_video_maker.utils.io_utils import random_id
from short_video_maker.utils.text_utils import split_for_tts


class TTSClient:
    """TTS client supporting Google (gTTS) and ElevenLabs."""

    def __init__(self, settings: Settings, logger: Any, media: MediaToolkit, workspace: RenderWorkspace):
        """
        Initialize TTS client.

        Args:
            settings: Application settings
            logger: Logger instance
            media: Media toolkit used to join and probe audio
            workspace: Request workspace receiving the audio files
        """
        self.settings = settings
        self.logger = logger
        self.media = media
        self.workspace = workspace
        self.provider = self._detect_provider()

    def _detect_provider(self) -> str:
        """Pick the configured provider, falling back to Google without ElevenLabs credentials."""
        provider = (self.settings.tts_provider or "google").lower()
        if provider == "elevenlabs" and not self.settings.elevenlabs_api_key:
            self.logger.warning("TTS_PROVIDER=elevenlabs but ELEVENLABS_API_KEY is not set, using google")
            return "google"
        if provider not in ("google", "elevenlabs"):
            self.logger.warning(f"Unknown TTS provider '{provider}', using google")
            return "google"
        return provider

    def synthesize(self, text: str, language: Optional[str] = None) -> NarrationAsset:
        """
        Synthesize narration for one scene.

        Long text is split at punctuation, each chunk is synthesized in order,
        and the chunks are joined without re-encoding. The duration comes from
        probing the joined file.

        Args:
            text: Narration text
            language: Language tag (defaults to settings.tts_language)

        Returns:
            NarrationAsset for the joined audio

        Raises:
            SynthesisError: If the text is empty or any chunk fails
        """
        if not text or not text.strip():
            raise SynthesisError("Narration text cannot be empty")

        language = language or self.settings.tts_language
        chunks = split_for_tts(text, self.settings.tts_chunk_max_chars)
        batch_id = random_id()
        self.logger.info(
            f"Synthesizing {len(text)} characters in {len(chunks)} chunk(s) via {self.provider} (lang={language})"
        )

        part_paths: list[Path] = []
        for i, chunk in enumerate(chunks):
            part_path = self.workspace.path(f"vpart-{batch_id}-{i}", ".mp3")
            self._synthesize_chunk(chunk, language, part_path)
            part_paths.append(part_path)

        if len(part_paths) == 1:
            voice_path = part_paths[0]
        else:
            voice_path = self.workspace.path(f"voice-{batch_id}", ".mp3")
            self.media.concat_copy(part_paths, voice_path)

        duration = self.media.probe_duration(voice_path)
        self.logger.info(f"Narration ready: {voice_path.name} ({duration:.2f}s)")
        return NarrationAsset(path=voice_path, duration_sec=duration, chunk_count=len(part_paths))

    def _synthesize_chunk(self, chunk: str, language: str, output_path: Path) -> None:
        if self.provider == "elevenlabs":
            self._generate_elevenlabs(chunk, output_path)
        else:
            self._generate_google(chunk, language, output_path)

    def _generate_google(self, text: str, language: str, output_path: Path) -> None:
        """Synthesize one chunk with gTTS."""
        try:
            tts = gTTS(text=text, lang=language, tld=self.settings.gtts_tld)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            tts.save(str(output_path))
        except (gTTSError, ValueError) as e:
            raise SynthesisError(f"Google TTS failed for chunk of {len(text)} characters: {e}") from e

        if not output_path.is_file() or output_path.stat().st_size == 0:
            raise SynthesisError(f"Google TTS returned no audio for chunk of {len(text)} characters")

    def _generate_elevenlabs(self, text: str, output_path: Path) -> None:
        """Generate one chunk using the ElevenLabs API."""
        voice_id = self.settings.elevenlabs_voice_id
        if not voice_id:
            raise SynthesisError("ElevenLabs voice ID not configured")

        url = f"https://api.elevenlabs.io/v1/text-to-speech/{voice_id}"
        headers = {
            "Accept": "audio/mpeg",
            "Content-Type": "application/json",
            "xi-api-key": self.settings.elevenlabs_api_key,
        }
        data = {
            "text": text,
            "model_id": self.settings.elevenlabs_model_id,
            "voice_settings": {
                "stability": 0.5,
                "similarity_boost": 0.75,
            },
        }

        try:
            response = requests.post(url, json=data, headers=headers, timeout=self.settings.http_timeout_seconds)
        except requests.exceptions.RequestException as e:
            raise SynthesisError(f"Network error calling ElevenLabs API: {e}") from e

        if response.status_code != 200:
            raise SynthesisError(f"ElevenLabs API returned status {response.status_code}: {response.text[:200]}")
        if not response.content:
            raise SynthesisError("ElevenLabs API returned an empty body")

        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "wb") as f:
            f.write(response.content)
