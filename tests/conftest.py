"""Shared pytest fixtures and configuration."""

import json
import subprocess
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from gtts import gTTSError

from short_video_maker.core.config import Settings
from short_video_maker.core.logging_config import get_logger


@pytest.fixture
def settings(tmp_path):
    """Create test settings instance with throwaway directories."""
    return Settings(
        _env_file=None,
        output_dir=str(tmp_path / "out"),
        work_dir=str(tmp_path / "work"),
        pexels_api_key="test-pexels-key",
        webhook_secret="test-secret",
        tts_provider="google",
        request_budget_seconds=600.0,
    )


@pytest.fixture
def logger():
    """Create test logger instance."""
    return get_logger(__name__)


def pexels_video(video_id, duration, files):
    """Build one Pexels search result."""
    return {
        "id": video_id,
        "duration": duration,
        "video_files": [
            {"link": f"https://videos.example/{video_id}/{w}x{h}.mp4", "width": w, "height": h}
            for w, h in files
        ],
    }


def stream_response(body=b"\x00media-bytes", status_code=200):
    """A requests response usable as a streaming context manager."""
    response = MagicMock()
    response.ok = 200 <= status_code < 300
    response.status_code = status_code
    response.reason = "OK" if response.ok else "Error"
    response.iter_content.return_value = [body] if body else []
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    return response


def json_response(payload, status_code=200):
    """A requests response carrying JSON."""
    response = MagicMock()
    response.ok = 200 <= status_code < 300
    response.status_code = status_code
    response.json.return_value = payload
    return response


class FakeMediaTools:
    """
    Stands in for ffmpeg/ffprobe at the subprocess boundary.

    ffmpeg calls write a placeholder output file; ffprobe answers with the
    configured narration duration and a uniform video stream profile.
    """

    def __init__(self, settings, narration_seconds=2.0, video_size=(480, 852)):
        self.settings = settings
        self.narration_seconds = narration_seconds
        self.video_size = video_size
        self.calls: list[list[str]] = []
        self.fail_on: str = ""

    @property
    def ffmpeg_calls(self):
        return [c for c in self.calls if c[0] == self.settings.ffmpeg_binary]

    def __call__(self, cmd, **kwargs):
        self.calls.append(list(cmd))
        if cmd[0] == self.settings.ffprobe_binary:
            return self._probe(cmd)
        if self.fail_on and self.fail_on in " ".join(cmd):
            return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="line\n" * 20 + "boom: invalid data")
        output = Path(cmd[-1])
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(b"encoded")
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    def _probe(self, cmd):
        if "-show_streams" in cmd:
            width, height = self.video_size
            payload = {"streams": [{"codec_name": "h264", "width": width, "height": height, "pix_fmt": "yuv420p"}]}
        else:
            payload = {"format": {"duration": str(self.narration_seconds)}}
        return subprocess.CompletedProcess(cmd, 0, stdout=json.dumps(payload), stderr="")


class FakeGTTS:
    """
    Stands in for the gTTS class: each instance saves its text as the audio bytes.

    Texts containing ``fail_on`` raise gTTSError on save.
    """

    def __init__(self):
        self.calls: list[dict] = []
        self.fail_on: str = ""

    @property
    def texts(self):
        return [c["text"] for c in self.calls]

    def __call__(self, text, lang="en", tld="com", **kwargs):
        self.calls.append({"text": text, "lang": lang, "tld": tld})
        fail = bool(self.fail_on) and self.fail_on in text

        speech = MagicMock()

        def save(path):
            if fail:
                raise gTTSError("503 (Service Unavailable) from TTS API")
            Path(path).write_bytes(text.encode("utf-8"))

        speech.save.side_effect = save
        return speech


@pytest.fixture
def fake_gtts():
    """gTTS double; patch it over short_video_maker.services.tts_client.gTTS."""
    return FakeGTTS()


@pytest.fixture
def fake_media(settings):
    """Fake ffmpeg/ffprobe runner; patch it over subprocess.run."""
    return FakeMediaTools(settings)


@pytest.fixture
def make_pexels_video():
    return pexels_video


@pytest.fixture
def make_stream_response():
    return stream_response


@pytest.fixture
def make_json_response():
    return json_response
