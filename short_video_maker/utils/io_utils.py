"""I/O utility functions for file naming and streamed downloads."""

# This module is part of short_video_maker.utils package

import secrets
from pathlib import Path
from typing import Any, Optional

import requests

from short_video_maker.core.errors import DownloadError


def random_id(nbytes: int = 5) -> str:
    """
    Return a random hex identifier for namespacing files.

    Args:
        nbytes: Number of random bytes (the id is twice as many hex characters).

    Returns:
        Hex string.
    """
    return secrets.token_hex(nbytes)


def output_filename(out_format: str) -> str:
    """Build the public file name of a finished video."""
    return f"video-{random_id(6)}.{out_format}"


def download_to(
    url: str,
    dest_path: Path,
    timeout: float = 30.0,
    chunk_bytes: int = 1024 * 1024,
    headers: Optional[dict[str, str]] = None,
    params: Optional[dict[str, Any]] = None,
) -> Path:
    """
    Stream a remote file to disk without buffering it in memory.

    Args:
        url: File URL
        dest_path: Destination path
        timeout: Connect/read timeout in seconds
        chunk_bytes: Size of each chunk written to disk
        headers: Optional request headers
        params: Optional query parameters

    Returns:
        The destination path.

    Raises:
        DownloadError: On transport failure, non-2xx status or empty body.
    """
    dest_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with requests.get(url, headers=headers, params=params, stream=True, timeout=timeout) as response:
            if not response.ok:
                raise DownloadError(f"Download failed {response.status_code} {response.reason}: {url}")
            written = 0
            with open(dest_path, "wb") as f:
                for chunk in response.iter_content(chunk_size=chunk_bytes):
                    if chunk:
                        f.write(chunk)
                        written += len(chunk)
    except requests.exceptions.RequestException as e:
        raise DownloadError(f"Network error downloading {url}: {e}") from e

    if written == 0:
        raise DownloadError(f"No response body to download: {url}")
    return dest_path
