"""Stock footage client for the Pexels video search API."""

from typing import Any, Optional

import requests

from short_video_maker.core.config import Settings
from short_video_maker.core.errors import ConfigurationError, NoResultsError, ProviderError
from short_video_maker.models.schemas import FootageCandidate, Orientation


def pick_video_file(video: dict[str, Any], orientation: Orientation) -> Optional[dict[str, Any]]:
    """
    Pick the best file of one Pexels result for an orientation.

    Files whose aspect matches the orientation are preferred; when none match
    the full list is used. The highest resolution (width x height) wins.

    Args:
        video: One entry of the Pexels ``videos`` array
        orientation: Requested orientation

    Returns:
        The chosen ``video_files`` entry, or None if the result has no files
    """
    files = [f for f in (video.get("video_files") or []) if isinstance(f, dict)]

    def dims(f: dict[str, Any]) -> tuple[int, int]:
        return int(f.get("width") or 0), int(f.get("height") or 0)

    if orientation == Orientation.PORTRAIT:
        matching = [f for f in files if dims(f)[1] >= dims(f)[0]]
    else:
        matching = [f for f in files if dims(f)[0] >= dims(f)[1]]

    pool = matching or files
    if not pool:
        return None
    return max(pool, key=lambda f: dims(f)[0] * dims(f)[1])


class PexelsClient:
    """Searches Pexels and returns ranked footage candidates."""

    def __init__(self, settings: Settings, logger: Any):
        """
        Initialize the Pexels client.

        Args:
            settings: Application settings
            logger: Logger instance
        """
        self.settings = settings
        self.logger = logger
        self.api_key = settings.pexels_api_key
        self.base_url = settings.pexels_api_url.rstrip("/")

    def search(
        self,
        query: str,
        page_size: Optional[int] = None,
        orientation: Orientation = Orientation.PORTRAIT,
    ) -> list[FootageCandidate]:
        """
        Search stock videos and rank them longest first.

        Args:
            query: Search term
            page_size: Results requested (defaults to settings.pexels_page_size)
            orientation: Orientation used to choose each result's file

        Returns:
            Candidates sorted by source duration, descending

        Raises:
            ConfigurationError: If no API key is configured
            ProviderError: On transport failure or non-success status
            NoResultsError: If nothing usable comes back
        """
        if not self.api_key:
            raise ConfigurationError("Missing PEXELS_API_KEY")

        orientation = Orientation(orientation)
        page_size = page_size or self.settings.pexels_page_size
        self.logger.info(f"Searching Pexels for '{query}' (per_page={page_size}, orientation={orientation.value})")

        try:
            response = requests.get(
                f"{self.base_url}/videos/search",
                params={"query": query, "per_page": page_size},
                headers={"Authorization": self.api_key},
                timeout=self.settings.http_timeout_seconds,
            )
        except requests.exceptions.RequestException as e:
            raise ProviderError(f"Network error calling Pexels API: {e}") from e

        if not response.ok:
            raise ProviderError(f"Pexels API error {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise ProviderError(f"Pexels API returned invalid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise ProviderError(f"Pexels API returned {type(payload).__name__} instead of an object")
        videos = payload.get("videos")

        if not isinstance(videos, list) or not videos:
            raise NoResultsError(query)

        candidates = []
        for video in videos:
            if not isinstance(video, dict):
                continue
            chosen = pick_video_file(video, orientation)
            if not chosen or not chosen.get("link"):
                continue
            candidates.append(
                FootageCandidate(
                    url=chosen["link"],
                    width=int(chosen.get("width") or 0),
                    height=int(chosen.get("height") or 0),
                    duration_sec=float(video.get("duration") or 0),
                    video_id=str(video["id"]) if video.get("id") is not None else None,
                )
            )

        if not candidates:
            raise NoResultsError(query)

        candidates.sort(key=lambda c: c.duration_sec, reverse=True)
        self.logger.info(
            f"Found {len(candidates)} candidates for '{query}' (longest {candidates[0].duration_sec:.0f}s)"
        )
        return candidates
