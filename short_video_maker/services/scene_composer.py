"""Scene Composer - turns one scene request into a narrated scene video."""

from typing import Any, Optional, Sequence

from short_video_maker.core.config import Settings
from short_video_maker.models.schemas import (
    CaptionPosition,
    FootageCandidate,
    Orientation,
    QualityTier,
    SceneAsset,
    SceneRequest,
)
from short_video_maker.services.footage_client import PexelsClient
from short_video_maker.services.media_ops import MediaToolkit
from short_video_maker.services.segment_renderer import SegmentRenderer
from short_video_maker.services.tts_client import TTSClient
from short_video_maker.storage.workspace import RenderWorkspace
from short_video_maker.utils.text_utils import clamp


def plan_takes(
    candidates: Sequence[FootageCandidate],
    target_sec: float,
    min_clip_sec: float,
    max_clips: Optional[int] = None,
    min_take_sec: float = 0.75,
) -> list[tuple[FootageCandidate, float]]:
    """
    Greedily choose footage takes that cover ``target_sec``.

    Candidates are walked in rank order. Each contributes at least
    ``min_clip_sec`` (never more than what remains) and at most its own
    duration. Takes of ``min_take_sec`` or less are skipped, and the walk stops
    once that little time remains or ``max_clips`` takes are chosen. If nothing
    was chosen, the best-ranked candidate is used once.

    Args:
        candidates: Ranked footage, best first
        target_sec: Visual duration to cover
        min_clip_sec: Minimum seconds per take
        max_clips: Maximum number of takes (None for no cap)
        min_take_sec: Contribution threshold

    Returns:
        (candidate, take seconds) pairs in playback order
    """
    if not candidates:
        return []

    takes: list[tuple[FootageCandidate, float]] = []
    remaining = target_sec
    for candidate in candidates:
        if remaining <= min_take_sec:
            break
        if max_clips is not None and len(takes) >= max_clips:
            break
        take = min(max(min_clip_sec, min(candidate.duration_sec, remaining)), remaining)
        if take <= min_take_sec:
            continue
        takes.append((candidate, take))
        remaining -= take

    if not takes:
        best = candidates[0]
        takes.append((best, min(target_sec, max(min_clip_sec, best.duration_sec))))
    return takes


class SceneComposer:
    """Composes narration and footage into one scene asset."""

    def __init__(
        self,
        settings: Settings,
        logger: Any,
        tts_client: TTSClient,
        footage_client: PexelsClient,
        segment_renderer: SegmentRenderer,
        media: MediaToolkit,
        workspace: RenderWorkspace,
    ):
        """
        Initialize scene composer.

        Args:
            settings: Application settings
            logger: Logger instance
            tts_client: Narration synthesizer
            footage_client: Stock footage search
            segment_renderer: Segment renderer
            media: Media toolkit (segment concatenation)
            workspace: Request workspace
        """
        self.settings = settings
        self.logger = logger
        self.tts_client = tts_client
        self.footage_client = footage_client
        self.segment_renderer = segment_renderer
        self.media = media
        self.workspace = workspace

    def compose(
        self,
        scene: SceneRequest,
        orientation: Orientation,
        caption_position: CaptionPosition,
        quality: QualityTier,
        index: int = 0,
    ) -> SceneAsset:
        """
        Build one scene: narration first, then footage sized to it.

        Args:
            scene: Scene request
            orientation: Target orientation
            caption_position: Caption anchor
            quality: Quality tier
            index: Scene position in the request

        Returns:
            SceneAsset pairing the scene video with its narration
        """
        self.logger.info(f"Scene {index}: synthesizing narration")
        narration = self.tts_client.synthesize(scene.text, scene.lang)

        target_sec = clamp(
            narration.duration_sec, self.settings.min_scene_seconds, self.settings.max_scene_seconds
        )
        self.logger.info(f"Scene {index}: narration {narration.duration_sec:.2f}s -> visual target {target_sec:.2f}s")

        query = scene.search_query(self.settings.default_search_query)
        candidates = self.footage_client.search(query, orientation=orientation)

        min_clip_sec = (
            scene.min_clip_sec if scene.min_clip_sec is not None else self.settings.default_min_clip_seconds
        )
        max_clips = scene.max_clips if scene.max_clips is not None else self.settings.max_clips_per_scene
        takes = plan_takes(
            candidates,
            target_sec,
            min_clip_sec,
            max_clips=max_clips,
            min_take_sec=self.settings.min_take_seconds,
        )
        self.logger.info(
            f"Scene {index}: {len(takes)} take(s) "
            f"[{', '.join(f'{take:.2f}s' for _, take in takes)}] from {len(candidates)} candidates"
        )

        segments = [
            self.segment_renderer.render(
                candidate,
                take,
                orientation,
                quality,
                scene.text,
                caption_position,
                label=f"{index}-{take_index}",
            )
            for take_index, (candidate, take) in enumerate(takes)
        ]

        if len(segments) == 1:
            video_path = segments[0].path
        else:
            video_path = self.workspace.path(f"scene-{index}", ".mp4")
            self.media.concat_copy([s.path for s in segments], video_path)

        return SceneAsset(
            index=index,
            video_path=video_path,
            narration=narration,
            segments=segments,
            target_sec=target_sec,
        )
