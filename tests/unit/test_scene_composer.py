"""Tests for Scene Composer and take planning."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from short_video_maker.core.errors import NoResultsError
from short_video_maker.models.schemas import (
    CaptionPosition,
    FootageCandidate,
    NarrationAsset,
    Orientation,
    QualityTier,
    SceneRequest,
    VideoSegment,
)
from short_video_maker.services.scene_composer import SceneComposer, plan_takes
from short_video_maker.storage.workspace import RenderWorkspace


def candidate(duration, video_id=None):
    return FootageCandidate(
        url=f"https://videos.example/{video_id or duration}.mp4",
        width=720,
        height=1280,
        duration_sec=duration,
        video_id=video_id,
    )


# ============================================================================
# plan_takes
# ============================================================================


def test_single_long_clip_covers_target():
    takes = plan_takes([candidate(30)], target_sec=8.0, min_clip_sec=3.0, max_clips=3)

    assert [t for _, t in takes] == [8.0]


def test_short_clips_are_combined():
    """Several clips cover a target longer than any one of them."""
    takes = plan_takes([candidate(6), candidate(5), candidate(4)], target_sec=14.0, min_clip_sec=3.0, max_clips=3)

    assert [t for _, t in takes] == [6.0, 5.0, 3.0]
    assert sum(t for _, t in takes) == pytest.approx(14.0)


def test_min_clip_extends_short_candidates_but_not_past_remaining():
    takes = plan_takes([candidate(1), candidate(1)], target_sec=5.0, min_clip_sec=3.0, max_clips=3)

    assert [t for _, t in takes] == [3.0, 2.0]


def test_max_clips_caps_takes():
    takes = plan_takes([candidate(2)] * 10, target_sec=20.0, min_clip_sec=2.0, max_clips=3)

    assert len(takes) == 3


def test_stops_when_remaining_is_tiny():
    """Once 0.75s or less remains, no further clip is used."""
    takes = plan_takes([candidate(9.5), candidate(10)], target_sec=10.0, min_clip_sec=0.5, max_clips=5)

    assert [t for _, t in takes] == [9.5]


def test_never_selects_tiny_contributions():
    takes = plan_takes(
        [candidate(0.5), candidate(0.7), candidate(4)], target_sec=4.0, min_clip_sec=0.0, max_clips=5
    )

    assert all(t > 0.75 for _, t in takes)
    assert [c.duration_sec for c, _ in takes] == [4.0]


def test_fallback_uses_best_candidate():
    """If the greedy walk selects nothing, the best-ranked clip is used once."""
    pool = [candidate(0.5, "a"), candidate(0.4, "b")]

    takes = plan_takes(pool, target_sec=3.0, min_clip_sec=0.0, max_clips=3)

    assert len(takes) == 1
    assert takes[0][0].video_id == "a"
    assert takes[0][1] == pytest.approx(0.5)


def test_fallback_never_exceeds_target():
    takes = plan_takes([candidate(0.2)], target_sec=3.0, min_clip_sec=10.0, max_clips=0)

    assert takes[0][1] == pytest.approx(3.0)


def test_empty_pool_yields_nothing():
    assert plan_takes([], target_sec=5.0, min_clip_sec=3.0) == []


# ============================================================================
# SceneComposer
# ============================================================================


@pytest.fixture
def workspace(settings, logger):
    with RenderWorkspace(settings.work_dir, logger) as ws:
        yield ws


def build_composer(settings, logger, workspace, narration_seconds, pool):
    tts_client = MagicMock()
    tts_client.synthesize.return_value = NarrationAsset(
        path=workspace.root / "voice.mp3", duration_sec=narration_seconds
    )
    footage_client = MagicMock()
    footage_client.search.return_value = pool

    renderer = MagicMock()

    def render(cand, take, orientation, quality, caption, position, label="seg"):
        return VideoSegment(
            path=workspace.root / f"seg-{label}.mp4",
            duration_sec=max(0.6, take),
            width=480,
            height=852,
            source_url=cand.url,
        )

    renderer.render.side_effect = render
    media = MagicMock()
    composer = SceneComposer(settings, logger, tts_client, footage_client, renderer, media, workspace)
    return composer, tts_client, footage_client, renderer, media


def test_compose_short_narration_is_padded_to_min_scene(settings, logger, workspace):
    """A 2-second narration still yields a 3-second scene."""
    composer, _, _, renderer, media = build_composer(settings, logger, workspace, 2.0, [candidate(30)])

    asset = composer.compose(
        SceneRequest(text="Hello world", search="ocean"),
        Orientation.PORTRAIT,
        CaptionPosition.BOTTOM,
        QualityTier.LOW,
    )

    assert asset.target_sec == 3.0
    assert sum(s.duration_sec for s in asset.segments) == pytest.approx(3.0)
    assert asset.video_path == asset.segments[0].path
    media.concat_copy.assert_not_called()


def test_compose_long_narration_is_capped(settings, logger, workspace):
    """A 90-second narration yields at most a 60-second scene."""
    pool = [candidate(25), candidate(20), candidate(18)]
    composer, _, _, _, media = build_composer(settings, logger, workspace, 90.0, pool)

    asset = composer.compose(
        SceneRequest(text="Long story"), Orientation.PORTRAIT, CaptionPosition.BOTTOM, QualityTier.LOW
    )

    assert asset.target_sec == 60.0
    assert sum(s.duration_sec for s in asset.segments) <= 60.0
    assert len(asset.segments) == 3
    media.concat_copy.assert_called_once()
    joined_inputs, joined_output = media.concat_copy.call_args.args
    assert joined_inputs == [s.path for s in asset.segments]
    assert asset.video_path == joined_output


def test_compose_search_falls_back_to_text(settings, logger, workspace):
    composer, tts_client, footage_client, _, _ = build_composer(settings, logger, workspace, 5.0, [candidate(30)])

    composer.compose(
        SceneRequest(text="Mountain sunrise", lang="es"),
        Orientation.LANDSCAPE,
        CaptionPosition.TOP,
        QualityTier.HIGH,
    )

    tts_client.synthesize.assert_called_once_with("Mountain sunrise", "es")
    assert footage_client.search.call_args.args[0] == "Mountain sunrise"
    assert footage_client.search.call_args.kwargs["orientation"] == Orientation.LANDSCAPE


def test_compose_uses_same_caption_for_every_segment(settings, logger, workspace):
    pool = [candidate(4), candidate(4), candidate(4)]
    composer, _, _, renderer, _ = build_composer(settings, logger, workspace, 11.0, pool)

    composer.compose(
        SceneRequest(text="Caption me", minClipSec=2), Orientation.PORTRAIT, CaptionPosition.CENTER, QualityTier.LOW
    )

    captions = {(c.args[4], c.args[5]) for c in renderer.render.call_args_list}
    assert captions == {("Caption me", CaptionPosition.CENTER)}


def test_compose_respects_scene_max_clips(settings, logger, workspace):
    pool = [candidate(2)] * 10
    composer, _, _, renderer, _ = build_composer(settings, logger, workspace, 20.0, pool)

    composer.compose(
        SceneRequest(text="Many clips", minClipSec=2, maxClips=2),
        Orientation.PORTRAIT,
        CaptionPosition.BOTTOM,
        QualityTier.LOW,
    )

    assert renderer.render.call_count == 2


def test_compose_propagates_no_results(settings, logger, workspace):
    composer, _, footage_client, renderer, _ = build_composer(settings, logger, workspace, 5.0, [])
    footage_client.search.side_effect = NoResultsError("ocean")

    with pytest.raises(NoResultsError):
        composer.compose(
            SceneRequest(text="Hello", search="ocean"), Orientation.PORTRAIT, CaptionPosition.BOTTOM, QualityTier.LOW
        )

    renderer.render.assert_not_called()


def test_compose_covers_target_with_many_short_clips(settings, logger, workspace):
    """Without a clip cap, short footage keeps being added until the narration is covered."""
    pool = [candidate(d) for d in (10, 8, 6, 5, 5, 5, 5, 5)]
    composer, _, _, renderer, _ = build_composer(settings, logger, workspace, 40.0, pool)

    asset = composer.compose(
        SceneRequest(text="A long narration"), Orientation.PORTRAIT, CaptionPosition.BOTTOM, QualityTier.LOW
    )

    covered = sum(s.duration_sec for s in asset.segments)
    assert asset.target_sec == 40.0
    assert abs(covered - asset.target_sec) <= 1.0
    assert renderer.render.call_count == 7


def test_configured_clip_cap_applies_when_scene_has_none(settings, logger, workspace):
    settings.max_clips_per_scene = 2
    pool = [candidate(d) for d in (10, 8, 6, 5)]
    composer, _, _, renderer, _ = build_composer(settings, logger, workspace, 40.0, pool)

    composer.compose(SceneRequest(text="Capped"), Orientation.PORTRAIT, CaptionPosition.BOTTOM, QualityTier.LOW)

    assert renderer.render.call_count == 2
