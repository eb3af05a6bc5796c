"""Tests for the request workspace and render budget."""

import pytest

from short_video_maker.core.errors import RenderTimeoutError
from short_video_maker.storage.workspace import RenderWorkspace
from short_video_maker.utils.budget import RenderBudget


def test_workspace_paths_are_unique_and_scoped(tmp_path, logger):
    with RenderWorkspace(str(tmp_path), logger, request_id="abc") as workspace:
        first = workspace.path("seg-0", ".mp4")
        second = workspace.path("seg-0", ".mp4")

        assert workspace.root == tmp_path / "req-abc"
        assert first != second
        assert first.parent == workspace.root
        assert first.name.startswith("seg-0-") and first.suffix == ".mp4"


def test_workspace_removed_on_success(tmp_path, logger):
    with RenderWorkspace(str(tmp_path), logger) as workspace:
        workspace.path("voice", ".mp3").write_bytes(b"x")
        root = workspace.root

    assert not root.exists()


def test_workspace_removed_on_failure(tmp_path, logger):
    with pytest.raises(RuntimeError):
        with RenderWorkspace(str(tmp_path), logger) as workspace:
            workspace.path("voice", ".mp3").write_bytes(b"x")
            root = workspace.root
            raise RuntimeError("boom")

    assert not root.exists()


def test_workspace_kept_when_requested(tmp_path, logger):
    with RenderWorkspace(str(tmp_path), logger, keep=True) as workspace:
        kept = workspace.path("voice", ".mp3")
        kept.write_bytes(b"x")

    assert kept.exists()


def test_concurrent_workspaces_do_not_collide(tmp_path, logger):
    with RenderWorkspace(str(tmp_path), logger) as a, RenderWorkspace(str(tmp_path), logger) as b:
        assert a.root != b.root


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def test_budget_tracks_elapsed_time():
    clock = FakeClock()
    budget = RenderBudget(10.0, clock=clock)
    clock.now += 4.0

    assert budget.elapsed() == pytest.approx(4.0)
    assert budget.remaining() == pytest.approx(6.0)
    budget.check()


def test_budget_exhausted_raises_timeout():
    clock = FakeClock()
    budget = RenderBudget(10.0, clock=clock)
    clock.now += 10.5

    with pytest.raises(RenderTimeoutError, match="admission"):
        budget.check("admission")


def test_timeout_error_is_a_builtin_timeout():
    assert issubclass(RenderTimeoutError, TimeoutError)
