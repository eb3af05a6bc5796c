"""Pipeline orchestrators for Short Video Maker."""

from short_video_maker.pipelines.render_pipeline import RenderPipeline, main, validate_request

__all__ = ["RenderPipeline", "main", "validate_request"]
