"""Render pipeline orchestrator - scene list → narrated, captioned, muxed video."""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from short_video_maker.core.config import Settings
from short_video_maker.core.errors import ValidationError, VideoMakerError
from short_video_maker.core.logging_config import get_logger, setup_logging
from short_video_maker.models.schemas import FinalOutput, RenderRequest, SceneAsset, SceneRequest
from short_video_maker.services.final_muxer import FinalMuxer
from short_video_maker.services.footage_client import PexelsClient
from short_video_maker.services.media_ops import MediaToolkit
from short_video_maker.services.scene_composer import SceneComposer
from short_video_maker.services.segment_renderer import SegmentRenderer
from short_video_maker.services.timeline_assembler import TimelineAssembler
from short_video_maker.services.tts_client import TTSClient
from short_video_maker.storage.workspace import RenderWorkspace
from short_video_maker.utils.budget import RenderBudget
from short_video_maker.utils.error_handler import format_error_message, get_error_suggestion
from short_video_maker.utils.io_utils import random_id


def validate_request(request: RenderRequest, settings: Settings, logger: Any) -> list[SceneRequest]:
    """
    Check a request before any external call is made.

    Args:
        request: Render request
        settings: App settings
        logger: Logger instance

    Returns:
        Scenes to render (capped at settings.max_scenes)

    Raises:
        ValidationError: If the scene list is empty or a scene has no narration
    """
    if not request.scenes:
        raise ValidationError("Provide scenes[] with per-scene text (and optional search).")

    for i, scene in enumerate(request.scenes):
        if not scene.text or not scene.text.strip():
            raise ValidationError(f"Scene {i} has no narration text.")

    if len(request.scenes) > settings.max_scenes:
        logger.warning(f"Request has {len(request.scenes)} scenes, rendering the first {settings.max_scenes}")
    return list(request.scenes[: settings.max_scenes])


class RenderPipeline:
    """Runs the scene assembly pipeline for one request at a time."""

    def __init__(self, settings: Settings, logger: Any):
        """
        Initialize the pipeline.

        Args:
            settings: App settings
            logger: Logger instance
        """
        self.settings = settings
        self.logger = logger
        self.media = MediaToolkit(settings, logger)
        self.footage_client = PexelsClient(settings, logger)
        self.muxer = FinalMuxer(settings, logger, self.media)

    def run(self, request: RenderRequest, budget: Optional[RenderBudget] = None) -> FinalOutput:
        """
        Render a request into the final deliverable.

        Scenes are processed sequentially in request order. The first failure
        aborts the whole request; the working directory is removed either way.

        Args:
            request: Render request
            budget: Budget started when the request arrived (a fresh one if omitted)

        Returns:
            FinalOutput for the muxed file
        """
        budget = budget or RenderBudget(self.settings.request_budget_seconds)
        request_id = random_id(6)
        logger = self.logger.bind(request_id=request_id)

        scenes = validate_request(request, self.settings, logger)
        budget.check("admission")

        logger.info("=" * 60)
        logger.info(f"Starting render {request_id}")
        logger.info(
            f"Scenes: {len(scenes)} | orientation={request.orientation.value} | "
            f"quality={request.quality.value} | captions={request.text_position.value} | "
            f"format={request.out_format.value}"
        )
        logger.info("=" * 60)

        try:
            with RenderWorkspace(
                self.settings.work_dir, logger, keep=self.settings.keep_intermediates, request_id=request_id
            ) as workspace:
                return self._run_in_workspace(request, scenes, workspace, budget, logger)
        except VideoMakerError as e:
            logger.error(
                format_error_message(
                    e, request_id=request_id, scene_count=len(scenes), suggestion=get_error_suggestion(e)
                )
            )
            raise

    def _run_in_workspace(
        self,
        request: RenderRequest,
        scenes: list[SceneRequest],
        workspace: RenderWorkspace,
        budget: RenderBudget,
        logger: Any,
    ) -> FinalOutput:
        tts_client = TTSClient(self.settings, logger, self.media, workspace)
        segment_renderer = SegmentRenderer(self.settings, logger, self.media, workspace)
        composer = SceneComposer(
            self.settings, logger, tts_client, self.footage_client, segment_renderer, self.media, workspace
        )
        assembler = TimelineAssembler(self.settings, logger, self.media, workspace)

        # Step 1: Compose scenes, one at a time
        scene_assets: list[SceneAsset] = []
        for index, scene in enumerate(scenes):
            if self.settings.budget_check_between_scenes:
                budget.check(f"scene {index}")
            logger.info(f"Step 1.{index + 1}: Composing scene {index + 1}/{len(scenes)}")
            try:
                asset = composer.compose(
                    scene, request.orientation, request.text_position, request.quality, index=index
                )
            except VideoMakerError as e:
                e.scene_index = index
                raise
            scene_assets.append(asset)

        # Step 2: Assemble the timeline
        logger.info("Step 2: Assembling timeline...")
        video_stream = assembler.assemble_video([asset.video_path for asset in scene_assets])
        audio_stream = assembler.assemble_audio([asset.narration for asset in scene_assets])

        # Step 3: Mux
        logger.info("Step 3: Muxing final output...")
        output = self.muxer.mux(
            video_stream,
            audio_stream,
            out_format=request.out_format,
            scene_count=len(scene_assets),
            segment_count=sum(len(asset.segments) for asset in scene_assets),
            orientation=request.orientation,
            quality=request.quality,
        )

        logger.info("=" * 60)
        logger.info(f"Render complete in {budget.elapsed():.1f}s: {output.filename} ({output.duration_sec:.2f}s)")
        logger.info("=" * 60)
        return output


def load_request(path: Path, overrides: dict[str, Any]) -> RenderRequest:
    """
    Load a render request from JSON: either a full request object or a bare scene list.

    Args:
        path: JSON file
        overrides: Option values from the command line (None values are ignored)

    Returns:
        RenderRequest
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, list):
        data = {"scenes": data}
    data.update({k: v for k, v in overrides.items() if v is not None})
    return RenderRequest.model_validate(data)


def main() -> int:
    """CLI entrypoint."""
    parser = argparse.ArgumentParser(description="Render a narrated short video from a scene list")
    parser.add_argument("--scenes", required=True, type=Path, help="JSON file with scenes[] or a full request")
    parser.add_argument("--orientation", choices=["portrait", "landscape"], help="Target orientation")
    parser.add_argument("--text-position", choices=["bottom", "center", "top"], help="Caption position")
    parser.add_argument("--quality", choices=["low", "medium", "high"], help="Quality tier")
    parser.add_argument("--out-format", choices=["mp4", "mov", "mkv"], help="Output container")
    parser.add_argument("--output-dir", help="Override OUTPUT_DIR")
    parser.add_argument("--keep-intermediates", action="store_true", help="Keep the working directory")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    args = parser.parse_args()

    settings = Settings()
    if args.output_dir:
        settings.output_dir = args.output_dir
    if args.keep_intermediates:
        settings.keep_intermediates = True

    setup_logging(
        log_level=args.log_level or settings.log_level,
        log_file=settings.log_file,
        json_file=settings.log_json,
    )
    logger = get_logger(__name__)

    try:
        request = load_request(
            args.scenes,
            {
                "orientation": args.orientation,
                "textPosition": args.text_position,
                "quality": args.quality,
                "outFormat": args.out_format,
            },
        )
    except (OSError, json.JSONDecodeError, PydanticValidationError) as e:
        logger.error(f"Could not read scenes from {args.scenes}: {e}")
        return 1

    try:
        output = RenderPipeline(settings, logger).run(request)
    except VideoMakerError as e:
        logger.error(f"Render failed: {e}")
        return 1

    print(output.path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
