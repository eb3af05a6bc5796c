"""Per-request working directory for intermediate media files."""

import shutil
from pathlib import Path
from typing import Any, Optional

from short_video_maker.utils.io_utils import random_id


class RenderWorkspace:
    """
    Scoped arena for one request's intermediate files.

    Every narration chunk, download, segment and concat list lives under one
    ``req-<hex>`` directory that is removed when the context exits, on success
    and on failure alike.
    """

    def __init__(self, base_dir: str, logger: Any, keep: bool = False, request_id: Optional[str] = None):
        """
        Initialize the workspace (the directory is created on enter).

        Args:
            base_dir: Parent directory shared by concurrent requests
            logger: Logger instance
            keep: Leave the directory in place on exit
            request_id: Identifier used in the directory name
        """
        self.logger = logger
        self.keep = keep
        self.request_id = request_id or random_id(6)
        self.root = Path(base_dir) / f"req-{self.request_id}"
        self.allocated: list[Path] = []

    def __enter__(self) -> "RenderWorkspace":
        self.root.mkdir(parents=True, exist_ok=False)
        self.logger.debug(f"Workspace created: {self.root}")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()

    def path(self, prefix: str, suffix: str) -> Path:
        """
        Allocate a unique file path inside the workspace.

        Args:
            prefix: File name prefix (e.g. "seg-2")
            suffix: File extension including the dot

        Returns:
            Path that does not exist yet
        """
        file_path = self.root / f"{prefix}-{random_id(4)}{suffix}"
        self.allocated.append(file_path)
        return file_path

    def cleanup(self) -> None:
        """Remove the workspace directory unless it is kept for debugging."""
        if self.keep:
            self.logger.info(f"Keeping workspace with {len(self.allocated)} files: {self.root}")
            return
        shutil.rmtree(self.root, ignore_errors=True)
        self.logger.debug(f"Workspace removed: {self.root}")
