"""On-disk avatar cache."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from git_graph.config import CONFIG_DIR

logger = logging.getLogger(__name__)


class AvatarManager:
    def __init__(self, workspace: str | Path) -> None:
        self.cache_dir = Path(workspace) / CONFIG_DIR / "avatars"

    def clear_cache(self) -> None:
        """Delete all cached avatar images."""
        if self.cache_dir.exists():
            shutil.rmtree(self.cache_dir, ignore_errors=True)
        logger.info("Cleared avatar cache at %s", self.cache_dir)
