"""Filesystem side of the export: directories, catalog dump, target paths."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Sequence

from .errors import UnsafeAttachmentName
from .models import AttachmentJob, VaultItem
from .utils import is_plain_component

logger = logging.getLogger(__name__)


class OutputWriter:
    """Create the export tree and persist the item catalog."""

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose
        self._progress_level = logging.INFO if verbose else logging.DEBUG

    def create_dir(self, path: Path) -> Path:
        path.mkdir(parents=True, exist_ok=True)
        return path

    def write_catalog(self, path: Path, items: Sequence[VaultItem]) -> Path:
        """Dump the raw item records as indented JSON, replacing any previous dump."""
        payload = json.dumps([item.raw for item in items], indent=2, ensure_ascii=False)
        self.create_dir(path.parent)
        path.write_text(payload + "\n", encoding="utf-8")
        logger.info("Wrote catalog of %s items to %s", len(items), path)
        return path

    @staticmethod
    def attachment_path(destination_root: Path, job: AttachmentJob) -> Path:
        for component in (job.parent_item_id, job.file_name):
            if not is_plain_component(component):
                raise UnsafeAttachmentName(job.parent_item_id, component)
        return destination_root / job.parent_item_id / job.file_name

    @staticmethod
    def file_exists(path: Path) -> bool:
        """True if ``path`` exists; errors other than not-found propagate."""
        try:
            path.stat()
        except FileNotFoundError:
            return False
        return True

    def log_progress(self, message: str, *args) -> None:
        logger.log(self._progress_level, message, *args)
