"""Typed containers shared across the pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional


@dataclass(frozen=True)
class AttachmentMeta:
    """Metadata for a file attached to a vault item."""

    attachment_id: str
    file_name: str
    size: int
    download_url: Optional[str] = None
    size_name: Optional[str] = None


@dataclass(frozen=True)
class VaultItem:
    """A vault record as listed by the CLI.

    ``raw`` keeps the record exactly as received so the catalog dump is not
    limited to the fields modelled here.
    """

    item_id: str
    name: str
    attachments: tuple[AttachmentMeta, ...]
    raw: dict[str, Any] = field(compare=False, repr=False)


@dataclass(frozen=True)
class AttachmentJob:
    """One attachment to materialize under its parent item's directory."""

    attachment_id: str
    file_name: str
    size: int
    parent_item_id: str


class OutcomeStatus(str, Enum):
    SKIPPED = "skipped"
    DOWNLOADED = "downloaded"
    FAILED = "failed"


@dataclass
class DownloadOutcome:
    """Result of handling a single attachment job."""

    job: AttachmentJob
    status: OutcomeStatus
    path: Path
    reason: Optional[str] = None
    checksum: Optional[str] = None


@dataclass(frozen=True)
class ExportOptions:
    """Run-level knobs passed from the front-end down to the scheduler and writer."""

    destination_root: Path
    max_parallel: int = 4
    overwrite: bool = False
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.max_parallel < 1:
            raise ValueError(f"max_parallel must be at least 1, got {self.max_parallel}")


@dataclass
class ExportSummary:
    """Counters reported at the end of a run."""

    items: int = 0
    attachments: int = 0
    downloaded: int = 0
    skipped: int = 0
