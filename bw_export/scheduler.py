"""Batched, bounded-parallel attachment downloads through the vault CLI."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from pathlib import Path
from typing import Optional, Sequence

from .bw_client import VaultCLI
from .errors import AttachmentDownloadError
from .ledger import ExportLedger
from .models import AttachmentJob, DownloadOutcome, OutcomeStatus
from .utils import chunked, sha256_file
from .writer import OutputWriter

logger = logging.getLogger(__name__)


class DownloadScheduler:
    """Run attachment jobs in fixed-size batches.

    Batches execute one after another. Every job of a batch runs concurrently
    and the batch is joined before the next one starts, so at most
    ``max_parallel`` CLI processes are alive at any time. The first failure
    (by job order) of a settled batch aborts the run.
    """

    def __init__(
        self,
        cli: VaultCLI,
        writer: OutputWriter,
        ledger: Optional[ExportLedger] = None,
    ) -> None:
        self.cli = cli
        self.writer = writer
        self.ledger = ledger

    def schedule(
        self,
        jobs: Sequence[AttachmentJob],
        session_token: str,
        destination_root: Path,
        max_parallel: int,
        overwrite: bool,
    ) -> list[DownloadOutcome]:
        if max_parallel < 1:
            raise ValueError(f"max_parallel must be at least 1, got {max_parallel}")

        outcomes: list[DownloadOutcome] = []
        batches = list(chunked(jobs, max_parallel))
        with ThreadPoolExecutor(
            max_workers=max_parallel, thread_name_prefix="bw-attachment"
        ) as executor:
            for number, batch in enumerate(batches, start=1):
                logger.debug(
                    "Starting batch %s/%s with %s attachments", number, len(batches), len(batch)
                )
                futures = [
                    executor.submit(
                        self._process_job, job, session_token, destination_root, overwrite
                    )
                    for job in batch
                ]
                wait(futures)
                settled: list[DownloadOutcome] = []
                for future in futures:
                    outcome = future.result()
                    if outcome.status is OutcomeStatus.FAILED:
                        raise AttachmentDownloadError(outcome.job, outcome.reason)
                    settled.append(outcome)
                self._record(settled)
                outcomes.extend(settled)
        return outcomes

    def _process_job(
        self,
        job: AttachmentJob,
        session_token: str,
        destination_root: Path,
        overwrite: bool,
    ) -> DownloadOutcome:
        path = self.writer.attachment_path(destination_root, job)
        self.writer.create_dir(path.parent)

        if not overwrite and self.writer.file_exists(path):
            self.writer.log_progress("Skipping existing %s", path)
            return DownloadOutcome(job=job, status=OutcomeStatus.SKIPPED, path=path)

        part_path = path.with_name(f".{path.name}.{job.attachment_id}.part")
        try:
            result = self.cli.get_attachment(
                session_token, job.parent_item_id, job.attachment_id, part_path
            )
            if not result.ok:
                return DownloadOutcome(
                    job=job,
                    status=OutcomeStatus.FAILED,
                    path=path,
                    reason=f"vault CLI exited with status {result.returncode}",
                )
            if not self.writer.file_exists(part_path):
                return DownloadOutcome(
                    job=job,
                    status=OutcomeStatus.FAILED,
                    path=path,
                    reason="vault CLI reported success but wrote no file",
                )
            checksum = sha256_file(part_path)
            part_path.replace(path)
        finally:
            part_path.unlink(missing_ok=True)

        self.writer.log_progress("Downloaded %s (%s bytes)", path, job.size)
        return DownloadOutcome(
            job=job, status=OutcomeStatus.DOWNLOADED, path=path, checksum=checksum
        )

    def _record(self, outcomes: Sequence[DownloadOutcome]) -> None:
        if self.ledger is None:
            return
        for outcome in outcomes:
            if outcome.status is OutcomeStatus.DOWNLOADED:
                self.ledger.record(outcome)
            elif not self.ledger.seen(outcome.job.parent_item_id, outcome.job.attachment_id):
                outcome.checksum = sha256_file(outcome.path)
                self.ledger.record(outcome)
                logger.info(
                    "Recorded existing %s that no earlier export had tracked", outcome.path
                )
