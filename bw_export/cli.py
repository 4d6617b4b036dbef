"""Command-line entry point that exports vault items and attachments to disk."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from .bw_client import BitwardenCLI, VaultCLI
from .catalog import fetch_catalog
from .config import Settings
from .errors import ExportError
from .extractor import extract_attachment_jobs
from .ledger import ExportLedger
from .models import ExportOptions, ExportSummary, OutcomeStatus
from .scheduler import DownloadScheduler
from .session import SessionProvider
from .writer import OutputWriter

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bw-export",
        description="Export Bitwarden vault items and their attachments to a local directory.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Destination directory (default: EXPORT_DIR or ./export)",
    )
    parser.add_argument(
        "-p",
        "--max-parallel",
        type=parse_max_parallel,
        help="Attachments downloaded concurrently per batch (default: EXPORT_MAX_PARALLEL or 4)",
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        default=None,
        help="Replace attachment files that already exist",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every attachment")
    return parser


def parse_max_parallel(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid integer: {value}") from exc
    if parsed < 1:
        raise argparse.ArgumentTypeError("--max-parallel must be at least 1")
    return parsed


def configure_logging(level: str, verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def resolve_options(args: argparse.Namespace, settings: Settings) -> ExportOptions:
    return ExportOptions(
        destination_root=args.output or settings.export_dir,
        max_parallel=args.max_parallel or settings.max_parallel,
        overwrite=settings.overwrite if args.overwrite is None else args.overwrite,
        verbose=args.verbose,
    )


def run_export(
    options: ExportOptions,
    cli: VaultCLI,
    catalog_filename: str = "items.json",
    ledger: Optional[ExportLedger] = None,
) -> ExportSummary:
    """Run the whole pipeline; any failure propagates as an exception."""
    writer = OutputWriter(verbose=options.verbose)

    session_token = SessionProvider(cli).acquire()
    items = fetch_catalog(cli, session_token)

    destination_root = writer.create_dir(options.destination_root)
    writer.write_catalog(destination_root / catalog_filename, items)

    jobs = extract_attachment_jobs(items)
    logger.info(
        "Downloading %s attachments into %s (max %s at a time)",
        len(jobs),
        destination_root,
        options.max_parallel,
    )
    outcomes = DownloadScheduler(cli, writer, ledger=ledger).schedule(
        jobs,
        session_token,
        destination_root,
        options.max_parallel,
        options.overwrite,
    )

    summary = ExportSummary(items=len(items), attachments=len(jobs))
    for outcome in outcomes:
        if outcome.status is OutcomeStatus.DOWNLOADED:
            summary.downloaded += 1
        elif outcome.status is OutcomeStatus.SKIPPED:
            summary.skipped += 1
    return summary


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings()
    except ValidationError as exc:
        parser.error(f"invalid configuration: {exc}")

    configure_logging(settings.resolved_log_level, verbose=args.verbose)
    options = resolve_options(args, settings)

    try:
        ledger = ExportLedger(settings.ledger_db) if settings.ledger_db else None
        summary = run_export(
            options,
            BitwardenCLI(settings.bw_cli_path),
            catalog_filename=settings.catalog_filename,
            ledger=ledger,
        )
    except (ExportError, OSError) as exc:
        logger.debug("Export aborted", exc_info=True)
        print(f"Export failed: {exc}" if str(exc) else "Export failed.", file=sys.stderr)
        return EXIT_FAILURE

    logger.info(
        "Run complete: items=%s attachments=%s downloaded=%s skipped=%s",
        summary.items,
        summary.attachments,
        summary.downloaded,
        summary.skipped,
    )
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
