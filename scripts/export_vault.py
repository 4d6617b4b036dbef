"""Entry point that exports Bitwarden vault items and attachments to disk."""

from __future__ import annotations

from pathlib import Path
import sys

# Ensure project root is on sys.path when running as a script
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from bw_export.cli import main


if __name__ == "__main__":
    sys.exit(main())
