"""Utility helpers shared across modules."""

from __future__ import annotations

from hashlib import sha256
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Iterable, Sequence

SESSION_FLAG = "--session="
REDACTED = "***"


def chunked(iterable: Iterable, size: int):
    """Yield successive sized chunks from an iterable."""
    if size < 1:
        raise ValueError(f"Chunk size must be at least 1, got {size}")
    chunk = []
    for item in iterable:
        chunk.append(item)
        if len(chunk) == size:
            yield chunk
            chunk = []
    if chunk:
        yield chunk


def sha256_file(path: Path, block_size: int = 1 << 16) -> str:
    """Hex digest of a file on disk, read in blocks."""
    digest = sha256()
    with path.open("rb") as handle:
        for block in iter(lambda: handle.read(block_size), b""):
            digest.update(block)
    return digest.hexdigest()


def redact_command(args: Sequence[str]) -> str:
    """Render a command line for logs with the session token masked."""
    rendered = []
    for arg in args:
        if arg.startswith(SESSION_FLAG):
            arg = f"{SESSION_FLAG}{REDACTED}"
        rendered.append(arg)
    return " ".join(rendered)


def is_plain_component(name: str) -> bool:
    """True if ``name`` maps to exactly itself as one path component on any OS."""
    if not name or name in (".", "..") or "\x00" in name:
        return False
    return PurePosixPath(name).name == name and PureWindowsPath(name).name == name
