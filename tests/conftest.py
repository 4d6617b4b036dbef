"""Shared pytest fixtures: an in-process stand-in for the bw CLI."""

from __future__ import annotations

import copy
import threading
import time
from pathlib import Path

import pytest

from bw_export.bw_client import CLIResult
from bw_export.catalog import to_item
from bw_export.errors import CatalogFetchError
from bw_export.models import AttachmentJob, VaultItem


def raw_item(item_id: str, *attachments: tuple[str, str]) -> dict:
    """Build a list-items record with ``(attachment_id, file_name)`` pairs."""
    record = {
        "object": "item",
        "id": item_id,
        "name": f"Item {item_id}",
        "type": 1,
    }
    if attachments:
        record["attachments"] = [
            {
                "id": attachment_id,
                "fileName": file_name,
                "size": "12",
                "sizeName": "12 Bytes",
                "url": f"https://vault.example/attachments/{attachment_id}",
            }
            for attachment_id, file_name in attachments
        ]
    return record


def make_item(item_id: str, *attachments: tuple[str, str]) -> VaultItem:
    return to_item(raw_item(item_id, *attachments))


def make_jobs(count: int, item_id: str = "item") -> list[AttachmentJob]:
    return [
        AttachmentJob(
            attachment_id=str(index),
            file_name=f"file-{index}.bin",
            size=12,
            parent_item_id=item_id,
        )
        for index in range(1, count + 1)
    ]


class FakeVaultCLI:
    """Records every call and writes attachment files like ``bw get attachment``."""

    def __init__(
        self,
        items: list[dict] | None = None,
        *,
        logged_in: bool = True,
        token: str = "session-token",
        auth_returncode: int = 0,
        list_error: bool = False,
        fail_attachments: set[str] | None = None,
        delays: dict[str, float] | None = None,
        default_delay: float = 0.0,
        write_files: bool = True,
    ) -> None:
        self.items = items or []
        self.logged_in = logged_in
        self.token = token
        self.auth_returncode = auth_returncode
        self.list_error = list_error
        self.fail_attachments = fail_attachments or set()
        self.delays = delays or {}
        self.default_delay = default_delay
        self.write_files = write_files

        self.calls: list[tuple] = []
        self.timings: dict[str, tuple[float, float]] = {}
        self._lock = threading.Lock()
        self._active = 0
        self.max_active = 0

    def check_login(self) -> bool:
        self.calls.append(("check_login",))
        return self.logged_in

    def login(self) -> CLIResult:
        self.calls.append(("login",))
        return CLIResult(self.auth_returncode, f"{self.token}\n")

    def unlock(self) -> CLIResult:
        self.calls.append(("unlock",))
        return CLIResult(self.auth_returncode, f"{self.token}\n")

    def list_items(self, session_token: str) -> list[dict]:
        self.calls.append(("list_items", session_token))
        if self.list_error:
            raise CatalogFetchError("'bw list items' exited with status 1")
        return copy.deepcopy(self.items)

    def get_attachment(
        self, session_token: str, item_id: str, attachment_id: str, output: Path
    ) -> CLIResult:
        start = time.monotonic()
        with self._lock:
            self.calls.append(("get_attachment", session_token, item_id, attachment_id, output))
            self._active += 1
            self.max_active = max(self.max_active, self._active)
        time.sleep(self.delays.get(attachment_id, self.default_delay))
        try:
            if attachment_id in self.fail_attachments:
                return CLIResult(1)
            if self.write_files:
                output.write_bytes(self.content_for(item_id, attachment_id))
            return CLIResult(0)
        finally:
            with self._lock:
                self._active -= 1
                self.timings[attachment_id] = (start, time.monotonic())

    @staticmethod
    def content_for(item_id: str, attachment_id: str) -> bytes:
        return f"content {item_id}/{attachment_id}".encode()

    def fetched_ids(self) -> list[str]:
        return [call[3] for call in self.calls if call[0] == "get_attachment"]


@pytest.fixture
def fake_cli() -> FakeVaultCLI:
    return FakeVaultCLI()


@pytest.fixture
def two_items() -> list[dict]:
    """Two items; both own an ``a.txt`` but never twice within one item."""
    return [
        raw_item("A", ("1", "a.txt"), ("2", "b.txt")),
        raw_item("B", ("3", "a.txt")),
    ]
