"""Bitwarden CLI wrapper exposing the handful of calls the exporter needs."""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, Sequence

from .errors import CatalogFetchError, VaultCLIError
from .utils import redact_command

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CLIResult:
    returncode: int
    stdout: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class VaultCLI(Protocol):
    """Capabilities of the external vault tool used by the pipeline."""

    def check_login(self) -> bool: ...

    def login(self) -> CLIResult: ...

    def unlock(self) -> CLIResult: ...

    def list_items(self, session_token: str) -> list[dict[str, Any]]: ...

    def get_attachment(
        self, session_token: str, item_id: str, attachment_id: str, output: Path
    ) -> CLIResult: ...


class BitwardenCLI:
    """Thin subprocess wrapper around the ``bw`` binary.

    Standard error and, for login/unlock, standard input stay attached to the
    terminal so the tool can prompt for credentials itself.
    """

    def __init__(self, cli_path: str = "bw") -> None:
        self.cli_path = cli_path

    def check_login(self) -> bool:
        result = self._run(["login", "--check"])
        return result.ok

    def login(self) -> CLIResult:
        return self._run(["login", "--raw"])

    def unlock(self) -> CLIResult:
        return self._run(["unlock", "--raw"])

    def list_items(self, session_token: str) -> list[dict[str, Any]]:
        """Return every item in the vault as decoded JSON records."""
        result = self._run([f"--session={session_token}", "list", "items"])
        if not result.ok:
            raise CatalogFetchError(
                f"'bw list items' exited with status {result.returncode}"
            )
        try:
            payload = json.loads(result.stdout)
        except ValueError as exc:
            raise CatalogFetchError(f"'bw list items' returned invalid JSON: {exc}") from exc
        if not isinstance(payload, list):
            raise CatalogFetchError(
                f"'bw list items' returned {type(payload).__name__}, expected a list"
            )
        return payload

    def get_attachment(
        self, session_token: str, item_id: str, attachment_id: str, output: Path
    ) -> CLIResult:
        return self._run(
            [
                "get",
                "attachment",
                attachment_id,
                f"--itemid={item_id}",
                f"--session={session_token}",
                f"--output={output}",
            ],
            interactive=False,
        )

    def _run(self, args: Sequence[str], interactive: bool = True) -> CLIResult:
        command = [self.cli_path, *args]
        logger.debug("Running %s", redact_command(command))
        try:
            completed = subprocess.run(
                command,
                stdin=None if interactive else subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            raise VaultCLIError(f"Vault CLI not found at '{self.cli_path}'") from exc
        if completed.returncode != 0:
            logger.debug(
                "%s exited with status %s", redact_command(command), completed.returncode
            )
        return CLIResult(returncode=completed.returncode, stdout=completed.stdout or "")
