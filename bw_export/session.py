"""Session bootstrap: unlock an existing login or start a new one."""

from __future__ import annotations

import logging

from .bw_client import VaultCLI
from .errors import SessionAcquisitionError

logger = logging.getLogger(__name__)


class SessionProvider:
    """Obtain the session token every authenticated CLI call needs."""

    def __init__(self, cli: VaultCLI) -> None:
        self.cli = cli

    def acquire(self) -> str:
        if self.cli.check_login():
            logger.info("Vault CLI already logged in; unlocking vault")
            action, result = "unlock", self.cli.unlock()
        else:
            logger.info("Vault CLI not logged in; starting login")
            action, result = "login", self.cli.login()

        if not result.ok:
            raise SessionAcquisitionError(
                f"'bw {action}' exited with status {result.returncode}"
            )
        token = result.stdout.strip()
        if not token:
            raise SessionAcquisitionError(f"'bw {action}' did not return a session token")
        logger.debug("Session token acquired via %s", action)
        return token
