"""Exceptions raised by the export pipeline.

Every error here is fatal to a run. Filesystem problems are not wrapped: they
surface as the original ``OSError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import AttachmentJob


class ExportError(RuntimeError):
    """Base class for failures the front-end reports to the user."""


class VaultCLIError(ExportError):
    """The vault CLI binary could not be started."""


class SessionAcquisitionError(ExportError):
    """Login or unlock through the vault CLI failed."""


class CatalogFetchError(ExportError):
    """Listing vault items failed or returned an unusable payload."""


class DuplicateAttachmentName(ExportError):
    """Two attachments of the same item share a file name."""

    def __init__(self, item_id: str, file_name: str) -> None:
        self.item_id = item_id
        self.file_name = file_name
        super().__init__(
            f"Item {item_id} has more than one attachment named '{file_name}'"
        )


class AttachmentDownloadError(ExportError):
    """The vault CLI failed to write one attachment."""

    def __init__(self, job: "AttachmentJob", reason: str | None = None) -> None:
        self.job = job
        self.reason = reason
        message = (
            f"Failed to download attachment {job.attachment_id} "
            f"('{job.file_name}') of item {job.parent_item_id}"
        )
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UnsafeAttachmentName(ExportError):
    """An item id or attachment name cannot be used as a single path component."""

    def __init__(self, item_id: str, name: str) -> None:
        self.item_id = item_id
        self.name = name
        super().__init__(
            f"Item {item_id} has an attachment path component '{name}' "
            "that is not a plain file name"
        )


class LedgerError(ExportError):
    """The export ledger database could not be opened or updated."""
