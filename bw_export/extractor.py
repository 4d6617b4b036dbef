"""Flatten vault items into attachment download jobs."""

from __future__ import annotations

import logging
from typing import Iterable

from .errors import DuplicateAttachmentName, UnsafeAttachmentName
from .models import AttachmentJob, VaultItem
from .utils import is_plain_component

logger = logging.getLogger(__name__)


def extract_attachment_jobs(items: Iterable[VaultItem]) -> list[AttachmentJob]:
    """Return one job per attachment, in item order then attachment order.

    Attachments land in a directory per item, so file names only need to be
    unique within an item. Names are compared casefolded because two names
    differing only in case share a file on case-insensitive filesystems. A
    clash or a name that is not a plain file name aborts the whole extraction.
    """
    jobs: list[AttachmentJob] = []
    for item in items:
        if not item.attachments:
            continue
        if not is_plain_component(item.item_id):
            raise UnsafeAttachmentName(item.item_id, item.item_id)
        seen: set[str] = set()
        for attachment in item.attachments:
            if not is_plain_component(attachment.file_name):
                raise UnsafeAttachmentName(item.item_id, attachment.file_name)
            key = attachment.file_name.casefold()
            if key in seen:
                raise DuplicateAttachmentName(item.item_id, attachment.file_name)
            seen.add(key)
        jobs.extend(
            AttachmentJob(
                attachment_id=attachment.attachment_id,
                file_name=attachment.file_name,
                size=attachment.size,
                parent_item_id=item.item_id,
            )
            for attachment in item.attachments
        )
    logger.debug("Extracted %s attachment jobs", len(jobs))
    return jobs
