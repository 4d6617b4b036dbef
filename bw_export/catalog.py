"""Vault item listing and conversion into typed records."""

from __future__ import annotations

import logging
from typing import Any

from .bw_client import VaultCLI
from .errors import CatalogFetchError
from .models import AttachmentMeta, VaultItem

logger = logging.getLogger(__name__)


def fetch_catalog(cli: VaultCLI, session_token: str) -> list[VaultItem]:
    """List every vault item, attachments included, in CLI order."""
    records = cli.list_items(session_token)
    items = [to_item(raw) for raw in records]
    logger.info(
        "Fetched %s vault items (%s with attachments)",
        len(items),
        sum(1 for item in items if item.attachments),
    )
    return items


def to_item(raw: Any) -> VaultItem:
    if not isinstance(raw, dict) or not raw.get("id"):
        raise CatalogFetchError(f"Vault item record without an id: {raw!r:.200}")
    attachments = tuple(
        to_attachment(raw["id"], entry) for entry in raw.get("attachments") or []
    )
    return VaultItem(
        item_id=raw["id"],
        name=raw.get("name") or "",
        attachments=attachments,
        raw=raw,
    )


def to_attachment(item_id: str, raw: Any) -> AttachmentMeta:
    if not isinstance(raw, dict) or not raw.get("id") or not raw.get("fileName"):
        raise CatalogFetchError(f"Item {item_id} lists a malformed attachment: {raw!r:.200}")
    return AttachmentMeta(
        attachment_id=raw["id"],
        file_name=raw["fileName"],
        size=_parse_size(raw.get("size")),
        download_url=raw.get("url"),
        size_name=raw.get("sizeName"),
    )


def _parse_size(value: Any) -> int:
    # The CLI reports byte counts as decimal strings.
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
