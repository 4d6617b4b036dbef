"""Tests for bw_export/catalog.py."""

import pytest

from bw_export.catalog import fetch_catalog, to_item
from bw_export.errors import CatalogFetchError
from bw_export.models import AttachmentMeta

from conftest import FakeVaultCLI, raw_item


def test_fetch_parses_items_in_order(two_items):
    cli = FakeVaultCLI(items=two_items)

    items = fetch_catalog(cli, "tok")

    assert cli.calls == [("list_items", "tok")]
    assert [item.item_id for item in items] == ["A", "B"]
    assert [a.file_name for a in items[0].attachments] == ["a.txt", "b.txt"]
    assert items[0].raw == two_items[0]


def test_attachment_fields_are_converted():
    item = to_item(raw_item("A", ("att-1", "scan.pdf")))

    assert item.attachments == (
        AttachmentMeta(
            attachment_id="att-1",
            file_name="scan.pdf",
            size=12,
            download_url="https://vault.example/attachments/att-1",
            size_name="12 Bytes",
        ),
    )


def test_item_without_attachments():
    item = to_item({"id": "login-1", "name": "Mail", "attachments": None})

    assert item.attachments == ()
    assert item.name == "Mail"


def test_unparseable_size_defaults_to_zero():
    record = raw_item("A", ("1", "x.bin"))
    record["attachments"][0]["size"] = None

    assert to_item(record).attachments[0].size == 0


@pytest.mark.parametrize(
    "record",
    [
        {"name": "no id"},
        "not-a-record",
        {"id": "A", "attachments": [{"id": "1"}]},
    ],
)
def test_malformed_records_raise(record):
    with pytest.raises(CatalogFetchError):
        to_item(record)


def test_list_failure_propagates():
    with pytest.raises(CatalogFetchError):
        fetch_catalog(FakeVaultCLI(list_error=True), "tok")
