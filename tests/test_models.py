"""Tests for footnote_qr_table.models dataclasses."""
import dataclasses

import pytest
from footnote_qr_table.models import (
    BuildOutcome,
    CellRange,
    EntryStub,
    OutcomeStatus,
    QrImage,
    ResolvedEntry,
    TextNode,
    TextRun,
)


class TestTextNode:
    def test_text_joins_runs(self):
        node = TextNode((TextRun("Hello "), TextRun("world", link="https://w.example/")))
        assert node.text == "Hello world"

    def test_links_in_run_order(self):
        node = TextNode((
            TextRun("a", link="https://1.example/"),
            TextRun("b"),
            TextRun("c", link="https://2.example/"),
        ))
        assert node.links == ["https://1.example/", "https://2.example/"]


class TestQrImage:
    @pytest.mark.parametrize("data, content_type, valid", [
        (b"\x89PNG", "image/png", True),
        (b"\x89PNG", "IMAGE/GIF", True),
        (b"\x89PNG", "application/png", True),
        (b"", "image/png", False),
        (b"<html>", "text/html; charset=utf-8", False),
        (b"\x89PNG", "", False),
    ])
    def test_is_valid(self, data, content_type, valid):
        assert QrImage(data, content_type).is_valid is valid


class TestEntries:
    def test_with_title_keeps_ref_and_url(self):
        entry = EntryStub("0A", "https://a.example/").with_title("A")
        assert (entry.ref, entry.url, entry.title) == ("0A", "https://a.example/", "A")

    def test_entries_are_immutable(self):
        entry = EntryStub("01", "https://a.example/").with_title(None)
        with pytest.raises(dataclasses.FrozenInstanceError):
            entry.title = "changed"


def test_cell_range_spans():
    cells = CellRange(2, 3, 0, 0)
    assert (cells.row_span, cells.col_span) == (2, 1)


def test_outcome_counts_failures():
    stub = EntryStub("01", "https://a.example/")
    outcome = BuildOutcome(
        OutcomeStatus.INSERTED,
        "done",
        entries=[
            ResolvedEntry(stub.with_title("A"), qr_image=QrImage(b"x", "image/png")),
            ResolvedEntry(stub.with_title("A"), qr_error="all generators failed"),
        ],
    )
    assert outcome.ok
    assert outcome.qr_failures == 1
    assert not BuildOutcome(OutcomeStatus.NO_URLS, "none").ok
