"""
Shared pytest fixtures for footnote-qr-table tests.

All fixtures that need to be shared across test modules should be defined here.
"""
from __future__ import annotations

import struct
import zlib
from unittest.mock import MagicMock

import pytest

from footnote_qr_table.config import Config
from footnote_qr_table.models import ContainerNode, QrImage, TextNode, TextRun


# =============================================================================
# Builders
# =============================================================================

def make_png(width: int = 2, height: int = 2) -> bytes:
    """Smallest valid grayscale PNG."""
    def chunk(tag: bytes, data: bytes) -> bytes:
        crc = zlib.crc32(tag + data) & 0xFFFFFFFF
        return struct.pack(">I", len(data)) + tag + data + struct.pack(">I", crc)

    ihdr = struct.pack(">IIBBBBB", width, height, 8, 0, 0, 0, 0)
    raw = b"".join(b"\x00" + b"\xff" * width for _ in range(height))
    return (
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", ihdr)
        + chunk(b"IDAT", zlib.compress(raw))
        + chunk(b"IEND", b"")
    )


def make_response(status_code=200, content=b"", content_type="text/html", text=None):
    """Mock httpx.Response with the attributes the code reads."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.content = content
    resp.text = text if text is not None else content.decode("utf-8", "replace")
    resp.headers = {"content-type": content_type} if content_type else {}
    return resp


def footnote(*items) -> ContainerNode:
    """Footnote with one paragraph per item; an item is text or a list of runs."""
    children = []
    for item in items:
        if isinstance(item, str):
            children.append(TextNode((TextRun(item),)))
        else:
            children.append(TextNode(tuple(item)))
    return ContainerNode(tuple(children))


# =============================================================================
# Fakes
# =============================================================================

class FakeTable:
    """Records what the pipeline writes into the table."""

    def __init__(self, rows: int, cols: int):
        self.rows = rows
        self.cols = cols
        self.text: dict[tuple[int, int], str] = {}
        self.images: dict[tuple[int, int], tuple[QrImage, int]] = {}

    def set_text(self, row, col, text):
        self.text[(row, col)] = text

    def insert_image(self, row, col, image, width_px):
        self.images[(row, col)] = (image, width_px)
        return True


class FakeDocument:
    """In-memory document collaborator."""

    def __init__(self, footnotes=None, body=None):
        self._footnotes = list(footnotes or [])
        self.body = list(body or [])
        self.tables: list[FakeTable] = []
        self.plans = []

    def footnotes(self):
        return self._footnotes

    def find_placeholder(self, marker):
        for i, text in enumerate(self.body):
            if marker in text:
                return i
        return None

    def insert_table(self, location, marker, rows, cols):
        self.body[location] = self.body[location].replace(marker, "", 1)
        table = FakeTable(rows, cols)
        self.tables.append(table)
        return table

    def apply_merge_plan(self, table, plan):
        self.plans.append(plan)

    @property
    def mutated(self) -> bool:
        return bool(self.tables or self.plans)


class FakeTitles:
    def __init__(self, titles=None):
        self.titles = titles or {}
        self.calls = []

    def resolve(self, url):
        self.calls.append(url)
        return self.titles.get(url)


class FakeQr:
    def __init__(self, failing=()):
        self.failing = set(failing)
        self.calls = []

    def acquire(self, url, size_px=600):
        from footnote_qr_table.qr_acquirer import QrGenerationError

        self.calls.append((url, size_px))
        if url in self.failing:
            raise QrGenerationError(url, [("fake", "boom")])
        return QrImage(make_png(), "image/png", source="fake")


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def config() -> Config:
    """Defaults with pacing disabled and a single worker for determinism."""
    return Config(qr_pacing_seconds=0.0, max_workers=1)
