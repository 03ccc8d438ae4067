"""
All dataclasses for the system. No dependencies on implementation modules.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Union


# =============================================================================
# DOCUMENT TREE MODELS
# =============================================================================

@dataclass(frozen=True)
class TextRun:
    """A run of characters sharing one (optional) hyperlink target."""
    text: str
    link: str | None = None


@dataclass(frozen=True)
class TextNode:
    """A text-bearing node: ordered runs, each possibly hyperlinked."""
    runs: tuple[TextRun, ...] = ()

    @property
    def text(self) -> str:
        return "".join(r.text for r in self.runs)

    @property
    def links(self) -> list[str]:
        """Hyperlink targets in run order (runs without a link are skipped)."""
        return [r.link for r in self.runs if r.link]


@dataclass(frozen=True)
class ContainerNode:
    """A node with ordered children (footnote, table, cell, ...)."""
    children: tuple[FootnoteNode, ...] = ()


FootnoteNode = Union[ContainerNode, TextNode]


# =============================================================================
# ENTRY MODELS
# =============================================================================

@dataclass(frozen=True)
class EntryStub:
    """A URL with its positional reference, before title resolution."""
    ref: str   # Hex2, e.g. "0A"
    url: str

    def with_title(self, title: str | None) -> Entry:
        return Entry(ref=self.ref, url=self.url, title=title)


@dataclass(frozen=True)
class Entry:
    """One row of the reference table."""
    ref: str
    url: str
    title: str | None


@dataclass(frozen=True)
class QrImage:
    """Raster QR code returned by a remote generator."""
    data: bytes
    content_type: str
    source: str = ""   # Name of the generator that produced it

    @property
    def is_valid(self) -> bool:
        """Non-empty payload with an image-like content type."""
        ct = (self.content_type or "").lower()
        return len(self.data) > 0 and ("image" in ct or "png" in ct)


@dataclass(frozen=True)
class ResolvedEntry:
    """An entry joined with its QR acquisition result."""
    entry: Entry
    qr_image: QrImage | None = None
    qr_error: str | None = None   # Set when every generator failed


# =============================================================================
# TABLE LAYOUT MODELS
# =============================================================================

class LayoutOp(enum.Enum):
    """Formatting operation applied to a rectangular cell range."""

    MERGE_CELLS = "merge_cells"
    ALIGN_MIDDLE = "align_middle"


@dataclass(frozen=True)
class CellRange:
    """Inclusive rectangular range of table cells."""
    row_start: int
    row_end: int
    col_start: int
    col_end: int

    @property
    def row_span(self) -> int:
        return self.row_end - self.row_start + 1

    @property
    def col_span(self) -> int:
        return self.col_end - self.col_start + 1


@dataclass(frozen=True)
class LayoutInstruction:
    """One merge or style step of a MergePlan."""
    op: LayoutOp
    cells: CellRange
    role: str   # "ref", "url", "title" or "qr"


@dataclass(frozen=True)
class MergePlan:
    """Ordered, immutable batch of layout instructions for one table."""
    rows: int
    cols: int
    instructions: tuple[LayoutInstruction, ...]

    def __len__(self) -> int:
        return len(self.instructions)

    def of_op(self, op: LayoutOp) -> list[LayoutInstruction]:
        return [i for i in self.instructions if i.op is op]


# =============================================================================
# OUTCOME MODELS
# =============================================================================

class OutcomeStatus(enum.Enum):
    """How a table build ended."""

    INSERTED = "inserted"
    NO_URLS = "no_urls"
    PLACEHOLDER_MISSING = "placeholder_missing"


@dataclass
class BuildOutcome:
    """Result of one invocation, rendered by the caller as a user notice."""
    status: OutcomeStatus
    message: str
    entries: list[ResolvedEntry] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.INSERTED

    @property
    def qr_failures(self) -> int:
        return sum(1 for e in self.entries if e.qr_image is None)

    def to_dict(self) -> dict:
        """JSON-serializable summary (image bytes omitted)."""
        return {
            "status": self.status.value,
            "message": self.message,
            "entry_count": len(self.entries),
            "qr_failures": self.qr_failures,
            "entries": [
                {
                    "ref": e.entry.ref,
                    "url": e.entry.url,
                    "title": e.entry.title,
                    "qr_source": e.qr_image.source if e.qr_image else None,
                    "qr_error": e.qr_error,
                }
                for e in self.entries
            ],
        }
