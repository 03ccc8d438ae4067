"""Footnote URL QR reference tables."""
from .models import (
    TextRun,
    TextNode,
    ContainerNode,
    EntryStub,
    Entry,
    QrImage,
    ResolvedEntry,
    CellRange,
    LayoutOp,
    LayoutInstruction,
    MergePlan,
    OutcomeStatus,
    BuildOutcome,
)

__all__ = [
    "TextRun",
    "TextNode",
    "ContainerNode",
    "EntryStub",
    "Entry",
    "QrImage",
    "ResolvedEntry",
    "CellRange",
    "LayoutOp",
    "LayoutInstruction",
    "MergePlan",
    "OutcomeStatus",
    "BuildOutcome",
]
