"""Merge/alignment plan for the reference table.

Every entry takes two rows of a three-column grid::

    row 2i     | ref | title | qr |
    row 2i+1   | ref |     url    |

The ref cell spans both rows and the url cell spans the title and qr
columns. Ref, title and qr cells are centred vertically.
"""
from .models import CellRange, LayoutInstruction, LayoutOp, MergePlan

TABLE_COLUMNS = 3
ROWS_PER_ENTRY = 2

REF_COL = 0
TITLE_COL = 1
QR_COL = 2
URL_COL = 1


def entry_instructions(i: int) -> list[LayoutInstruction]:
    """The five layout steps for entry i (0-based)."""
    top = ROWS_PER_ENTRY * i
    bottom = top + 1
    ref_cell = CellRange(top, bottom, REF_COL, REF_COL)
    return [
        LayoutInstruction(LayoutOp.MERGE_CELLS, ref_cell, "ref"),
        LayoutInstruction(LayoutOp.MERGE_CELLS, CellRange(bottom, bottom, URL_COL, QR_COL), "url"),
        LayoutInstruction(LayoutOp.ALIGN_MIDDLE, ref_cell, "ref"),
        LayoutInstruction(LayoutOp.ALIGN_MIDDLE, CellRange(top, top, TITLE_COL, TITLE_COL), "title"),
        LayoutInstruction(LayoutOp.ALIGN_MIDDLE, CellRange(top, top, QR_COL, QR_COL), "qr"),
    ]


def plan_layout(entry_count: int) -> MergePlan:
    """Build the merge plan for a table holding entry_count entries."""
    if entry_count < 0:
        raise ValueError(f"entry_count must be >= 0, got {entry_count}")
    instructions = []
    for i in range(entry_count):
        instructions.extend(entry_instructions(i))
    return MergePlan(
        rows=ROWS_PER_ENTRY * entry_count,
        cols=TABLE_COLUMNS,
        instructions=tuple(instructions),
    )
