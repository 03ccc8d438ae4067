"""python-docx adapter: footnote reading and table insertion for .docx files."""
from __future__ import annotations

import io
import logging
import re
from pathlib import Path

from docx import Document
from docx.enum.table import WD_ALIGN_VERTICAL
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.image.exceptions import (
    InvalidImageStreamError,
    UnexpectedEndOfFileError,
    UnrecognizedImageError,
)
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.oxml import parse_xml
from docx.oxml.ns import qn
from docx.shared import Emu
from docx.table import Table
from docx.text.paragraph import Paragraph

from .models import ContainerNode, FootnoteNode, LayoutOp, MergePlan, QrImage, TextNode, TextRun

logger = logging.getLogger(__name__)

EMU_PER_PX = 9525  # 96 dpi

SEPARATOR_TYPES = {"separator", "continuationSeparator", "continuationNotice"}

FIELD_HYPERLINK = re.compile(r'HYPERLINK\s+"([^"]+)"')


# =============================================================================
# FOOTNOTE XML -> NODE TREE
# =============================================================================

def _run_text(r) -> str:
    parts = []
    for child in r:
        if child.tag == qn("w:t"):
            parts.append(child.text or "")
        elif child.tag == qn("w:tab"):
            parts.append("\t")
        elif child.tag in (qn("w:br"), qn("w:cr")):
            parts.append("\n")
    return "".join(parts)


def _hyperlink_target(r, link_targets: dict[str, str]) -> str | None:
    """External target of the w:hyperlink enclosing run r, if any."""
    node = r.getparent()
    while node is not None and node.tag != qn("w:p"):
        if node.tag == qn("w:hyperlink"):
            rid = node.get(qn("r:id"))
            return link_targets.get(rid) if rid else None
        node = node.getparent()
    return None


def _paragraph_node(p, link_targets: dict[str, str]) -> TextNode:
    runs = []
    # Field-code instruction text, collected from fldChar begin until separate/end;
    # Word may split it over several runs
    instr_parts: list[str] | None = None
    for el in p.iter(qn("w:r"), qn("w:fldSimple")):
        if el.tag == qn("w:fldSimple"):
            m = FIELD_HYPERLINK.search(el.get(qn("w:instr"), ""))
            if m:
                runs.append(TextRun("", link=m.group(1)))
            continue
        for fld in el.iter(qn("w:fldChar"), qn("w:instrText")):
            if fld.tag == qn("w:instrText"):
                if instr_parts is not None:
                    instr_parts.append(fld.text or "")
            elif fld.get(qn("w:fldCharType")) == "begin":
                instr_parts = []
            elif instr_parts is not None:
                m = FIELD_HYPERLINK.search("".join(instr_parts))
                if m:
                    runs.append(TextRun("", link=m.group(1)))
                instr_parts = None
        text = _run_text(el)
        link = _hyperlink_target(el, link_targets)
        if text or link:
            runs.append(TextRun(text, link=link))
    return TextNode(tuple(runs))


def _element_node(el, link_targets: dict[str, str]) -> FootnoteNode | None:
    if el.tag == qn("w:p"):
        return _paragraph_node(el, link_targets)
    children = []
    for child in el:
        node = _element_node(child, link_targets)
        if node is not None:
            children.append(node)
    if not children:
        return None
    return ContainerNode(tuple(children))


def footnotes_from_xml(xml: bytes | str, link_targets: dict[str, str] | None = None) -> list[ContainerNode]:
    """
    Convert a word/footnotes.xml payload into footnote trees.

    Args:
        xml: Serialized w:footnotes element
        link_targets: Relationship id -> external URL for w:hyperlink r:id

    Returns:
        One ContainerNode per real (non-separator) footnote, in order
    """
    link_targets = link_targets or {}
    if isinstance(xml, str):
        xml = xml.encode("utf-8")
    root = parse_xml(xml)
    footnotes = []
    for fn in root.iter(qn("w:footnote")):
        if fn.get(qn("w:type")) in SEPARATOR_TYPES:
            continue
        node = _element_node(fn, link_targets)
        footnotes.append(node if isinstance(node, ContainerNode) else ContainerNode())
    return footnotes


# =============================================================================
# DOCUMENT ADAPTER
# =============================================================================

class DocxTable:
    """Table handle backed by a python-docx Table."""

    def __init__(self, table: Table):
        self.table = table

    def set_text(self, row: int, col: int, text: str) -> None:
        self.table.cell(row, col).text = text

    def insert_image(self, row: int, col: int, image: QrImage, width_px: int) -> bool:
        cell = self.table.cell(row, col)
        paragraph = cell.paragraphs[0]
        try:
            paragraph.add_run().add_picture(io.BytesIO(image.data), width=Emu(width_px * EMU_PER_PX))
        except (UnrecognizedImageError, UnexpectedEndOfFileError, InvalidImageStreamError):
            logger.warning(f"Unreadable image from {image.source or 'generator'} ({image.content_type})")
            return False
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
        return True


class DocxFootnoteDocument:
    """A .docx file as footnote source and table destination."""

    def __init__(self, document, table_style: str | None = "Table Grid"):
        self.document = document
        self.table_style = table_style

    @classmethod
    def open(cls, path: Path | str, table_style: str | None = "Table Grid") -> DocxFootnoteDocument:
        return cls(Document(str(path)), table_style=table_style)

    def save(self, path: Path | str) -> None:
        self.document.save(str(path))

    def _footnotes_part(self):
        for rel in self.document.part.rels.values():
            if rel.reltype == RT.FOOTNOTES and not rel.is_external:
                return rel.target_part
        return None

    def footnotes(self) -> list[ContainerNode]:
        part = self._footnotes_part()
        if part is None:
            logger.debug("Document has no footnotes part")
            return []
        link_targets = {
            rid: rel.target_ref
            for rid, rel in part.rels.items()
            if rel.reltype == RT.HYPERLINK and rel.is_external
        }
        return footnotes_from_xml(part.blob, link_targets)

    def find_placeholder(self, marker: str) -> Paragraph | None:
        for paragraph in self.document.paragraphs:
            if marker in paragraph.text:
                return paragraph
        return None

    def _remove_marker(self, paragraph: Paragraph, marker: str) -> None:
        for run in paragraph.runs:
            if marker in run.text:
                run.text = run.text.replace(marker, "", 1)
                return
        # Marker split across runs: collapse the paragraph text into the first run
        runs = paragraph.runs
        if not runs:
            return
        runs[0].text = paragraph.text.replace(marker, "", 1)
        for run in runs[1:]:
            run._r.getparent().remove(run._r)

    def insert_table(self, location: Paragraph, marker: str, rows: int, cols: int) -> DocxTable:
        self._remove_marker(location, marker)
        table = self.document.add_table(rows=rows, cols=cols)
        if self.table_style:
            try:
                table.style = self.table_style
            except KeyError:
                logger.warning(f"Table style {self.table_style!r} not defined in document; using default")

        tbl = table._tbl
        if location.text.strip():
            location._p.addnext(tbl)
        else:
            location._p.addprevious(tbl)
            location._p.getparent().remove(location._p)
        return DocxTable(table)

    def apply_merge_plan(self, table: DocxTable, plan: MergePlan) -> None:
        t = table.table
        for instruction in plan.instructions:
            cells = instruction.cells
            first = t.cell(cells.row_start, cells.col_start)
            if instruction.op is LayoutOp.MERGE_CELLS:
                first.merge(t.cell(cells.row_end, cells.col_end))
            elif instruction.op is LayoutOp.ALIGN_MIDDLE:
                first.vertical_alignment = WD_ALIGN_VERTICAL.CENTER
            else:
                raise ValueError(f"Unsupported layout op: {instruction.op}")
        logger.debug(f"Applied {len(plan)} layout instructions")
