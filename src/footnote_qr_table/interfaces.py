"""
Protocol definitions for the collaborators the pipeline talks to.
"""
from typing import Any, Protocol

from .models import ContainerNode, MergePlan, QrImage


class TableHandleProtocol(Protocol):
    """A freshly inserted table with fixed rows/columns."""

    def set_text(self, row: int, col: int, text: str) -> None:
        """Write text into a cell."""
        ...

    def insert_image(self, row: int, col: int, image: QrImage, width_px: int) -> bool:
        """Place an image in a cell. Returns False if the image was unusable."""
        ...


class FootnoteDocumentProtocol(Protocol):
    """Interface for the host document: footnote reader plus mutator."""

    def footnotes(self) -> list[ContainerNode]:
        """Footnote roots in document order."""
        ...

    def find_placeholder(self, marker: str) -> Any | None:
        """Locate the marker text. Returns an opaque location or None."""
        ...

    def insert_table(self, location: Any, marker: str, rows: int, cols: int) -> TableHandleProtocol:
        """Delete the marker at location and insert an empty table there."""
        ...

    def apply_merge_plan(self, table: TableHandleProtocol, plan: MergePlan) -> None:
        """Apply all merge/alignment instructions as one batch."""
        ...


class TitleResolverProtocol(Protocol):
    """Interface for page title lookup."""

    def resolve(self, url: str) -> str | None:
        """Return the page title or None. Must not raise."""
        ...


class QrAcquirerProtocol(Protocol):
    """Interface for QR image acquisition."""

    def acquire(self, url: str, size_px: int = 600) -> QrImage:
        """Return a QR image or raise QrGenerationError."""
        ...
