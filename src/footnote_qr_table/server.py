"""MCP server exposing the footnote QR table tools."""
import logging
from dataclasses import replace
from pathlib import Path

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from .config import Config
from .docx_document import DocxFootnoteDocument
from .pipeline import build_reference_table
from .references import assign_references
from .url_extractor import extract_urls

logger = logging.getLogger(__name__)

mcp = FastMCP("footnote-qr-table")

# Lazy initialization
_config = None


def _get_config() -> Config:
    global _config
    if _config is None:
        config = Config.load()
        errors = config.validate()
        if errors:
            raise ToolError("Invalid configuration: " + "; ".join(errors))
        _config = config
    return _config


def _open_document(docx_path: str, config: Config) -> DocxFootnoteDocument:
    path = Path(docx_path).expanduser()
    if not path.is_file():
        raise ToolError(f"File not found: {path}")
    try:
        return DocxFootnoteDocument.open(path, table_style=config.table_style)
    except Exception as e:
        raise ToolError(f"Cannot open {path} as .docx: {type(e).__name__}: {e}") from e


def _list_urls(docx_path: str) -> list[dict]:
    config = _get_config()
    document = _open_document(docx_path, config)
    urls = extract_urls(document.footnotes())
    return [{"ref": s.ref, "url": s.url} for s in assign_references(urls, cap=config.max_references)]


def _build_table(docx_path: str, output_path: str | None = None, placeholder: str | None = None) -> dict:
    config = _get_config()
    if placeholder:
        config = replace(config, placeholder=placeholder)
    document = _open_document(docx_path, config)

    outcome = build_reference_table(document, config)
    if not outcome.ok:
        raise ToolError(outcome.message)

    target = Path(output_path).expanduser() if output_path else Path(docx_path).expanduser()
    document.save(target)
    logger.info(f"Saved {target}")
    result = outcome.to_dict()
    result["output_path"] = str(target)
    return result


@mcp.tool()
def list_footnote_urls(docx_path: str) -> list[dict]:
    """
    List the URLs found in a Word document's footnotes with their reference IDs.

    No network calls are made and the document is not modified.

    Args:
        docx_path: Path to a .docx file

    Returns:
        List of {"ref": "01", "url": "https://..."} in first-occurrence order
    """
    return _list_urls(docx_path)


@mcp.tool()
def build_qr_table(docx_path: str, output_path: str | None = None, placeholder: str | None = None) -> dict:
    """
    Replace the placeholder text in a Word document with a reference table.

    Each footnote URL gets a hex reference, its page title and a QR code.
    Titles that cannot be fetched use a fallback label; QR codes that cannot
    be generated leave a visible marker in the cell.

    Args:
        docx_path: Path to a .docx file
        output_path: Where to save the result (default: overwrite docx_path)
        placeholder: Marker text to replace (default from config, "QRCodeTable")

    Returns:
        Status, counts, and per-entry ref/url/title/QR source
    """
    return _build_table(docx_path, output_path=output_path, placeholder=placeholder)


if __name__ == "__main__":
    mcp.run()
