#!/usr/bin/env python
"""CLI for inserting a QR reference table into a Word document."""
import argparse
import json
import logging
from pathlib import Path
from footnote_qr_table.config import Config
from footnote_qr_table.docx_document import DocxFootnoteDocument
from footnote_qr_table.pipeline import build_reference_table
from footnote_qr_table.references import assign_references
from footnote_qr_table.url_extractor import extract_urls


def _truncate(s: str, maxlen: int = 60) -> str:
    return s[:maxlen - 1] + "…" if len(s) > maxlen else s


def main(argv=None):
    parser = argparse.ArgumentParser(description="Build a QR code reference table from footnote URLs")
    parser.add_argument("input", type=str, help="Path to the .docx file")
    parser.add_argument("-o", "--output", type=str, help="Output path (default: overwrite input)")
    parser.add_argument("--config", type=str, help="Path to config file")
    parser.add_argument("--placeholder", type=str, help="Marker text to replace with the table")
    parser.add_argument("--dry-run", action="store_true", help="List references only; no network, no changes")
    parser.add_argument("--json", action="store_true", help="Print the outcome as JSON")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s"
    )

    config = Config.load(args.config)

    # Override config from CLI flags
    if args.placeholder:
        config.placeholder = args.placeholder

    errors = config.validate()
    if errors:
        for e in errors:
            logging.error(e)
        return 1

    input_path = Path(args.input).expanduser()
    if not input_path.is_file():
        logging.error(f"File not found: {input_path}")
        return 1
    document = DocxFootnoteDocument.open(input_path, table_style=config.table_style)

    if args.dry_run:
        stubs = assign_references(extract_urls(document.footnotes()), cap=config.max_references)
        print(f"\n{len(stubs)} reference(s) in footnotes:")
        for stub in stubs:
            print(f"  {stub.ref}  {_truncate(stub.url, 90)}")
        return 0

    outcome = build_reference_table(document, config)
    if args.json:
        print(json.dumps(outcome.to_dict(), indent=2))
    if not outcome.ok:
        logging.error(outcome.message)
        return 1

    output_path = Path(args.output).expanduser() if args.output else input_path
    document.save(output_path)

    if not args.json:
        print(f"\n{outcome.message}")
        for resolved in outcome.entries:
            entry = resolved.entry
            qr = resolved.qr_image.source if resolved.qr_image else "FAILED"
            print(f"  {entry.ref}  [{qr}]  {_truncate(entry.title or '', 50)}  {_truncate(entry.url)}")
        print(f"\nSaved to: {output_path}")
    return 0


if __name__ == "__main__":
    exit(main())
