"""Discover, normalize and deduplicate URLs from footnote trees."""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from urllib.parse import urlsplit, urlunsplit

from .models import ContainerNode, FootnoteNode, TextNode

logger = logging.getLogger(__name__)

# scheme:// then anything up to whitespace, brackets or quotes
URL_PATTERN = re.compile(r"""[a-zA-Z][a-zA-Z0-9+.\-]*://[^\s<>()\[\]{}"']+""")

VALID_SCHEMES = ("http", "https")


def normalize_url(raw: str) -> str:
    """Trim and re-serialize through urllib; keep the trimmed text if parsing fails."""
    trimmed = raw.strip()
    try:
        parts = urlsplit(trimmed)
        if not parts.scheme or not parts.netloc:
            return trimmed
        # Touch .port so malformed ports raise here instead of passing through
        parts.port
        path = parts.path or "/"
        return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, parts.query, parts.fragment))
    except ValueError:
        logger.debug(f"Keeping unparseable URL verbatim: {trimmed!r}")
        return trimmed


def is_valid_url(url: str) -> bool:
    """Only http(s) URLs count."""
    scheme, sep, _ = url.partition("://")
    return bool(sep) and scheme.lower() in VALID_SCHEMES


def iter_text_nodes(node: FootnoteNode) -> Iterator[TextNode]:
    """Depth-first walk yielding text-bearing nodes in document order."""
    if isinstance(node, TextNode):
        yield node
    elif isinstance(node, ContainerNode):
        for child in node.children:
            yield from iter_text_nodes(child)
    else:
        raise TypeError(f"Unsupported footnote node: {type(node).__name__}")


def urls_in_text_node(node: TextNode) -> list[str]:
    """Hyperlink targets first, then plain-text matches, all normalized and filtered."""
    found = []
    for candidate in [*node.links, *URL_PATTERN.findall(node.text)]:
        url = normalize_url(candidate)
        if is_valid_url(url):
            found.append(url)
    return found


def extract_urls(footnotes: Iterable[FootnoteNode]) -> list[str]:
    """
    Collect unique http(s) URLs from footnotes in first-occurrence order.

    Args:
        footnotes: Footnote roots in document order

    Returns:
        Deduplicated list of normalized URLs
    """
    seen: set[str] = set()
    urls = []
    for footnote in footnotes:
        for text_node in iter_text_nodes(footnote):
            for url in urls_in_text_node(text_node):
                if url not in seen:
                    seen.add(url)
                    urls.append(url)
    logger.debug(f"Extracted {len(urls)} unique URLs")
    return urls
