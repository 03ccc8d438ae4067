"""Positional reference identifiers (01..FF)."""
import logging

from .models import EntryStub

logger = logging.getLogger(__name__)

MAX_REFERENCES = 255


def to_hex2(n: int, cap: int = MAX_REFERENCES) -> str:
    """Clamp n to [1, cap] and format as two uppercase hex digits.

    Values past the cap all map to the cap's identifier (FF by default),
    so references beyond 255 collide.
    """
    n = min(max(n, 1), cap)
    return format(n, "02X")


def assign_references(urls: list[str], cap: int = MAX_REFERENCES) -> list[EntryStub]:
    """Pair each URL with the identifier of its 1-based position."""
    if len(urls) > cap:
        logger.warning(
            f"{len(urls)} URLs exceed the {cap}-reference limit; "
            f"entries past {cap} share identifier {to_hex2(cap, cap)}"
        )
    return [EntryStub(ref=to_hex2(i, cap), url=url) for i, url in enumerate(urls, start=1)]
