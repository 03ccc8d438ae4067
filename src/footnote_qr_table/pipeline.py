"""Extract URLs from footnotes and build the QR reference table."""
import concurrent.futures
import logging

from .config import Config
from .interfaces import (
    FootnoteDocumentProtocol,
    QrAcquirerProtocol,
    TableHandleProtocol,
    TitleResolverProtocol,
)
from .models import BuildOutcome, EntryStub, OutcomeStatus, ResolvedEntry
from .qr_acquirer import FallbackPolicy, QrAcquirer, QrGenerationError, generators_from_config
from .references import assign_references
from .table_layout import QR_COL, REF_COL, ROWS_PER_ENTRY, TABLE_COLUMNS, TITLE_COL, URL_COL, plan_layout
from .title_resolver import TitleResolver
from .url_extractor import extract_urls

logger = logging.getLogger(__name__)


def default_resolvers(config: Config) -> tuple[TitleResolver, QrAcquirer]:
    """Network-backed title resolver and QR acquirer built from config."""
    titles = TitleResolver(timeout=config.request_timeout, user_agent=config.user_agent)
    qr = QrAcquirer(
        generators_from_config(config.qr_generators),
        policy=FallbackPolicy(pacing_seconds=config.qr_pacing_seconds),
        timeout=config.request_timeout,
        user_agent=config.user_agent,
    )
    return titles, qr


def resolve_entry(
    stub: EntryStub,
    titles: TitleResolverProtocol,
    qr: QrAcquirerProtocol,
    config: Config,
) -> ResolvedEntry:
    """Title and QR for one entry; failures become values, never exceptions."""
    title = titles.resolve(stub.url)
    if title is None:
        title = config.fallback_title
    entry = stub.with_title(title)
    try:
        image = qr.acquire(stub.url, config.qr_size_px)
    except QrGenerationError as e:
        logger.warning(f"[{stub.ref}] {e}")
        return ResolvedEntry(entry=entry, qr_error=str(e))
    return ResolvedEntry(entry=entry, qr_image=image)


def resolve_entries(
    stubs: list[EntryStub],
    titles: TitleResolverProtocol,
    qr: QrAcquirerProtocol,
    config: Config,
) -> list[ResolvedEntry]:
    """
    Resolve entries concurrently, returned in the order of stubs.

    Each entry's QR fallback chain still runs sequentially inside its own
    worker; max_workers bounds how many entries hit the network at once.
    """
    if not stubs:
        return []
    results: list[ResolvedEntry | None] = [None] * len(stubs)
    with concurrent.futures.ThreadPoolExecutor(max_workers=config.max_workers) as executor:
        futures = {
            executor.submit(resolve_entry, stub, titles, qr, config): i
            for i, stub in enumerate(stubs)
        }
        for future in concurrent.futures.as_completed(futures):
            i = futures[future]
            try:
                results[i] = future.result()
            except Exception as e:
                # A misbehaving collaborator must not sink sibling entries
                stub = stubs[i]
                logger.error(f"[{stub.ref}] Resolution failed for {stub.url}: {type(e).__name__}: {e}")
                results[i] = ResolvedEntry(
                    entry=stub.with_title(config.fallback_title),
                    qr_error=f"{type(e).__name__}: {e}",
                )
    return results


def fill_table(table: TableHandleProtocol, entries: list[ResolvedEntry], config: Config) -> None:
    """Write ref/title/QR on each top sub-row and the URL on the bottom one."""
    for i, resolved in enumerate(entries):
        top = ROWS_PER_ENTRY * i
        entry = resolved.entry
        table.set_text(top, REF_COL, entry.ref)
        table.set_text(top, TITLE_COL, entry.title or config.fallback_title)
        placed = False
        if resolved.qr_image is not None:
            placed = table.insert_image(top, QR_COL, resolved.qr_image, config.qr_display_px)
        if not placed:
            table.set_text(top, QR_COL, config.qr_failure_marker)
        table.set_text(top + 1, URL_COL, entry.url)


def build_reference_table(
    document: FootnoteDocumentProtocol,
    config: Config | None = None,
    titles: TitleResolverProtocol | None = None,
    qr: QrAcquirerProtocol | None = None,
) -> BuildOutcome:
    """
    Replace the placeholder in document with the QR reference table.

    The document is only mutated once URLs exist and the placeholder has
    been found; otherwise the returned outcome explains why nothing happened.

    Args:
        document: Host document collaborator
        config: Settings (defaults when omitted)
        titles: Title resolver (network-backed when omitted)
        qr: QR acquirer (network-backed when omitted)

    Returns:
        BuildOutcome describing what was inserted or why the run aborted
    """
    config = config or Config()
    urls = extract_urls(document.footnotes())
    if not urls:
        logger.warning("No URLs found in footnotes")
        return BuildOutcome(OutcomeStatus.NO_URLS, "No URLs found in footnotes.")

    location = document.find_placeholder(config.placeholder)
    if location is None:
        logger.warning(f"Placeholder {config.placeholder!r} not found")
        return BuildOutcome(
            OutcomeStatus.PLACEHOLDER_MISSING,
            f"Placeholder text '{config.placeholder}' not found in document.",
        )

    if titles is None or qr is None:
        default_titles, default_qr = default_resolvers(config)
        titles = titles or default_titles
        qr = qr or default_qr

    stubs = assign_references(urls, cap=config.max_references)
    logger.info(f"Resolving titles and QR codes for {len(stubs)} URLs")
    entries = resolve_entries(stubs, titles, qr, config)

    plan = plan_layout(len(entries))
    table = document.insert_table(location, config.placeholder, plan.rows, TABLE_COLUMNS)
    fill_table(table, entries, config)
    document.apply_merge_plan(table, plan)

    outcome = BuildOutcome(
        OutcomeStatus.INSERTED,
        f"Inserted table with {len(entries)} references.",
        entries=entries,
    )
    if outcome.qr_failures:
        outcome.message += f" {outcome.qr_failures} QR code(s) could not be generated."
    logger.info(outcome.message)
    return outcome
