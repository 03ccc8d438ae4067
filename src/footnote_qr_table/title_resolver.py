"""Best-effort page title lookup."""
import logging
import re

import httpx

logger = logging.getLogger(__name__)

TITLE_PATTERN = re.compile(r"<title>(.*?)</title>", re.IGNORECASE | re.DOTALL)

# Applied in listed order
HTML_ENTITIES = (
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&#39;", "'"),
    ("&apos;", "'"),
    ("&quot;", '"'),
)


def clean_title(raw: str) -> str | None:
    """Collapse whitespace, trim, decode the handful of entities titles use."""
    title = re.sub(r"\s+", " ", raw).strip()
    for entity, char in HTML_ENTITIES:
        title = title.replace(entity, char)
    title = title.strip()
    return title or None


def extract_title(html: str) -> str | None:
    """Return the cleaned <title> text of an HTML page, or None."""
    match = TITLE_PATTERN.search(html)
    if not match:
        return None
    return clean_title(match.group(1))


class TitleResolver:
    """Fetch a page and read its <title>. Never raises."""

    def __init__(self, timeout: float = 15.0, user_agent: str | None = None):
        self.timeout = timeout
        self.headers = {}
        if user_agent:
            self.headers["User-Agent"] = user_agent

    def resolve(self, url: str) -> str | None:
        """
        Look up the display title for a URL.

        Args:
            url: Absolute http(s) URL

        Returns:
            Cleaned title, or None on any failure or when the page has none
        """
        try:
            resp = httpx.get(
                url,
                headers=self.headers,
                follow_redirects=True,
                verify=True,
                timeout=self.timeout,
            )
            if not 200 <= resp.status_code < 400:
                logger.debug(f"Title lookup for {url} returned HTTP {resp.status_code}")
                return None
            return extract_title(resp.text)
        except Exception as e:
            logger.debug(f"Title lookup failed for {url}: {type(e).__name__}: {e}")
            return None
