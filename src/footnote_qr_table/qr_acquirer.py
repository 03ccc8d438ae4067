"""QR code acquisition through an ordered chain of remote generators.

Each generator is tried once, in order. The first response that carries a
non-empty image wins; every failure is logged, followed by a fixed pause
before the next generator so that long runs stay under per-client rate
limits. When the whole chain fails, QrGenerationError is raised.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable
from urllib.parse import quote

import httpx

from .models import QrImage

logger = logging.getLogger(__name__)

ACCEPT_HEADER = "image/png,*/*;q=0.8"


class QrGenerationError(Exception):
    """Raised when every generator in the chain failed for a URL."""

    def __init__(self, url: str, failures: list[tuple[str, str]]):
        self.url = url
        self.failures = failures
        reasons = "; ".join(f"{name}: {reason}" for name, reason in failures)
        super().__init__(f"No QR generator succeeded for {url} ({reasons})")


@dataclass(frozen=True)
class QrGenerator:
    """A remote QR endpoint described by a URL template.

    The template receives ``{data}`` (the URL-encoded target) and
    ``{size}`` (requested pixel width).
    """
    name: str
    template: str

    def request_url(self, url: str, size_px: int) -> str:
        return self.template.format(data=quote(url, safe=""), size=size_px)


# Primary first, most tolerant/legacy last
BUILTIN_GENERATORS: dict[str, QrGenerator] = {
    "qrserver": QrGenerator(
        "qrserver",
        "https://api.qrserver.com/v1/create-qr-code/?size={size}x{size}&format=png&data={data}",
    ),
    "quickchart": QrGenerator(
        "quickchart",
        "https://quickchart.io/qr?size={size}&format=png&margin=1&text={data}",
    ),
    "image_charts": QrGenerator(
        "image_charts",
        "https://image-charts.com/chart?cht=qr&chs={size}x{size}&chl={data}",
    ),
}


def generators_from_config(names: list[str]) -> list[QrGenerator]:
    """Resolve config entries (built-in names or URL templates) to generators."""
    generators = []
    for i, entry in enumerate(names):
        if entry in BUILTIN_GENERATORS:
            generators.append(BUILTIN_GENERATORS[entry])
        elif "{data}" in entry:
            generators.append(QrGenerator(f"custom-{i + 1}", entry))
        else:
            raise ValueError(f"Unknown QR generator: {entry!r}")
    return generators


@dataclass
class FallbackPolicy:
    """Fixed pause between attempts; attempts are bounded by the chain length."""
    pacing_seconds: float = 0.5
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def pause(self) -> None:
        if self.pacing_seconds > 0:
            self.sleep(self.pacing_seconds)


class QrAcquirer:
    """Obtain a QR image for a URL, falling back across generators."""

    def __init__(
        self,
        generators: list[QrGenerator],
        policy: FallbackPolicy | None = None,
        timeout: float = 15.0,
        user_agent: str | None = None,
    ):
        if not generators:
            raise ValueError("QrAcquirer needs at least one generator")
        self.generators = list(generators)
        self.policy = policy or FallbackPolicy()
        self.timeout = timeout
        self.headers = {"Accept": ACCEPT_HEADER}
        if user_agent:
            self.headers["User-Agent"] = user_agent

    def _fetch(self, generator: QrGenerator, url: str, size_px: int) -> QrImage:
        """Single attempt. Raises ValueError on an unusable response."""
        resp = httpx.get(
            generator.request_url(url, size_px),
            headers=self.headers,
            follow_redirects=True,
            verify=True,
            timeout=self.timeout,
        )
        if not 200 <= resp.status_code < 400:
            raise ValueError(f"HTTP {resp.status_code}")
        image = QrImage(
            data=resp.content,
            content_type=resp.headers.get("content-type", ""),
            source=generator.name,
        )
        if not image.is_valid:
            raise ValueError(
                f"not an image ({image.content_type or 'no content-type'}, {len(image.data)} bytes)"
            )
        return image

    def acquire(self, url: str, size_px: int = 600) -> QrImage:
        """
        Get a QR code for a URL.

        Args:
            url: Target the QR code should encode
            size_px: Requested pixel width/height

        Returns:
            QrImage from the first generator that succeeded

        Raises:
            QrGenerationError: If every generator failed
        """
        failures: list[tuple[str, str]] = []
        last = len(self.generators) - 1
        for attempt, generator in enumerate(self.generators):
            try:
                image = self._fetch(generator, url, size_px)
                logger.debug(f"QR for {url} from {generator.name} ({len(image.data)} bytes)")
                return image
            except Exception as e:
                failures.append((generator.name, f"{type(e).__name__}: {e}"))
                logger.warning(
                    f"QR generator {generator.name} failed for {url} "
                    f"(attempt {attempt + 1}/{len(self.generators)}): {type(e).__name__}: {e}"
                )
            if attempt < last:
                self.policy.pause()
        raise QrGenerationError(url, failures)
