"""Configuration management."""
from dataclasses import dataclass, field
from pathlib import Path
import json
import os

DEFAULT_GENERATORS = ["qrserver", "quickchart", "image_charts"]


@dataclass
class Config:
    """Application configuration."""
    # Literal text marking where the table goes
    placeholder: str = "QRCodeTable"
    # QR acquisition
    qr_size_px: int = 600          # Resolution requested from generators
    qr_display_scale: float = 0.2  # On-page width = qr_size_px * scale
    qr_pacing_seconds: float = 0.5
    qr_generators: list[str] = field(default_factory=lambda: list(DEFAULT_GENERATORS))
    qr_failure_marker: str = "[QR unavailable]"
    # Title resolution
    fallback_title: str = "(untitled)"
    # Identifier space (Hex2 tops out at FF)
    max_references: int = 255
    # Network settings
    request_timeout: float = 15.0
    user_agent: str | None = None
    max_workers: int = 4
    # Output formatting
    table_style: str | None = "Table Grid"

    @property
    def qr_display_px(self) -> int:
        return max(1, round(self.qr_size_px * self.qr_display_scale))

    @classmethod
    def load(cls, path: Path | str | None = None) -> "Config":
        """Load config from file and/or environment."""
        if path is not None:
            config_path = Path(path).expanduser()
        else:
            config_path = Path("~/.config/footnote-qr-table/config.json").expanduser()

        data = {}
        if config_path.exists():
            with open(config_path) as f:
                data = json.load(f)

        defaults = cls()
        return cls(
            placeholder=data.get("placeholder", defaults.placeholder),
            qr_size_px=data.get("qr_size_px", defaults.qr_size_px),
            qr_display_scale=data.get("qr_display_scale", defaults.qr_display_scale),
            qr_pacing_seconds=data.get("qr_pacing_seconds", defaults.qr_pacing_seconds),
            qr_generators=list(data.get("qr_generators", defaults.qr_generators)),
            qr_failure_marker=data.get("qr_failure_marker", defaults.qr_failure_marker),
            fallback_title=data.get("fallback_title", defaults.fallback_title),
            max_references=data.get("max_references", defaults.max_references),
            request_timeout=data.get("request_timeout", defaults.request_timeout),
            user_agent=data.get("user_agent") or os.environ.get("FOOTNOTE_QR_USER_AGENT"),
            max_workers=data.get("max_workers", defaults.max_workers),
            table_style=data.get("table_style", defaults.table_style),
        )

    def validate(self) -> list[str]:
        """Return list of validation errors, empty if valid."""
        from .qr_acquirer import BUILTIN_GENERATORS

        errors = []
        if not self.placeholder:
            errors.append("placeholder must be a non-empty string")
        if self.qr_size_px <= 0:
            errors.append(f"qr_size_px must be positive, got {self.qr_size_px}")
        if not 0 < self.qr_display_scale <= 1:
            errors.append(f"qr_display_scale must be in (0, 1], got {self.qr_display_scale}")
        if self.qr_pacing_seconds < 0:
            errors.append(f"qr_pacing_seconds must be >= 0, got {self.qr_pacing_seconds}")

        if not self.qr_generators:
            errors.append("qr_generators must list at least one generator")
        for gen in self.qr_generators:
            if gen in BUILTIN_GENERATORS:
                continue
            if "://" in gen:
                if "{data}" not in gen:
                    errors.append(f"Generator template has no {{data}} placeholder: {gen}")
            else:
                errors.append(
                    f"Unknown generator: {gen}. "
                    f"Must be one of {sorted(BUILTIN_GENERATORS)} or a URL template"
                )

        if not 1 <= self.max_references <= 255:
            errors.append(f"max_references must be in 1..255, got {self.max_references}")
        if self.request_timeout <= 0:
            errors.append(f"request_timeout must be positive, got {self.request_timeout}")
        if self.max_workers < 1:
            errors.append(f"max_workers must be >= 1, got {self.max_workers}")
        return errors
