"""Tests for configuration loading and validation."""
import json

import pytest

from footnote_qr_table.config import DEFAULT_GENERATORS, Config


class TestLoad:
    def test_defaults_when_file_missing(self, tmp_path, monkeypatch):
        monkeypatch.delenv("FOOTNOTE_QR_USER_AGENT", raising=False)
        config = Config.load(tmp_path / "missing.json")
        assert config.placeholder == "QRCodeTable"
        assert config.qr_size_px == 600
        assert config.max_references == 255
        assert config.qr_generators == DEFAULT_GENERATORS
        assert config.user_agent is None
        assert config.validate() == []

    def test_file_overrides(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "placeholder": "<<QR>>",
            "qr_size_px": 300,
            "qr_generators": ["quickchart"],
            "fallback_title": "Untitled page",
        }))
        config = Config.load(path)
        assert config.placeholder == "<<QR>>"
        assert config.qr_size_px == 300
        assert config.qr_generators == ["quickchart"]
        assert config.fallback_title == "Untitled page"
        assert config.qr_pacing_seconds == 0.5

    def test_user_agent_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FOOTNOTE_QR_USER_AGENT", "refs-bot/2.0")
        assert Config.load(tmp_path / "missing.json").user_agent == "refs-bot/2.0"

    def test_generator_list_not_shared(self):
        a, b = Config(), Config()
        a.qr_generators.append("https://x.test/?d={data}")
        assert b.qr_generators == DEFAULT_GENERATORS


class TestValidate:
    @pytest.mark.parametrize("overrides, fragment", [
        ({"qr_size_px": 0}, "qr_size_px"),
        ({"qr_display_scale": 0}, "qr_display_scale"),
        ({"qr_pacing_seconds": -1}, "qr_pacing_seconds"),
        ({"qr_generators": []}, "at least one"),
        ({"qr_generators": ["mystery"]}, "Unknown generator"),
        ({"qr_generators": ["https://qr.test/?size={size}"]}, "{data}"),
        ({"max_references": 256}, "max_references"),
        ({"max_references": 0}, "max_references"),
        ({"max_workers": 0}, "max_workers"),
        ({"request_timeout": 0}, "request_timeout"),
        ({"placeholder": ""}, "placeholder"),
    ])
    def test_reports_errors(self, overrides, fragment):
        errors = Config(**overrides).validate()
        assert len(errors) == 1
        assert fragment in errors[0]

    def test_custom_template_is_valid(self):
        assert Config(qr_generators=["qrserver", "https://qr.test/?d={data}"]).validate() == []

    def test_display_px(self):
        assert Config(qr_size_px=600, qr_display_scale=0.2).qr_display_px == 120
