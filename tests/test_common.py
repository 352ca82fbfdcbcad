"""Tests for common utilities."""

import json
import logging

from snaplink.common.logging_config import setup_logging
from snaplink.common.url_builder import build_short_url
from snaplink.common.validators import is_valid_url
from snaplink.config import Config


class TestValidators:
    """Test validation utilities."""

    def test_valid_urls(self):
        valid, _ = is_valid_url("https://example.com")
        assert valid

        valid, _ = is_valid_url("http://example.com/path")
        assert valid

        valid, _ = is_valid_url("https://sub.example.com:8080/path?query=value#frag")
        assert valid

    def test_other_schemes_with_host(self):
        valid, _ = is_valid_url("ftp://example.com/file")
        assert valid

        valid, _ = is_valid_url("ssh://git@example.com/repo")
        assert valid

    def test_invalid_urls(self):
        valid, error = is_valid_url("")
        assert not valid
        assert "required" in error.lower()

        valid, error = is_valid_url("not-a-url")
        assert not valid
        assert "scheme" in error.lower()

        valid, error = is_valid_url("https:///path-only")
        assert not valid
        assert "domain" in error.lower()

        valid, _ = is_valid_url("mailto:someone@example.com")
        assert not valid

    def test_invalid_port(self):
        valid, error = is_valid_url("http://example.com:99999/")
        assert not valid
        assert "format" in error.lower()

    def test_too_long(self):
        valid, error = is_valid_url("https://example.com/" + "a" * 2048)
        assert not valid
        assert "too long" in error.lower()

    def test_whitespace(self):
        valid, _ = is_valid_url(" https://example.com")
        assert not valid

    def test_non_string(self):
        valid, _ = is_valid_url(12345)
        assert not valid


class TestURLBuilder:
    """Test short URL composition."""

    def test_forwarded_headers_win(self):
        config = Config(base_url="http://localhost:3000")
        headers = {
            "X-Forwarded-Proto": "https",
            "X-Forwarded-Host": "sho.rt",
            "Host": "internal:3000",
        }

        url = build_short_url("abc1234", config, headers=headers, request_scheme="http")

        assert url == "https://sho.rt/abc1234"

    def test_forwarded_chain_uses_first_hop(self):
        config = Config()
        headers = {
            "x-forwarded-proto": "https, http",
            "x-forwarded-host": "sho.rt, proxy.internal",
        }

        assert build_short_url("abc1234", config, headers=headers) == "https://sho.rt/abc1234"

    def test_request_host(self):
        config = Config()

        url = build_short_url(
            "abc1234",
            config,
            headers={"host": "links.example.com:8080"},
            request_scheme="http",
        )

        assert url == "http://links.example.com:8080/abc1234"

    def test_base_url_fallback(self):
        config = Config(base_url="http://localhost:3000/")

        assert build_short_url("abc1234", config) == "http://localhost:3000/abc1234"

    def test_path_prefix(self):
        config = Config(base_url="https://example.com/", path_prefix="/s/")

        assert build_short_url("abc1234", config) == "https://example.com/s/abc1234"


class TestLogging:
    """Test logging setup."""

    def test_json_lines_survive_quotes(self, tmp_path):
        log_file = tmp_path / "snaplink.log"
        logger = setup_logging(level="INFO", log_file=str(log_file), json_format=True)

        logger.info('Created short URL: abc1234 -> https://example.com/?q="x"')
        for handler in logger.handlers:
            handler.flush()

        entry = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert entry["level"] == "INFO"
        assert entry["logger"] == "snaplink"
        assert entry["message"] == 'Created short URL: abc1234 -> https://example.com/?q="x"'

        setup_logging(level="INFO")

    def test_json_includes_exception(self, tmp_path):
        log_file = tmp_path / "snaplink.log"
        logger = setup_logging(log_file=str(log_file), json_format=True)

        try:
            raise RuntimeError("boom")
        except RuntimeError:
            logger.exception("failed")
        for handler in logger.handlers:
            handler.flush()

        entry = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert "RuntimeError: boom" in entry["exception"]

        setup_logging(level="INFO")

    def test_setup_replaces_handlers(self):
        setup_logging(level="DEBUG")
        logger = setup_logging(level="WARNING")

        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING
