"""Tests for settings env parsing."""

from __future__ import annotations

import pytest

import settings


class TestEnvParsing:
    def test_default_when_unset(self, monkeypatch):
        monkeypatch.delenv("DOC_TEST_VALUE", raising=False)
        assert settings._env_int("DOC_TEST_VALUE", 7) == 7
        assert settings._env_float("DOC_TEST_VALUE", 1.5) == 1.5

    def test_default_when_blank(self, monkeypatch):
        monkeypatch.setenv("DOC_TEST_VALUE", "  ")
        assert settings._env_int("DOC_TEST_VALUE", 7) == 7

    def test_override(self, monkeypatch):
        monkeypatch.setenv("DOC_TEST_VALUE", "12")
        assert settings._env_int("DOC_TEST_VALUE", 7) == 12
        assert settings._env_float("DOC_TEST_VALUE", 1.5) == 12.0

    def test_malformed_names_variable(self, monkeypatch):
        monkeypatch.setenv("DOC_TEST_VALUE", "lots")
        with pytest.raises(ValueError, match="DOC_TEST_VALUE"):
            settings._env_int("DOC_TEST_VALUE", 7)


def test_documented_caps():
    assert settings.PDF_MAX_CHARS == 15_000
    assert settings.CRAWL_PAGE_CHARS == 8_000
    assert settings.CRAWL_TOTAL_CHARS == 40_000
    assert settings.MIN_INLINE_CHARS == 50
    assert settings.SOURCE_SEPARATOR == "\n\n---\n\n"
