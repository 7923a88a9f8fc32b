"""Shared fixtures: an in-memory web so no test touches the network."""

from __future__ import annotations

from typing import Dict, List, Tuple

import pytest

from fetcher import FetchErr, FetchOk


class FakeWeb:
    """Callable with the `fetcher.fetch` signature, serving canned pages."""

    def __init__(self) -> None:
        self.pages: Dict[str, Tuple[bytes, str]] = {}
        self.calls: List[str] = []
        self.redirects: Dict[str, str] = {}

    def add(self, url: str, body, content_type: str = "text/html; charset=utf-8") -> None:
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.pages[url] = (body, content_type)

    def redirect(self, src: str, dst: str) -> None:
        self.redirects[src] = dst

    def __call__(self, url, timeout=None, headers=None):
        self.calls.append(url)
        final = self.redirects.get(url, url)
        if final not in self.pages:
            return FetchErr(url, "connection", f"connection error fetching {url}: unreachable")
        body, ct = self.pages[final]
        return FetchOk(url=final, content=body, content_type=ct, encoding="utf-8")


@pytest.fixture
def web() -> FakeWeb:
    return FakeWeb()


def html_page(title: str, body: str, links=()) -> str:
    anchors = "".join(f'<a href="{href}">link</a>' for href in links)
    return (f"<html><head><title>{title}</title>"
            f"<script>var x = '<b>no</b>';</script></head>"
            f"<body><p>{body}</p>{anchors}</body></html>")
