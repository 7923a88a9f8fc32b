#parser.py
from __future__ import annotations

import re
from urllib.parse import urldefrag, urljoin, urlparse

from bs4 import BeautifulSoup, SoupStrainer

_SCRIPT_RE = re.compile(r"<script\b[^>]*>.*?</script\s*>", re.I | re.S)
_STYLE_RE  = re.compile(r"<style\b[^>]*>.*?</style\s*>", re.I | re.S)
_TAG_RE    = re.compile(r"<[^>]+>")
_WS_RE     = re.compile(r"\s+")
_HREF_RE   = re.compile(r"""href\s*=\s*(?:"([^"]*)"|'([^']*)')""", re.I)


def sanitize_html(html: str) -> str:
    """Strip script/style blocks, then every tag, then squeeze whitespace."""
    if not html:
        return ""
    text = _SCRIPT_RE.sub("", html)
    text = _STYLE_RE.sub("", text)
    text = _TAG_RE.sub(" ", text)
    return _WS_RE.sub(" ", text).strip()


def page_title(html: str) -> str | None:
    if not html:
        return None
    soup = BeautifulSoup(html, "html.parser", parse_only=SoupStrainer("title"))
    tag = soup.find("title")
    if tag is None:
        return None
    title = _WS_RE.sub(" ", tag.get_text(" ", strip=True)).strip()
    return title or None


def _absolute(href: str, base_url: str) -> str | None:
    href = href.strip()
    if not href:
        return None
    try:
        url = urljoin(base_url, href) if href.startswith("/") else href
        parts = urlparse(url)
        if parts.scheme not in ("http", "https") or not parts.hostname:
            return None
    except ValueError:          # e.g. unbalanced IPv6 brackets
        return None
    return urldefrag(url)[0]


def discover_links(html: str, base_url: str) -> list[str]:
    """
    Absolute http(s) URLs from every href="…" in `html`, in document order,
    without duplicates. No domain filtering here.
    """
    seen: set[str] = set()
    out: list[str] = []
    for m in _HREF_RE.finditer(html or ""):
        url = _absolute(m.group(1) if m.group(1) is not None else m.group(2),
                        base_url)
        if url and url not in seen:
            seen.add(url)
            out.append(url)
    return out
