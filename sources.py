# sources.py
"""
Turn one document descriptor into a labelled text block.

This is the isolation boundary: whatever goes wrong while fetching or
parsing a source ends up as placeholder text inside the block, so one bad
document never fails the whole request.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

import crawler
import fetcher
import pdf_text
import settings
from errors import ParseError, ValidationError

log = logging.getLogger(__name__)


class DocType(str, enum.Enum):
    TEXT = "TEXT"
    PDF = "PDF"
    URL = "URL"

    @classmethod
    def parse(cls, value: Any) -> "DocType":
        try:
            return cls(str(value or "TEXT").strip().upper())
        except ValueError:
            log.warning("unknown document type %r, treating as TEXT", value)
            return cls.TEXT


def _looks_like_url(value: Optional[str]) -> bool:
    return bool(value) and value.strip().lower().startswith(("http://", "https://"))


@dataclass(frozen=True)
class DocumentDescriptor:
    title: str
    type: DocType = DocType.TEXT
    url: Optional[str] = None
    content: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "DocumentDescriptor":
        if not isinstance(raw, Mapping):
            raise ValidationError("each document must be an object")
        url = raw.get("url")
        content = raw.get("content")
        return cls(
            title=str(raw.get("title") or ""),
            type=DocType.parse(raw.get("type")),
            url=str(url).strip() if url else None,
            content=content if isinstance(content, str) else None,
        )

    @property
    def has_inline_content(self) -> bool:
        return bool(self.content) and len(self.content) >= settings.MIN_INLINE_CHARS

    @property
    def target(self) -> Optional[str]:
        """Where to fetch from: explicit url, else a title that is a URL."""
        if self.url:
            return self.url
        if self.type is DocType.URL and _looks_like_url(self.title):
            return self.title.strip()
        return None


@dataclass(frozen=True)
class ContextBlock:
    source_title: str
    text: str

    def render(self) -> str:
        return f"SOURCE: {self.source_title}\nCONTENU: {self.text}"


def web_unavailable(reason: str) -> str:
    return f"[Web content unavailable: {reason}]"


def _resolve_pdf(url: str, fetch: Callable[..., fetcher.FetchResult]) -> str:
    log.info("PDF %s", url)
    res = fetch(url, timeout=settings.PDF_TIMEOUT)
    if isinstance(res, fetcher.FetchErr):
        return pdf_text.unavailable(res.message)
    return pdf_text.extract_pdf(res.content)


def _resolve_url(url: str, fetch: Callable[..., fetcher.FetchResult]) -> str:
    log.info("CRAWL %s", url)
    try:
        state = crawler.crawl_site(url, fetch=fetch)
    except ParseError as exc:
        log.warning("cannot crawl %s: %s", url, exc)
        return web_unavailable(exc.message)
    text = state.text()
    if text:
        return text
    reason = state.errors.get(url) or next(iter(state.errors.values()), None)
    return web_unavailable(reason or f"no readable content at {url}")


def resolve_document(doc: DocumentDescriptor,
                     fetch: Optional[Callable[..., fetcher.FetchResult]] = None
                     ) -> ContextBlock:
    """
    Dispatch, in order: trusted inline content → PDF download → crawl →
    whatever inline content there is. A PDF or URL document with
    neither a target nor content gets a placeholder.
    """
    fetch = fetch or fetcher.fetch
    if doc.has_inline_content:
        text = doc.content
    elif doc.type is DocType.PDF and doc.target:
        text = _resolve_pdf(doc.target, fetch)
    elif doc.type is DocType.URL and doc.target:
        text = _resolve_url(doc.target, fetch)
    elif doc.content:
        text = doc.content
    elif doc.type is DocType.PDF:
        text = pdf_text.unavailable("no url")
    elif doc.type is DocType.URL:
        text = web_unavailable("no url")
    else:
        text = ""
    return ContextBlock(source_title=doc.title, text=text)
