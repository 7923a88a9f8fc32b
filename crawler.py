# crawler.py  — budgeted, same-domain, breadth-first

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, Dict, List, Optional, Tuple
from urllib.parse import urldefrag, urlparse

import fetcher
import parser
import settings
from errors import ParseError

log = logging.getLogger(__name__)

Fetch = Callable[..., fetcher.FetchResult]


def _hostname(url: str) -> str:
    try:
        return (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""


@dataclass
class CrawlState:
    """Private to one crawl; nothing here outlives the call."""

    domain: str
    max_pages: int
    total_chars: int
    visited: set[str] = field(default_factory=set)
    queue: Deque[str] = field(default_factory=deque)
    queued: set[str] = field(default_factory=set)
    pages: List[Tuple[str, str]] = field(default_factory=list)   # (marker, text)
    errors: Dict[str, str] = field(default_factory=dict)         # url → reason
    landed: set[str] = field(default_factory=set)                # post-redirect urls

    def enqueue(self, url: str) -> bool:
        if url in self.visited or url in self.queued or url in self.landed:
            return False
        self.queue.append(url)
        self.queued.add(url)
        return True

    def dequeue(self) -> str:
        url = self.queue.popleft()
        self.queued.discard(url)
        return url

    @property
    def budget_left(self) -> bool:
        return len(self.visited) < self.max_pages

    @property
    def chars(self) -> int:
        return len(self.aggregate)

    @property
    def aggregate(self) -> str:
        return "".join(f"\n\n{marker}\n{text}" for marker, text in self.pages).strip()

    def text(self) -> str:
        return self.aggregate[:self.total_chars]


def crawl_site(seed_url: str,
               max_pages: int = settings.CRAWL_MAX_PAGES,
               page_chars: int = settings.CRAWL_PAGE_CHARS,
               total_chars: int = settings.CRAWL_TOTAL_CHARS,
               *,
               timeout: float = settings.FETCH_TIMEOUT,
               delay: float = settings.CRAWL_DELAY,
               fetch: Optional[Fetch] = None) -> CrawlState:
    """
    Breadth-first crawl from `seed_url`, restricted to the seed's hostname
    (or the host the seed redirects to).

    Each URL is marked visited before it is fetched, so a URL is fetched at
    most once and |visited| never exceeds `max_pages`. Page failures are
    recorded in `state.errors` and skipped.
    """
    domain = _hostname(seed_url)
    if not domain:
        raise ParseError(f"cannot crawl {seed_url!r}: no hostname")
    fetch = fetch or fetcher.fetch

    state = CrawlState(domain=domain, max_pages=max_pages, total_chars=total_chars)
    seed = urldefrag(seed_url)[0]
    state.enqueue(seed)

    while state.queue and state.budget_left and state.chars < total_chars:
        url = state.dequeue()
        if url in state.visited:
            continue
        state.visited.add(url)

        res = fetch(url, timeout=timeout)
        if isinstance(res, fetcher.FetchErr):
            state.errors[url] = res.message
            continue
        if res.url != url:
            state.landed.add(urldefrag(res.url)[0])
        if url == seed and _hostname(res.url) not in ("", state.domain):
            log.info("seed redirected to %s, following that host", res.url)
            state.domain = _hostname(res.url)
        if not res.is_text:
            log.debug("skip %s (%s)", url, res.content_type or "no content-type")
            continue

        body = res.text
        if res.is_html:
            text = parser.sanitize_html(body)[:page_chars]
            marker = f"[PAGE] {parser.page_title(body) or url}"
            state.pages.append((marker, text))

        if state.budget_left:
            for link in parser.discover_links(body, res.url):
                if _hostname(link) == state.domain:
                    state.enqueue(link)

        if delay and state.queue:
            time.sleep(delay)

    log.info("crawled %s: %d page(s) visited, %d kept, %d error(s)",
             seed_url, len(state.visited), len(state.pages), len(state.errors))
    return state


def crawl(seed_url: str,
          max_pages: int = settings.CRAWL_MAX_PAGES,
          page_chars: int = settings.CRAWL_PAGE_CHARS,
          total_chars: int = settings.CRAWL_TOTAL_CHARS,
          **kw) -> str:
    """Aggregate text of a crawl, truncated to `total_chars`."""
    return crawl_site(seed_url, max_pages, page_chars, total_chars, **kw).text()
