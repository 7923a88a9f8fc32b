#fetcher.py
from __future__ import annotations

import logging
import random
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass
from typing import List, Mapping, Union

import requests

import settings
from errors import NetworkError

log = logging.getLogger(__name__)

_UA_POOL = [
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 13_5) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.4 Safari/605.1.15",
    "Mozilla/5.0 (Macintosh; arm64; Mac OS X 14_0) AppleWebKit/605.1.15 (KHTML, like Gecko)",
]

_TEXT_TYPES = ("text/", "application/xhtml+xml", "application/xml", "application/json")
_CHUNK_SIZE = 16 * 1024


def _ua() -> str:
    return random.choice(_UA_POOL)


def _sniff_encoding(data: bytes) -> str:
    detector = requests.compat.chardet      # what Response.apparent_encoding uses
    guess = detector.detect(data).get("encoding") if detector else None
    return guess or "utf-8"


@dataclass(frozen=True)
class FetchOk:
    url: str
    content: bytes
    content_type: str = ""
    encoding: str | None = None         # only when the server named a charset

    @property
    def is_html(self) -> bool:
        ct = self.content_type.lower()
        return "text/html" in ct or "application/xhtml+xml" in ct

    @property
    def is_text(self) -> bool:
        ct = self.content_type.lower()
        return any(t in ct for t in _TEXT_TYPES)

    @property
    def text(self) -> str:
        if self.encoding:
            return self.content.decode(self.encoding, errors="replace")
        try:
            return self.content.decode("utf-8")
        except UnicodeDecodeError:
            return self.content.decode(_sniff_encoding(self.content), errors="replace")


@dataclass(frozen=True)
class FetchErr:
    url: str
    kind: str
    message: str

    def __str__(self) -> str:
        return self.message

    def to_error(self) -> NetworkError:
        return NetworkError(self.message)


FetchResult = Union[FetchOk, FetchErr]


class _Abort(Exception):
    def __init__(self, kind: str, reason: str) -> None:
        super().__init__(reason)
        self.kind = kind


def _classify(exc: requests.RequestException) -> str:
    if isinstance(exc, requests.Timeout):
        return "timeout"
    if isinstance(exc, requests.HTTPError):
        return "status"
    if isinstance(exc, requests.ConnectionError):
        return "connection"
    if isinstance(exc, (requests.exceptions.InvalidURL,
                        requests.exceptions.MissingSchema,
                        requests.exceptions.InvalidSchema)):
        return "url"
    return "transport"


def _download(url: str, headers: Mapping[str, str], timeout: float,
              deadline: float, max_bytes: int,
              opened: List[requests.Response]) -> FetchOk:
    r = requests.get(url, headers=headers, timeout=timeout, stream=True)
    opened.append(r)
    with r:
        r.raise_for_status()
        chunks, size = [], 0
        for chunk in r.iter_content(chunk_size=_CHUNK_SIZE):
            size += len(chunk)
            if size > max_bytes:
                raise _Abort("size", f"body larger than {max_bytes} bytes")
            if time.monotonic() > deadline:
                raise _Abort("timeout", f"no complete response within {timeout:g}s")
            chunks.append(chunk)
        content_type = r.headers.get("content-type", "")
        return FetchOk(
            url=r.url or url,
            content=b"".join(chunks),
            content_type=content_type,
            encoding=r.encoding if "charset=" in content_type.lower() else None,
        )


def fetch(url: str,
          timeout: float = settings.FETCH_TIMEOUT,
          headers: Mapping[str, str] | None = None,
          max_bytes: int = settings.FETCH_MAX_BYTES) -> FetchResult:
    """
    One GET, no retries. `timeout` caps the whole exchange (connect, headers
    and body), and bodies over `max_bytes` are refused. Every failure comes
    back as a FetchErr instead of an exception.
    """
    hdrs = {"User-Agent": _ua()}
    if headers:
        hdrs.update(headers)
    log.info("FETCH %s", url)

    opened: List[requests.Response] = []
    pool = ThreadPoolExecutor(max_workers=1)
    try:
        job = pool.submit(_download, url, hdrs, timeout,
                          time.monotonic() + timeout, max_bytes, opened)
        return job.result(timeout=timeout)
    except FutureTimeout:
        for r in opened:
            r.close()             # unblocks the worker on its next read
        kind, reason = "timeout", f"no complete response within {timeout:g}s"
    except _Abort as exc:
        kind, reason = exc.kind, str(exc)
    except requests.RequestException as exc:
        kind, reason = _classify(exc), str(exc)
    finally:
        pool.shutdown(wait=False)
    log.warning("  ↳ %s error: %s", kind, reason)
    return FetchErr(url, kind, f"{kind} error fetching {url}: {reason}")
