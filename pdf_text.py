# pdf_text.py — text-layer-only PDF extraction
from __future__ import annotations

import io
import logging

from pypdf import PdfReader

import settings

log = logging.getLogger(__name__)


def unavailable(reason: str) -> str:
    return f"[PDF content unavailable: {reason}]"


def extract_pdf(data: bytes, max_chars: int = settings.PDF_MAX_CHARS) -> str:
    """
    Flatten every page's text layer into one string, capped at `max_chars`.
    Malformed bytes yield a bracketed placeholder, never an exception.
    """
    if not data:
        return unavailable("empty document")
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]
    except Exception as exc:  # pypdf surfaces malformed input as many types
        log.warning("PDF parse failed: %s", exc)
        return unavailable(str(exc) or type(exc).__name__)
    text = "\n".join(p.strip() for p in pages if p.strip())
    return text[:max_chars]
