# settings.py
from __future__ import annotations

import os


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


# ─────────────────────────── tunables ────────────────────────────
FETCH_TIMEOUT      = _env_float("DOC_FETCH_TIMEOUT", 8.0)    # seconds, per page
PDF_TIMEOUT        = _env_float("DOC_PDF_TIMEOUT", 10.0)     # seconds, per PDF
FETCH_MAX_BYTES    = _env_int("DOC_FETCH_MAX_BYTES", 20 * 1024 * 1024)
PDF_MAX_CHARS      = _env_int("DOC_PDF_MAX_CHARS", 15_000)
CRAWL_MAX_PAGES    = _env_int("DOC_CRAWL_MAX_PAGES", 5)
CRAWL_PAGE_CHARS   = _env_int("DOC_CRAWL_PAGE_CHARS", 8_000)
CRAWL_TOTAL_CHARS  = _env_int("DOC_CRAWL_TOTAL_CHARS", 40_000)
CRAWL_DELAY        = _env_float("DOC_CRAWL_DELAY", 0.0)      # politeness pause
MIN_INLINE_CHARS   = 50
SOURCE_SEPARATOR   = "\n\n---\n\n"
# ──────────────────────────────────────────────────────────────────

# ─────────────────────────── llm backend ─────────────────────────
LLM_MODEL_PATH     = os.environ.get(
    "DOC_LLM_MODEL_PATH", "./openhermes-2.5-mistral-7b.Q3_K_M.gguf"
)
LLM_N_CTX          = _env_int("DOC_LLM_N_CTX", 32_768)
LLM_MAX_TOKENS     = _env_int("DOC_LLM_MAX_TOKENS", 1_024)
LLM_TEMPERATURE    = _env_float("DOC_LLM_TEMPERATURE", 0.2)
# ──────────────────────────────────────────────────────────────────
