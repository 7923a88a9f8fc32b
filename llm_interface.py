# llm_interface.py  — local answering backend, quiet model load
from __future__ import annotations

import contextlib
import logging
import os
import threading
from typing import Any

import settings

log = logging.getLogger(__name__)

os.environ.setdefault("LLAMA_CPP_LOG_LEVEL", "ERROR")      # silence C-side logs


def _load_model(model_path: str, n_ctx: int) -> Any:
    from llama_cpp import Llama

    log.info("loading model %s (n_ctx=%d)", model_path, n_ctx)
    with open(os.devnull, "w") as _null, contextlib.redirect_stderr(_null):
        llm = Llama(
            model_path=model_path,
            n_ctx=n_ctx,
            n_gpu_layers=-1,        # full GPU offload where available
            verbose=False,
        )
    try:                           # (for llama_cpp ≥ 0.2.80)
        llm.set_print_timings(False)
    except AttributeError:
        pass
    return llm


def build_prompt(system_context: str, question: str) -> str:
    return f"{system_context}\n\nQuestion : {question}\nRéponse :"


class LlamaAnswerer:
    """
    `answer(system_context, question) -> str` backed by llama.cpp.

    The model is loaded on first use, not at import, and is owned by this
    object; pass `model=` to inject an already-built (or fake) one.
    """

    def __init__(self,
                 model_path: str = settings.LLM_MODEL_PATH,
                 n_ctx: int = settings.LLM_N_CTX,
                 max_tokens: int = settings.LLM_MAX_TOKENS,
                 temperature: float = settings.LLM_TEMPERATURE,
                 reserve_ctx: int = 64,
                 model: Any = None) -> None:
        self.model_path = model_path
        self.n_ctx = n_ctx
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.reserve_ctx = reserve_ctx
        self._llm = model
        self._lock = threading.Lock()

    @property
    def llm(self) -> Any:
        with self._lock:
            if self._llm is None:
                self._llm = _load_model(self.model_path, self.n_ctx)
            return self._llm

    def _budget(self, prompt: str) -> int:
        used = len(self.llm.tokenize(prompt.encode()))
        avail = self.llm.n_ctx() - used - self.reserve_ctx
        return max(64, min(avail, self.max_tokens))

    def __call__(self, system_context: str, question: str) -> str:
        prompt = build_prompt(system_context, question)
        out = self.llm(
            prompt,
            max_tokens=self._budget(prompt),
            temperature=self.temperature,
            top_p=0.8,
            repeat_penalty=1.15,
        )
        return out["choices"][0]["text"].strip()
