"""Tests for llm_interface module (with a fake model, no weights needed)."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from llm_interface import LlamaAnswerer, build_prompt


def _fake_model(reply=" Paris. ", n_ctx=4096, prompt_tokens=100):
    model = MagicMock()
    model.tokenize.return_value = list(range(prompt_tokens))
    model.n_ctx.return_value = n_ctx
    model.return_value = {"choices": [{"text": reply}]}
    return model


class TestLlamaAnswerer:
    def test_answer_stripped(self):
        model = _fake_model()
        answerer = LlamaAnswerer(model=model)
        assert answerer("CONTEXTE :\nx", "Capital?") == "Paris."
        prompt = model.call_args.args[0]
        assert prompt == build_prompt("CONTEXTE :\nx", "Capital?")

    def test_budget_capped_by_max_tokens(self):
        model = _fake_model(n_ctx=8192, prompt_tokens=100)
        LlamaAnswerer(model=model, max_tokens=512)("ctx", "q")
        assert model.call_args.kwargs["max_tokens"] == 512

    def test_budget_shrinks_with_long_prompt(self):
        model = _fake_model(n_ctx=1000, prompt_tokens=800)
        LlamaAnswerer(model=model, max_tokens=512, reserve_ctx=64)("ctx", "q")
        assert model.call_args.kwargs["max_tokens"] == 136

    def test_budget_floor(self):
        model = _fake_model(n_ctx=1000, prompt_tokens=990)
        LlamaAnswerer(model=model)("ctx", "q")
        assert model.call_args.kwargs["max_tokens"] == 64

    def test_model_loaded_lazily_once(self):
        model = _fake_model()
        with patch("llm_interface._load_model", return_value=model) as load:
            answerer = LlamaAnswerer(model_path="m.gguf", n_ctx=2048)
            load.assert_not_called()
            answerer("ctx", "q")
            answerer("ctx", "q")
        load.assert_called_once_with("m.gguf", 2048)


def test_build_prompt():
    assert build_prompt("SYS", "Q?") == "SYS\n\nQuestion : Q?\nRéponse :"
