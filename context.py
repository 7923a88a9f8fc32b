# context.py — request → bounded context → answer
from __future__ import annotations

import logging
import textwrap
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Mapping

import settings
from errors import UpstreamError, ValidationError
from sources import ContextBlock, DocumentDescriptor, resolve_document

log = logging.getLogger(__name__)

Answer = Callable[[str, str], str]
Resolve = Callable[[DocumentDescriptor], ContextBlock]


@dataclass(frozen=True)
class ChatRequest:
    question: str
    documents: List[DocumentDescriptor]


@dataclass(frozen=True)
class ChatResponse:
    answer: str

    def to_dict(self) -> dict[str, str]:
        return {"answer": self.answer}


def parse_request(payload: Any) -> ChatRequest:
    """Validate before any extraction work starts."""
    if not isinstance(payload, Mapping):
        raise ValidationError("request body must be a JSON object")
    question = payload.get("question")
    if not isinstance(question, str) or not question.strip():
        raise ValidationError("missing 'question'")
    documents = payload.get("documents")
    if not isinstance(documents, list):
        raise ValidationError("missing 'documents' (expected a list)")
    return ChatRequest(question=question.strip(),
                       documents=[DocumentDescriptor.from_dict(d) for d in documents])


def assemble_context(documents: Iterable[DocumentDescriptor],
                     resolve: Resolve = resolve_document) -> str:
    """
    Resolve each document one after the other (never in parallel, to keep
    peak memory flat) and join the labelled blocks in input order.
    """
    blocks = []
    for i, doc in enumerate(documents, 1):
        block = resolve(doc)
        log.debug("source %d %r → %d chars", i, block.source_title, len(block.text))
        blocks.append(block.render())
    return settings.SOURCE_SEPARATOR.join(blocks)


def build_system_prompt(context: str) -> str:
    return textwrap.dedent("""\
        Tu es un assistant de recherche. Réponds en utilisant le contexte suivant.
        Cite les sources. Si tu ne sais pas, dis-le.

        CONTEXTE :
        """) + context


def answer_request(request: ChatRequest,
                   answer: Answer,
                   resolve: Resolve = resolve_document) -> ChatResponse:
    context = assemble_context(request.documents, resolve=resolve)
    log.info("context ready: %d source(s), %d chars",
             len(request.documents), len(context))
    try:
        text = answer(build_system_prompt(context), request.question)
    except Exception as exc:
        raise UpstreamError(f"answering failed: {exc}") from exc
    return ChatResponse(answer=text)
