# errors.py
"""
Request-scoped failure taxonomy.

NetworkError / ParseError are recovered per document (placeholder text);
ValidationError and UpstreamError abort the request.
"""

from __future__ import annotations


class PipelineError(Exception):
    kind = "pipeline"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NetworkError(PipelineError):
    kind = "network"


class ParseError(PipelineError):
    kind = "parse"


class ValidationError(PipelineError):
    kind = "validation"


class UpstreamError(PipelineError):
    kind = "upstream"
