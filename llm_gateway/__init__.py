from __future__ import annotations  # Re-export llm_gateway public API

from .llm_gateway import (
    HttpClient,
    HttpResponse,
    LlmGatewayError,
    generate,
    oracle_for,
    parse_structured,
    resolve_api_key,
)

__all__ = [
    "HttpClient",
    "HttpResponse",
    "LlmGatewayError",
    "generate",
    "oracle_for",
    "parse_structured",
    "resolve_api_key",
]
