"""Thin access point to the bound generative-language oracle."""
from __future__ import annotations

from config.registry import ORACLE_KEY, get_model
from llm_gateway import LlmGatewayError


def ask(prompt: str, *, temperature: float, max_tokens: int) -> str:
    """Send ``prompt`` to the bound oracle and return its non-empty reply.

    Raises:
        KeyError: If no oracle is bound (no API key configured).
        LlmGatewayError: On transport failures or an empty reply.
    """

    llm = get_model(ORACLE_KEY)
    text = llm(prompt, temperature=temperature, max_tokens=max_tokens)
    if not isinstance(text, str) or not text.strip():
        raise LlmGatewayError("Oracle returned empty text")
    return text


__all__ = ["ask"]
