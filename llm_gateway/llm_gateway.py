from __future__ import annotations  # Generative-language request gateway module

import json
import logging
import os
import threading
from typing import Any, Callable, Dict, Optional, Protocol, Tuple, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from config import LlmRoute


logger = logging.getLogger(__name__)  # Module logger setup


_MODEL_LOCKS: Dict[str, threading.Lock] = {}
_MODEL_LOCKS_GUARD = threading.Lock()


class HttpClient(Protocol):  # Minimal HTTP client protocol
    def post(self, url: str, *, json: Dict[str, Any], headers: Dict[str, str], timeout: float) -> "HttpResponse": ...


class HttpResponse(Protocol):  # Minimal HTTP response protocol
    @property
    def status_code(self) -> int: ...

    def json(self) -> Any: ...

    @property
    def text(self) -> str: ...


class LlmGatewayError(RuntimeError):  # Base gateway error
    pass


T = TypeVar("T", bound=BaseModel)


def _lock_for(cfg: LlmRoute) -> threading.Lock:
    key = cfg.name or f"{cfg.base_url}/{cfg.model}"
    with _MODEL_LOCKS_GUARD:
        lock = _MODEL_LOCKS.get(key)
        if lock is None:
            lock = threading.Lock()
            _MODEL_LOCKS[key] = lock
    return lock


def resolve_api_key(cfg: LlmRoute) -> Optional[str]:  # Explicit key wins over environment lookup
    if cfg.api_key:
        return cfg.api_key
    if cfg.api_key_env:
        return os.getenv(cfg.api_key_env) or None
    return None


def generate(
    prompt: str,
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
    options: Optional[Dict[str, Any]] = None,
) -> str:  # Send one prompt to the configured route and return the reply text
    def _execute() -> str:
        api_key = resolve_api_key(cfg)
        if not api_key:
            raise LlmGatewayError(f"No API key configured for route {cfg.name}")
        attempts = cfg.max_retries + 1
        preview = _preview(prompt)
        logger.info(
            "LLM request start route=%s model=%s attempts=%d preview=%s",
            cfg.name,
            cfg.model,
            attempts,
            preview,
        )
        payload = _payload(prompt, cfg, options)
        headers = {"Content-Type": "application/json", "x-goog-api-key": api_key}
        headers.update(cfg.extra_headers)
        url = f"{cfg.base_url}/{cfg.model}:generateContent"
        for attempt in range(attempts):
            logger.info(
                "LLM request send route=%s model=%s attempt=%d/%d",
                cfg.name,
                cfg.model,
                attempt + 1,
                attempts,
            )
            try:
                response, close_cb = _post(url, payload, headers, cfg.timeout_s, client)
            except Exception as exc:  # noqa: BLE001
                logger.error("LLM transport failure: %s", exc)
                raise LlmGatewayError("LLM transport failed") from exc
            try:
                if response.status_code >= 400:
                    logger.error("LLM error status: %s body=%s", response.status_code, _preview(response.text))
                    raise LlmGatewayError(f"LLM returned status {response.status_code}")
                try:
                    data = response.json()
                except Exception as exc:  # noqa: BLE001
                    logger.error("Invalid JSON payload from LLM: %s", exc)
                    raise LlmGatewayError("LLM payload was not JSON") from exc
            finally:
                _close_safely(close_cb)
            content = _extract_text(data)
            if content.strip():
                logger.info(
                    "LLM request done route=%s model=%s attempt=%d",
                    cfg.name,
                    cfg.model,
                    attempt + 1,
                )
                return content
            logger.warning("Empty reply from LLM route=%s attempt=%d", cfg.name, attempt + 1)
        raise LlmGatewayError("LLM returned empty content")

    if cfg.sequential:
        lock = _lock_for(cfg)
        with lock:
            return _execute()
    return _execute()


def oracle_for(route: LlmRoute, client: Optional[HttpClient] = None) -> Callable[..., str]:  # Adapt a route into the registry callable
    def _invoke(prompt: str, *, temperature: Optional[float] = None, max_tokens: Optional[int] = None) -> str:
        options: Dict[str, Any] = {}
        if temperature is not None:
            options["temperature"] = temperature
        if max_tokens is not None:
            options["maxOutputTokens"] = max_tokens
        return generate(prompt, cfg=route, client=client, options=options)

    return _invoke


def parse_structured(schema: Type[T], content: str) -> T:  # Parse a JSON object out of free text and validate it
    cleaned = _strip_code_fences(content)
    try:
        return schema.model_validate_json(cleaned)
    except (json.JSONDecodeError, ValidationError):
        start = cleaned.find("{")
        end = cleaned.rfind("}") + 1
        if start < 0 or end <= start:
            raise
        return schema.model_validate_json(cleaned[start:end])


def _payload(prompt: str, cfg: LlmRoute, options: Optional[Dict[str, Any]]) -> Dict[str, Any]:  # Build generateContent body
    generation = {
        "temperature": cfg.temperature,
        "topK": cfg.top_k,
        "topP": cfg.top_p,
        "maxOutputTokens": cfg.max_output_tokens,
    }
    if options:
        generation.update(options)
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": generation,
    }


def _post(url: str, payload: Dict[str, Any], headers: Dict[str, str], timeout: float, client: Optional[HttpClient]) -> Tuple[HttpResponse, Optional[Callable[[], None]]]:  # Dispatch HTTP request
    if client is not None:
        response = client.post(url, json=payload, headers=headers, timeout=timeout)
        return response, None
    http_client = httpx.Client(timeout=timeout)
    response = http_client.post(url, json=payload, headers=headers)
    return response, http_client.close


def _close_safely(close_cb: Optional[Callable[[], None]]) -> None:  # Close HTTP client callback when provided
    if close_cb is not None:
        close_cb()


def _preview(text: str) -> str:  # First non-empty line, truncated for logging
    for line in (text or "").splitlines():
        line = line.strip()
        if line:
            return line if len(line) <= 120 else line[:117] + "..."
    return ""


def _extract_text(data: Any) -> str:  # Extract reply text from a generateContent response
    if isinstance(data, dict):
        candidates = data.get("candidates")
        if isinstance(candidates, list) and candidates:
            content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
            parts = content.get("parts") if isinstance(content, dict) else None
            if isinstance(parts, list) and parts and isinstance(parts[0], dict):
                text = parts[0].get("text")
                if isinstance(text, str):
                    return text
            return ""
        if isinstance(data.get("text"), str):
            return data["text"]
    raise LlmGatewayError("LLM response missing candidates")


def _strip_code_fences(content: str) -> str:  # Remove common markdown fences from LLM output
    text = content.strip()
    if text.startswith("```"):
        lines = text.splitlines()
        if lines:
            lines = lines[1:]
            while lines and lines[0].strip() == "":
                lines = lines[1:]
            while lines and lines[-1].strip() == "":
                lines = lines[:-1]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            text = "\n".join(lines).strip()
    return text
