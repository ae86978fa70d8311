"""In-memory model registry for the interview oracle."""
from typing import Any, Callable, Dict

_REGISTRY: Dict[str, Callable[..., Any]] = {}


def bind_model(key: str, fn: Callable[..., Any]) -> None:
    """Bind a callable implementation to a registry key."""
    _REGISTRY[key] = fn


def unbind_model(key: str) -> None:
    """Drop the binding for ``key`` if present."""
    _REGISTRY.pop(key, None)


def is_bound(key: str) -> bool:
    return key in _REGISTRY


def get_model(key: str) -> Callable[..., Any]:
    """Retrieve a callable from the registry.

    Raises:
        KeyError: If no callable has been bound for ``key``.
    """

    if key not in _REGISTRY:
        raise KeyError(f"Model not bound in registry: {key}")
    return _REGISTRY[key]


# Callable signature: (prompt: str, *, temperature: float, max_tokens: int) -> str
ORACLE_KEY = "models.generative_text"
