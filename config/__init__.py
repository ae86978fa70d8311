"""Configuration package for the mock interview services."""
from .app_config import AppConfig, LlmRoute, ScoreTier, ScoringPolicy, default_route, load_config
from .registry import ORACLE_KEY, bind_model, get_model, is_bound, unbind_model
from .settings import Settings, settings

__all__ = [
    "AppConfig",
    "LlmRoute",
    "ScoreTier",
    "ScoringPolicy",
    "default_route",
    "load_config",
    "ORACLE_KEY",
    "bind_model",
    "get_model",
    "is_bound",
    "unbind_model",
    "Settings",
    "settings",
]
