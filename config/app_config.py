from __future__ import annotations  # Configuration schema for oracle routing and scoring

from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from .settings import settings


class LlmRoute(BaseModel):  # Generative-language endpoint configuration
    name: str
    base_url: str
    model: str
    timeout_s: float = Field(ge=0.1)
    max_retries: int = Field(default=1, ge=0)
    api_key_env: Optional[str] = None
    api_key: Optional[str] = None
    temperature: float = Field(default=1.0, ge=0.0, le=2.0)
    top_k: int = Field(default=50, ge=1)
    top_p: float = Field(default=0.98, gt=0.0, le=1.0)
    max_output_tokens: int = Field(default=2048, ge=1)
    extra_headers: Dict[str, str] = Field(default_factory=dict)
    sequential: bool = False


class ScoreTier(BaseModel):  # Raw-score threshold and the fraction of weight it earns
    min_score: int = Field(ge=0, le=100)
    fraction: float = Field(ge=0.0, le=1.0)


class ScoringPolicy(BaseModel):  # Tiered bucket scoring constants
    tiers: List[ScoreTier] = Field(
        default_factory=lambda: [
            ScoreTier(min_score=90, fraction=1.0),
            ScoreTier(min_score=60, fraction=0.5),
            ScoreTier(min_score=30, fraction=0.25),
        ]
    )
    weights: Dict[str, float] = Field(
        default_factory=lambda: {"easy": 1.0, "medium": 3.0, "hard": 5.0}
    )
    distribution: Dict[str, int] = Field(
        default_factory=lambda: {"easy": 4, "medium": 4, "hard": 2}
    )
    aliases: Dict[str, str] = Field(
        default_factory=lambda: {"junior": "easy", "mid": "medium", "senior": "hard"}
    )

    @model_validator(mode="after")
    def _order_tiers(self) -> "ScoringPolicy":
        self.tiers = sorted(self.tiers, key=lambda tier: tier.min_score, reverse=True)
        for level in self.distribution:
            if level not in self.weights:
                raise ValueError(f"distribution level '{level}' has no weight")
        return self

    def weight_for(self, difficulty: Optional[str]) -> Optional[float]:
        if difficulty is None:
            return None
        level = self.aliases.get(difficulty, difficulty)
        return self.weights.get(level)

    def fraction_for(self, score: Optional[int]) -> float:
        if score is None:
            return 0.0
        for tier in self.tiers:
            if score >= tier.min_score:
                return tier.fraction
        return 0.0


def default_route() -> LlmRoute:  # Route built from environment settings
    return LlmRoute(
        name="gemini",
        base_url=settings.GEMINI_BASE_URL,
        model=settings.GEMINI_MODEL,
        timeout_s=settings.LLM_TIMEOUT_S,
        max_retries=settings.LLM_MAX_RETRIES,
        api_key_env="GEMINI_API_KEY",
        api_key=settings.GEMINI_API_KEY,
    )


class AppConfig(BaseModel):  # Application configuration root
    llm_route: LlmRoute = Field(default_factory=default_route)
    scoring: ScoringPolicy = Field(default_factory=ScoringPolicy)


def load_config(path: Optional[Path] = None) -> AppConfig:  # Load configuration from disk, defaults when absent
    target = Path(path) if path is not None else Path(settings.APP_CONFIG_PATH)
    if not target.exists():
        return AppConfig()
    data = target.read_text(encoding="utf-8")
    return AppConfig.model_validate_json(data)
