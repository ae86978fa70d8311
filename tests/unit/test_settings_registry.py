import json

import pytest
from pydantic import ValidationError

from config.app_config import AppConfig, ScoringPolicy, load_config
from config.registry import ORACLE_KEY, bind_model, get_model, is_bound, unbind_model
from config.settings import Settings


def test_settings_defaults():
    settings = Settings(_env_file=None)
    assert settings.DB_PATH.endswith(".db")
    assert settings.DEFAULT_TOTAL_QUESTIONS == 10
    assert settings.DEFAULT_TIME_LIMIT_MINUTES == 30


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("HISTORY_LIMIT", "7")
    assert Settings(_env_file=None).HISTORY_LIMIT == 7


def test_registry_bind_and_retrieve():
    marker = object()
    bind_model(ORACLE_KEY, lambda *_, **__: marker)
    assert is_bound(ORACLE_KEY)
    assert get_model(ORACLE_KEY)() is marker
    unbind_model(ORACLE_KEY)
    with pytest.raises(KeyError):
        get_model(ORACLE_KEY)


def test_load_config_defaults_when_missing(tmp_path):
    cfg = load_config(tmp_path / "absent.json")
    assert isinstance(cfg, AppConfig)
    assert cfg.scoring.distribution == {"easy": 4, "medium": 4, "hard": 2}


def test_load_config_reads_scoring_policy(tmp_path):
    path = tmp_path / "app_config.json"
    path.write_text(json.dumps({"scoring": {"weights": {"easy": 2, "medium": 4, "hard": 6}}}), encoding="utf-8")
    cfg = load_config(path)
    assert cfg.scoring.weight_for("junior") == 2
    assert cfg.llm_route.name == "gemini"


def test_scoring_policy_orders_tiers_and_checks_distribution():
    policy = ScoringPolicy(tiers=[{"min_score": 30, "fraction": 0.25}, {"min_score": 90, "fraction": 1.0}])
    assert [t.min_score for t in policy.tiers] == [90, 30]
    assert policy.fraction_for(50) == 0.25
    assert policy.fraction_for(None) == 0.0
    with pytest.raises(ValidationError):
        ScoringPolicy(distribution={"legendary": 1})
