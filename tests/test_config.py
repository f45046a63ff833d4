import json

import pytest
from pydantic import ValidationError

from CafeOPS import config as runtime
from CafeOPS.data import get_CAFE_CONFIG_PATH
from CafeOPS.domain.scenario import load_cafe_config


def _write_config(tmp_path, **overrides):
    data = json.loads(get_CAFE_CONFIG_PATH().read_text(encoding="utf-8"))
    data.update(overrides)
    path = tmp_path / "cafe_config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_environment_defaults(monkeypatch):
    for name in ("CAFEOPS_CONFIG", "CAFEOPS_DATABASE_URL", "CAFEOPS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    assert runtime.config_path() == get_CAFE_CONFIG_PATH()
    assert runtime.database_url() == "sqlite:///data/dashboard.db"
    assert runtime.log_level() == "INFO"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("CAFEOPS_CONFIG", str(tmp_path / "other.json"))
    monkeypatch.setenv("CAFEOPS_DATABASE_URL", "sqlite://")
    monkeypatch.setenv("CAFEOPS_LOG_LEVEL", "debug")
    assert runtime.config_path() == tmp_path / "other.json"
    assert runtime.database_url() == "sqlite://"
    assert runtime.log_level() == "DEBUG"


def test_load_alternative_config(tmp_path):
    path = _write_config(tmp_path, debounce_minutes=10, default_scenario="Base")
    loaded = load_cafe_config(path)
    assert loaded.debounce_minutes == 10
    assert loaded.default_scenario == "Base"
    assert loaded.monthly_fixed_total == pytest.approx(3560.0)


@pytest.mark.parametrize(
    "overrides",
    [
        {"default_scenario": "Unknown"},
        {"drink_mix": {"coffee": 0.7, "tea": 0.2, "other": 0.2}},
        {"unexpected_key": 1},
    ],
)
def test_invalid_config_is_rejected(tmp_path, overrides):
    with pytest.raises(ValidationError):
        load_cafe_config(_write_config(tmp_path, **overrides))
