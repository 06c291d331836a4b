from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from selfheal.config.loader import ConfigLoader
from selfheal.config.schema import HealingConfig


def test_config_loader_validates_json(tmp_path):
    config_path = tmp_path / "healing.json"
    config_path.write_text(
        json.dumps(
            {
                "storage": {"base_path": "out/paths", "report_path": "out/reports"},
                "heal_enabled": True,
                "recovery_tries": 3,
                "score_cap": 0.7,
            }
        ),
        encoding="utf-8",
    )
    config = ConfigLoader.load(config_path)
    assert config.storage.base_path == Path("out/paths")
    assert config.storage.report_path == Path("out/reports")
    assert config.recovery_tries == 3
    assert config.score_cap == 0.7


def test_defaults():
    config = HealingConfig()
    assert config.storage.base_path == Path("sha/selenium")
    assert config.storage.report_path == Path("sha/reports")
    assert config.heal_enabled is True
    assert config.recovery_tries == 1
    assert config.score_cap == 0.5


@pytest.mark.parametrize("payload", [{"recovery_tries": 0}, {"score_cap": 1.5}])
def test_out_of_range_values_are_rejected(payload):
    with pytest.raises(ValidationError):
        HealingConfig.model_validate(payload)


def test_home_directory_is_expanded(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    config = HealingConfig.model_validate({"storage": {"base_path": "~/paths"}})
    assert config.storage.base_path == tmp_path / "paths"


def test_environment_overrides_defaults(monkeypatch):
    monkeypatch.setenv("SELFHEAL_BASE_PATH", "/tmp/paths")
    monkeypatch.setenv("SELFHEAL_ENABLED", "false")
    monkeypatch.setenv("SELFHEAL_RECOVERY_TRIES", "4")
    monkeypatch.setenv("SELFHEAL_SCORE_CAP", "0.25")
    monkeypatch.delenv("SELFHEAL_REPORT_PATH", raising=False)
    config = ConfigLoader.from_env()
    assert config.storage.base_path == Path("/tmp/paths")
    assert config.storage.report_path == Path("sha/reports")
    assert config.heal_enabled is False
    assert config.recovery_tries == 4
    assert config.score_cap == 0.25
