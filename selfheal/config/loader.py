from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Mapping

from selfheal.config.schema import HealingConfig

ENV_PREFIX = "SELFHEAL_"


class ConfigLoader:
    """Loads and validates the healing configuration."""

    @staticmethod
    def load(path: str | Path) -> HealingConfig:
        config_path = Path(path)
        with config_path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
        return HealingConfig.model_validate(payload)

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> HealingConfig:
        env = os.environ if environ is None else environ
        payload: dict[str, Any] = {}
        storage: dict[str, str] = {}
        if env.get(f"{ENV_PREFIX}BASE_PATH"):
            storage["base_path"] = env[f"{ENV_PREFIX}BASE_PATH"]
        if env.get(f"{ENV_PREFIX}REPORT_PATH"):
            storage["report_path"] = env[f"{ENV_PREFIX}REPORT_PATH"]
        if storage:
            payload["storage"] = storage
        for key, field_name in (
            ("ENABLED", "heal_enabled"),
            ("RECOVERY_TRIES", "recovery_tries"),
            ("SCORE_CAP", "score_cap"),
        ):
            value = env.get(f"{ENV_PREFIX}{key}")
            if value:
                payload[field_name] = value
        return HealingConfig.model_validate(payload)
