from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class StorageConfig(BaseModel):
    base_path: Path = Path("sha/selenium")
    report_path: Path = Path("sha/reports")

    @field_validator("base_path", "report_path")
    @classmethod
    def expand_home(cls, value: Path) -> Path:
        return value.expanduser()


class HealingConfig(BaseModel):
    storage: StorageConfig = Field(default_factory=StorageConfig)
    heal_enabled: bool = True
    recovery_tries: int = Field(default=1, ge=1)
    score_cap: float = Field(default=0.5, ge=0.0, le=1.0)
