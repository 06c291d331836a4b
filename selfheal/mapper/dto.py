from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class LocatorDto(BaseModel):
    value: str
    type: str


class HealingResultDto(BaseModel):
    locator: LocatorDto
    score: float


class RequestDto(BaseModel):
    """Healing request and report payload written to ``data.json``.

    ``node_path`` holds nodes in their stored wire form, including the ``type``
    discriminator, so the report and the path files share one node format.
    """

    model_config = ConfigDict(populate_by_name=True, ser_json_bytes="base64", val_json_bytes="base64")

    locator: str
    type: str
    class_name: str | None = Field(default=None, alias="className")
    method_name: str | None = Field(default=None, alias="methodName")
    node_path: list[dict[str, Any]] | None = Field(default=None, alias="nodePath")
    page_content: str | None = Field(default=None, alias="pageContent")
    results: list[HealingResultDto] | None = None
    used_result: HealingResultDto | None = Field(default=None, alias="usedResult")
    screenshot: bytes | None = None
