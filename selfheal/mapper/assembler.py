from __future__ import annotations

from typing import Any, Iterable

from selfheal.codec.node_codec import NodeCodec
from selfheal.core.locator import Locator, parse_locator
from selfheal.core.metadata import CallerInfo, Scored
from selfheal.core.node import Node
from selfheal.mapper.dto import HealingResultDto, LocatorDto, RequestDto

_codec = NodeCodec()


def to_locator(locator: Any) -> Locator:
    """Accepts a ``Locator``, a Selenium ``(by, value)`` tuple or a ``"<type>: <value>"`` object."""

    if isinstance(locator, Locator):
        return locator
    if isinstance(locator, tuple) and len(locator) == 2:
        return Locator.from_by(locator)
    locator_type, value = parse_locator(str(locator))
    return Locator(type=locator_type, value=value)


def locator_to_dto(locator: Any) -> LocatorDto:
    resolved = to_locator(locator)
    return LocatorDto(value=resolved.value, type=resolved.type)


def locators_to_dto(locators: Iterable[Any]) -> list[LocatorDto]:
    return [locator_to_dto(locator) for locator in locators]


def build_result(scored: Scored[Any]) -> HealingResultDto:
    return HealingResultDto(locator=locator_to_dto(scored.value), score=scored.score)


def build_results(scored: Iterable[Scored[Any]]) -> list[HealingResultDto]:
    return [build_result(item) for item in scored]


def build_request(
    locator: Any,
    caller: CallerInfo | None = None,
    *,
    node_path: Iterable[Node] | None = None,
    page_content: str | None = None,
    results: Iterable[Scored[Any]] | None = None,
    selected: Scored[Any] | None = None,
    screenshot: bytes | None = None,
    codec: NodeCodec | None = None,
) -> RequestDto:
    resolved = to_locator(locator)
    dto = RequestDto(locator=resolved.value, type=resolved.type)
    if caller is not None:
        dto.class_name = caller.class_name
        dto.method_name = caller.method_name
    if node_path is not None:
        node_codec = codec or _codec
        dto.node_path = [node_codec.encode_node(node) for node in node_path]
    if page_content is not None:
        dto.page_content = page_content
    if results is not None:
        dto.results = build_results(results)
    if selected is not None:
        dto.used_result = build_result(selected)
    if screenshot is not None:
        dto.screenshot = screenshot
    return dto
