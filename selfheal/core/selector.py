from __future__ import annotations

import logging

from selfheal.core.exceptions import SelectorBuildError
from selfheal.core.node import Node

log = logging.getLogger(__name__)

ANCHOR_ATTRIBUTES = ("resource-id",)


def create_xpath(node: Node | None) -> str:
    """Builds an XPath that walks up from ``node`` until an id-like anchor is found."""

    if node is None:
        raise SelectorBuildError("Cannot build a selector without a node")
    segments: list[str] = []
    current: Node | None = node
    while current is not None:
        segment, anchored = _segment(current)
        segments.insert(0, segment)
        if anchored:
            break
        current = current.parent
    selector = "//" + "/".join(segments)
    log.debug("Node selector: %s", selector)
    return selector


def _segment(node: Node) -> tuple[str, bool]:
    if node.id:
        return f"{node.tag}[@id = {xpath_literal(node.id)}]", True
    for name in ANCHOR_ATTRIBUTES:
        value = node.attribute(name)
        if value:
            return f"{node.tag}[@{name} = {xpath_literal(value)}]", True
    text_attribute = node.attribute("text")
    if text_attribute:
        return f"{node.tag}[@text = {xpath_literal(text_attribute)}]", False
    if node.inner_text:
        return f"{node.tag}[text() = {xpath_literal(node.inner_text)}]", False
    return node.tag, False


def xpath_literal(value: str) -> str:
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    parts = value.split("'")
    return "concat(" + ", \"'\", ".join(f"'{part}'" for part in parts) + ")"
