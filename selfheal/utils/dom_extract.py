from __future__ import annotations

import logging
from typing import Any

from selenium.common.exceptions import WebDriverException

from selfheal.core.exceptions import HealingError
from selfheal.core.node import Node, NodeBuilder, Snapshot

log = logging.getLogger(__name__)

COLLECT_TREE_SCRIPT = r"""
const items = [];
const positions = new Map();
const visit = (node, parentPosition) => {
  const position = items.length;
  positions.set(node, position);
  const parent = node.parentElement;
  let index = 0;
  if (parent) {
    for (const sibling of parent.children) {
      if (sibling === node) break;
      if (sibling.tagName === node.tagName) index += 1;
    }
  }
  const ownText = Array.from(node.childNodes)
    .filter((child) => child.nodeType === Node.TEXT_NODE)
    .map((child) => child.textContent.trim())
    .filter(Boolean)
    .join(" ");
  items.push({
    tag: node.tagName.toLowerCase(),
    index: index,
    text: ownText.slice(0, 200),
    attributes: Array.from(node.attributes).reduce((acc, attr) => {
      acc[attr.name] = attr.value;
      return acc;
    }, {}),
    parent: parentPosition,
  });
  for (const child of node.children) {
    visit(child, position);
  }
};
visit(document.documentElement, -1);
return items;
"""


def capture_snapshot(driver) -> Snapshot:
    try:
        raw_items = driver.execute_script(COLLECT_TREE_SCRIPT) or []
    except WebDriverException as exc:
        raise HealingError(f"Could not capture the page tree: {exc.msg}") from exc
    return build_snapshot(raw_items)


def build_snapshot(raw_items: list[dict[str, Any]]) -> Snapshot:
    """Builds a snapshot from document-ordered items whose ``parent`` is a prior position."""

    snapshot = Snapshot()
    built: list[Node] = []
    for position, item in enumerate(raw_items):
        parent_position = item.get("parent", -1)
        if parent_position is None or parent_position < 0:
            parent = None
        elif parent_position < position:
            parent = built[parent_position]
        else:
            raise HealingError(f"Element {position} refers to a later parent {parent_position}")
        builder = (
            NodeBuilder()
            .set_tag(item.get("tag", ""))
            .set_index(item.get("index", 0))
            .add_content(item.get("text", ""))
            .set_attributes(item.get("attributes", {}))
        )
        built.append(snapshot.add(builder, parent))
    log.debug("Captured snapshot with %d nodes", len(snapshot))
    return snapshot
