from __future__ import annotations

from typing import Any

from selfheal.core.metadata import Scored
from selfheal.core.node import Node, NodeBuilder, Snapshot


def node(tag: str, index: int = 0, text: str = "", **attributes: str) -> NodeBuilder:
    return (
        NodeBuilder()
        .set_tag(tag)
        .set_index(index)
        .add_content(text)
        .set_attributes({key.rstrip("_").replace("_", "-"): value for key, value in attributes.items()})
    )


def chain(*builders: NodeBuilder) -> list[Node]:
    """Builds a root-to-leaf chain where each node is the parent of the next."""

    nodes: list[Node] = []
    parent: Node | None = None
    for builder in builders:
        parent = builder.set_parent(parent).build()
        nodes.append(parent)
    return nodes


def login_snapshot() -> tuple[Snapshot, dict[str, Node]]:
    snapshot = Snapshot()
    html = snapshot.add(node("html"))
    body = snapshot.add(node("body"), html)
    form = snapshot.add(node("form", id="login-form"), body)
    email = snapshot.add(node("input", name="email", type="email"), form)
    button = snapshot.add(node("button", text="Log in", class_="btn btn-primary"), form)
    footer = snapshot.add(node("div", 0, "Help"), body)
    return snapshot, {
        "html": html,
        "body": body,
        "form": form,
        "email": email,
        "button": button,
        "footer": footer,
    }


class FixedScorer:
    """Returns preset scores for nodes matched by tag."""

    def __init__(self, scores: dict[str, float]) -> None:
        self.scores = scores
        self.calls: list[tuple[list[Node], Any]] = []

    def rank(self, path, snapshot) -> list[Scored[Node]]:
        self.calls.append((list(path), snapshot))
        ranked = [
            Scored(value=item, score=self.scores[item.tag])
            for item in snapshot
            if item.tag in self.scores
        ]
        ranked.sort(key=lambda scored: scored.score, reverse=True)
        return ranked
