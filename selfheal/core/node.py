from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Mapping


@dataclass(frozen=True, slots=True)
class Node:
    """One element of a captured UI tree.

    ``parent`` points upward only; a node never holds its children, so a chain
    of nodes cannot form a reference cycle. Child lookup lives on ``Snapshot``.
    """

    tag: str
    index: int = 0
    inner_text: str = ""
    id: str = ""
    classes: tuple[str, ...] = ()
    other_attributes: dict[str, str] = field(default_factory=dict, hash=False)
    parent: Node | None = field(default=None, compare=False, repr=False)

    def attribute(self, name: str) -> str:
        if name == "id":
            return self.id
        if name == "class":
            return " ".join(self.classes)
        return self.other_attributes.get(name, "")

    def ancestors(self) -> Iterator[Node]:
        current = self.parent
        while current is not None:
            yield current
            current = current.parent

    def path(self) -> list[Node]:
        """Returns the chain from the root down to this node."""

        chain = [self, *self.ancestors()]
        chain.reverse()
        return chain

    def with_parent(self, parent: Node | None) -> Node:
        return NodeBuilder.from_node(self).set_parent(parent).build()


class NodeBuilder:
    """Collects node fields and produces an immutable ``Node``.

    ``id`` and ``class`` are copied into dedicated fields and also kept, normalized,
    in ``other_attributes``.
    """

    def __init__(self) -> None:
        self._tag = ""
        self._index = 0
        self._content: list[str] = []
        self._attributes: dict[str, str] = {}
        self._parent: Node | None = None

    @classmethod
    def from_node(cls, node: Node) -> NodeBuilder:
        builder = cls()
        builder._tag = node.tag
        builder._index = node.index
        if node.inner_text:
            builder._content.append(node.inner_text)
        builder._attributes = {**node.other_attributes, "id": node.id, "class": " ".join(node.classes)}
        builder._parent = node.parent
        return builder

    def set_tag(self, tag: str) -> NodeBuilder:
        self._tag = tag
        return self

    def set_index(self, index: int) -> NodeBuilder:
        self._index = index
        return self

    def add_content(self, text: str | None) -> NodeBuilder:
        if text:
            self._content.append(text.strip())
        return self

    def set_attributes(self, attributes: Mapping[str, str] | None) -> NodeBuilder:
        self._attributes = dict(attributes or {})
        return self

    def add_attribute(self, name: str, value: str) -> NodeBuilder:
        self._attributes[name] = value
        return self

    def set_parent(self, parent: Node | None) -> NodeBuilder:
        self._parent = parent
        return self

    def build(self) -> Node:
        attributes = dict(self._attributes)
        node_id = attributes.get("id") or ""
        classes = tuple(dict.fromkeys((attributes.get("class") or "").split()))
        attributes["id"] = node_id
        attributes["class"] = " ".join(classes)
        return Node(
            tag=self._tag,
            index=self._index,
            inner_text=" ".join(part for part in self._content if part),
            id=node_id,
            classes=classes,
            other_attributes=attributes,
            parent=self._parent,
        )


class Snapshot:
    """Owns every node of one capture in document order."""

    def __init__(self) -> None:
        self._nodes: list[Node] = []
        self._parents: list[int] = []
        self._positions: dict[int, int] = {}

    def add(self, builder: NodeBuilder, parent: Node | None = None) -> Node:
        parent_position = -1
        if parent is not None:
            parent_position = self._position(parent)
        node = builder.set_parent(parent).build()
        self._positions[id(node)] = len(self._nodes)
        self._nodes.append(node)
        self._parents.append(parent_position)
        return node

    def roots(self) -> list[Node]:
        return [node for node, parent in zip(self._nodes, self._parents) if parent == -1]

    def children(self, node: Node) -> list[Node]:
        position = self._position(node)
        return [child for child, parent in zip(self._nodes, self._parents) if parent == position]

    def path_to(self, node: Node) -> list[Node]:
        self._position(node)
        return node.path()

    def _position(self, node: Node) -> int:
        try:
            return self._positions[id(node)]
        except KeyError:
            raise ValueError(f"Node <{node.tag}> does not belong to this snapshot") from None

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)
