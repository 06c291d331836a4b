from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from selfheal.core.exceptions import DecodeError, EncodeError
from selfheal.core.node import Node, NodeBuilder

log = logging.getLogger(__name__)

TYPE_FIELD = "type"


class NodeRecord(BaseModel):
    """Wire shape of a plain ``Node``."""

    model_config = ConfigDict(populate_by_name=True, strict=True)

    tag: str
    index: int
    inner_text: str = Field(alias="innerText")
    id: str
    classes: str
    other: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_node(cls, node: Node) -> NodeRecord:
        return cls(
            tag=node.tag,
            index=node.index,
            inner_text=node.inner_text,
            id=node.id,
            classes=" ".join(node.classes),
            other=node.other_attributes,
        )

    def to_node(self) -> Node:
        attributes = dict(self.other)
        attributes["id"] = self.id
        attributes["class"] = self.classes
        return (
            NodeBuilder()
            .set_tag(self.tag)
            .set_index(self.index)
            .add_content(self.inner_text)
            .set_attributes(attributes)
            .build()
        )


@dataclass(frozen=True, slots=True)
class _Variant:
    record: type[BaseModel]
    applies_to: type[Node]
    from_node: Callable[[Node], BaseModel]
    to_node: Callable[[Any], Node]


class NodeCodec:
    """Reads and writes node paths as JSON with a per-node ``type`` discriminator."""

    def __init__(self) -> None:
        self._variants: dict[str, _Variant] = {}
        self.register("node", NodeRecord, Node, NodeRecord.from_node, NodeRecord.to_node)

    def register(
        self,
        type_name: str,
        record: type[BaseModel],
        applies_to: type[Node],
        from_node: Callable[[Node], BaseModel],
        to_node: Callable[[Any], Node],
    ) -> None:
        self._variants[type_name] = _Variant(record, applies_to, from_node, to_node)

    def encode_node(self, node: Node) -> dict[str, Any]:
        type_name, variant = self._variant_for(node)
        try:
            record = variant.from_node(node)
        except ValidationError as exc:
            raise EncodeError(f"Node <{node.tag}> cannot be encoded: {_describe(exc)}") from exc
        return {TYPE_FIELD: type_name, **record.model_dump(by_alias=True)}

    def encode_path(self, nodes: Iterable[Node]) -> bytes:
        payload = [self.encode_node(node) for node in nodes]
        try:
            return json.dumps(payload, ensure_ascii=False).encode("utf-8")
        except (TypeError, ValueError, UnicodeEncodeError) as exc:
            raise EncodeError(f"Node path cannot be serialized: {exc}") from exc

    def decode_node(self, item: Any, position: int = 0) -> Node:
        if not isinstance(item, dict):
            raise DecodeError(f"Element {position} is not an object")
        type_name = item.get(TYPE_FIELD)
        if not isinstance(type_name, str):
            raise DecodeError(f"Element {position} is missing the '{TYPE_FIELD}' field")
        variant = self._variants.get(type_name)
        if variant is None:
            raise DecodeError(f"Element {position} has unknown node type '{type_name}'")
        fields = {key: value for key, value in item.items() if key != TYPE_FIELD}
        try:
            record = variant.record.model_validate(fields)
        except ValidationError as exc:
            raise DecodeError(f"Element {position}: {_describe(exc)}") from exc
        return variant.to_node(record)

    def decode_path(self, content: bytes | str, link: bool = False) -> list[Node]:
        """Decodes a stored path.

        With ``link`` set, each node gets the previous one as its parent, so the
        last node can be handed straight to the selector builder.
        """

        try:
            payload = json.loads(content)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise DecodeError(f"Stored path is not valid JSON: {exc}") from exc
        if not isinstance(payload, list):
            raise DecodeError("Stored path must be a JSON array")
        nodes = [self.decode_node(item, position) for position, item in enumerate(payload)]
        if link:
            nodes = relink(nodes)
        return nodes

    def _variant_for(self, node: Node) -> tuple[str, _Variant]:
        # Most specific registration wins so subclasses keep their own type tag.
        for cls in type(node).__mro__:
            for type_name, variant in self._variants.items():
                if variant.applies_to is cls:
                    return type_name, variant
        raise EncodeError(f"No wire type registered for {type(node).__name__}")


def relink(nodes: Sequence[Node]) -> list[Node]:
    linked: list[Node] = []
    parent: Node | None = None
    for node in nodes:
        parent = node.with_parent(parent)
        linked.append(parent)
    return linked


def _describe(exc: ValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "<root>"
        messages.append(f"field '{location}' {error['msg'].lower()}")
    return "; ".join(messages)
