# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tagged-union tree for structured parameter values.

Containers are mutable so that a write can replace one member in place.
Scalars are frozen and are replaced wholesale.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import assert_never, cast

type JSONValue = (
    str | int | float | bool | None | Mapping[str, JSONValue] | Sequence[JSONValue]
)


@dataclass(slots=True)
class ObjectNode:
    members: dict[str, Node] = field(default_factory=dict)


@dataclass(slots=True)
class ArrayNode:
    items: list[Node] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class StringNode:
    value: str


@dataclass(frozen=True, slots=True)
class NumberNode:
    value: int | float


@dataclass(frozen=True, slots=True)
class BoolNode:
    value: bool


@dataclass(frozen=True, slots=True)
class NullNode:
    pass


type Node = ObjectNode | ArrayNode | StringNode | NumberNode | BoolNode | NullNode
type ContainerNode = ObjectNode | ArrayNode


def from_json(value: object) -> Node:
    """Convert decoded JSON (``json.loads`` output) into a :data:`Node` tree."""

    # bool first: it is a subclass of int.
    if value is None:
        return NullNode()
    if isinstance(value, bool):
        return BoolNode(value)
    if isinstance(value, (int, float)):
        return NumberNode(value)
    if isinstance(value, str):
        return StringNode(value)
    if isinstance(value, Mapping):
        members = cast(Mapping[str, object], value)
        return ObjectNode({key: from_json(item) for key, item in members.items()})
    if isinstance(value, Sequence):
        return ArrayNode([from_json(item) for item in cast(Sequence[object], value)])
    msg = f"Unsupported JSON value: {type(value).__name__}"
    raise TypeError(msg)


def to_json(node: Node) -> JSONValue:
    """Convert a :data:`Node` tree back into plain Python JSON values."""

    match node:
        case ObjectNode(members=members):
            return {key: to_json(item) for key, item in members.items()}
        case ArrayNode(items=items):
            return [to_json(item) for item in items]
        case StringNode(value=text):
            return text
        case NumberNode(value=number):
            return number
        case BoolNode(value=flag):
            return flag
        case NullNode():
            return None
        case _ as unreachable:  # pragma: no cover - exhaustiveness sentinel
            assert_never(unreachable)


def _reject_constant(name: str) -> float:
    msg = f"non-standard JSON constant {name}"
    raise ValueError(msg)


def parse_document(raw: str) -> Node | None:
    """Parse ``raw`` as JSON, returning ``None`` when it is not valid JSON.

    ``NaN`` and ``Infinity`` are rejected: they are not JSON and could not be
    written back.
    """

    try:
        decoded = json.loads(raw, parse_constant=_reject_constant)
    except ValueError:
        return None
    return from_json(decoded)


def dump_document(node: Node, *, indent: int | None = 2) -> str:
    """Serialize ``node`` as JSON, keeping member order and non-ASCII text."""

    if indent is None:
        return json.dumps(to_json(node), ensure_ascii=False, separators=(",", ":"))
    return json.dumps(to_json(node), ensure_ascii=False, indent=indent)


def is_container(node: Node) -> bool:
    return isinstance(node, (ObjectNode, ArrayNode))


def render_leaf(node: Node) -> str:
    """Render a node the way the detail and edit screens display it.

    Strings are shown bare, ``null`` and booleans as their JSON literals,
    numbers in their shortest round-tripping form. Containers render as
    compact JSON.
    """

    match node:
        case StringNode(value=text):
            return text
        case NullNode():
            return "null"
        case BoolNode(value=flag):
            return "true" if flag else "false"
        case NumberNode(value=number):
            return repr(number)
        case ObjectNode() | ArrayNode():
            return dump_document(node, indent=None)
        case _ as unreachable:  # pragma: no cover - exhaustiveness sentinel
            assert_never(unreachable)


__all__ = [
    "ArrayNode",
    "BoolNode",
    "ContainerNode",
    "JSONValue",
    "Node",
    "NullNode",
    "NumberNode",
    "ObjectNode",
    "StringNode",
    "dump_document",
    "from_json",
    "is_container",
    "parse_document",
    "render_leaf",
    "to_json",
]
