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

"""Read, write and flatten operations over :data:`Node` trees."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import assert_never

from ..errors import (
    MalformedPathError,
    PathIndexError,
    PathNotFoundError,
    PathResolutionError,
    PathTypeMismatchError,
)
from ._literals import infer_literal
from ._nodes import (
    ArrayNode,
    BoolNode,
    Node,
    NullNode,
    NumberNode,
    ObjectNode,
    StringNode,
    render_leaf,
)
from ._paths import (
    IndexSegment,
    KeySegment,
    PathSegment,
    PathSegments,
    format_path,
    parse_path,
)


@dataclass(frozen=True, slots=True)
class FlatEntry:
    """One addressable leaf of a flattened tree.

    ``path`` is display text. ``segments`` addresses the leaf exactly, even
    when a key is empty or holds characters the path grammar reserves.
    """

    path: str
    value: str
    segments: PathSegments = field(default=(), compare=False)


def _segments(path: str | PathSegments) -> PathSegments:
    return parse_path(path) if isinstance(path, str) else path


def _describe(path: str | PathSegments) -> str:
    if isinstance(path, str):
        return path
    return format_path(path)


def _member(node: Node, key: str, *, path: str) -> Node:
    match node:
        case ObjectNode(members=members):
            try:
                return members[key]
            except KeyError:
                raise PathNotFoundError(
                    f"key not found: {key}", path=path, segment=key
                ) from None
        case ArrayNode() | StringNode() | NumberNode() | BoolNode() | NullNode():
            raise PathTypeMismatchError(
                f"expected object at {key}", path=path, segment=key
            )
        case _ as unreachable:  # pragma: no cover - exhaustiveness sentinel
            assert_never(unreachable)


def _array(node: Node, segment: IndexSegment, *, path: str) -> list[Node]:
    container = _member(node, segment.key, path=path) if segment.key else node
    match container:
        case ArrayNode(items=items):
            return items
        case ObjectNode() | StringNode() | NumberNode() | BoolNode() | NullNode():
            raise PathTypeMismatchError(
                f"expected array at {segment.text}", path=path, segment=segment.text
            )
        case _ as unreachable:  # pragma: no cover - exhaustiveness sentinel
            assert_never(unreachable)


def _checked_index(items: list[Node], segment: IndexSegment, *, path: str) -> int:
    index = segment.index
    if index is None or index >= len(items):
        raise PathIndexError(
            f"index out of range at {segment.text}", path=path, segment=segment.text
        )
    return index


def _step(node: Node, segment: PathSegment, *, path: str) -> Node:
    match segment:
        case KeySegment(key=key):
            return _member(node, key, path=path)
        case IndexSegment():
            items = _array(node, segment, path=path)
            return items[_checked_index(items, segment, path=path)]
        case _ as unreachable:  # pragma: no cover - exhaustiveness sentinel
            assert_never(unreachable)


def resolve(tree: Node, path: str | PathSegments) -> Node:
    """Return the node ``path`` addresses.

    Raises:
        MalformedPathError: ``path`` is a string that does not parse.
        PathResolutionError: the path does not match the shape of ``tree``.
    """

    described = _describe(path)
    node = tree
    for segment in _segments(path):
        node = _step(node, segment, path=described)
    return node


def read_path(tree: Node, path: str | PathSegments) -> str:
    """Return the addressed value as display text, or ``""`` when unresolvable.

    Any parse or resolution failure reads as "nothing to show", so an editor
    seeded from this value opens empty instead of failing.
    """

    try:
        return render_leaf(resolve(tree, path))
    except (MalformedPathError, PathResolutionError):
        return ""


def write_path(
    tree: Node,
    path: str | PathSegments,
    raw: str,
    *,
    quoted_strings: bool = False,
) -> Node:
    """Replace the addressed value in place with the literal ``raw`` stands for.

    Every segment but the last must resolve to a container of the matching
    shape; missing intermediate containers are never created. A final key
    segment may name a member that does not exist yet, which adds it.

    Returns:
        The node that was stored.

    Raises:
        MalformedPathError: ``path`` is a string that does not parse.
        PathNotFoundError: the path is empty or a key is missing.
        PathTypeMismatchError: a container has the wrong shape.
        PathIndexError: an index is out of range or not an integer.
    """

    described = _describe(path)
    segments = _segments(path)
    if not segments:
        raise PathNotFoundError(
            "empty path addresses the whole value", path=described, segment=""
        )

    parent = tree
    for segment in segments[:-1]:
        parent = _step(parent, segment, path=described)

    replacement = infer_literal(raw, quoted_strings=quoted_strings)
    target = segments[-1]
    match target:
        case KeySegment(key=key):
            match parent:
                case ObjectNode(members=members):
                    members[key] = replacement
                case (
                    ArrayNode() | StringNode() | NumberNode() | BoolNode() | NullNode()
                ):
                    raise PathTypeMismatchError(
                        f"expected object at {key}", path=described, segment=key
                    )
                case _ as unreachable:  # pragma: no cover - exhaustiveness sentinel
                    assert_never(unreachable)
        case IndexSegment():
            items = _array(parent, target, path=described)
            items[_checked_index(items, target, path=described)] = replacement
        case _ as unreachable:  # pragma: no cover - exhaustiveness sentinel
            assert_never(unreachable)
    return replacement


def iter_leaves(tree: Node, prefix: PathSegments = ()) -> Iterator[FlatEntry]:
    """Yield leaves depth-first, object keys sorted, array elements in order.

    Empty objects and arrays have no leaves and yield nothing.
    """

    match tree:
        case ObjectNode(members=members):
            for key in sorted(members):
                yield from iter_leaves(members[key], (*prefix, KeySegment(key)))
        case ArrayNode(items=items):
            for index, item in enumerate(items):
                yield from iter_leaves(item, (*prefix, IndexSegment("", str(index))))
        case StringNode() | NumberNode() | BoolNode() | NullNode():
            yield FlatEntry(
                path=format_path(prefix), value=render_leaf(tree), segments=prefix
            )
        case _ as unreachable:  # pragma: no cover - exhaustiveness sentinel
            assert_never(unreachable)


def flatten(tree: Node) -> tuple[FlatEntry, ...]:
    """Return every leaf of ``tree`` as a ``(path, value)`` entry."""

    return tuple(iter_leaves(tree))


__all__ = [
    "FlatEntry",
    "flatten",
    "iter_leaves",
    "read_path",
    "resolve",
    "write_path",
]
