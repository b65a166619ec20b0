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

"""Structured value path engine.

Parses parameter values that hold JSON into a tagged-union tree and lets the
editor read, replace and list individual leaves by path::

    tree = parse_document('{"server": {"port": 8080}}')
    read_path(tree, "server.port")          # "8080"
    write_path(tree, "server.port", "9090")  # stores the number 9090
    flatten(tree)                            # (FlatEntry("server.port", "9090"),)
"""

from __future__ import annotations

from ._literals import infer_literal, parse_number
from ._nodes import (
    ArrayNode,
    BoolNode,
    ContainerNode,
    JSONValue,
    Node,
    NullNode,
    NumberNode,
    ObjectNode,
    StringNode,
    dump_document,
    from_json,
    is_container,
    parse_document,
    render_leaf,
    to_json,
)
from ._ops import FlatEntry, flatten, iter_leaves, read_path, resolve, write_path
from ._paths import (
    IndexSegment,
    KeySegment,
    PathSegment,
    PathSegments,
    format_path,
    parse_path,
)

__all__ = [
    "ArrayNode",
    "BoolNode",
    "ContainerNode",
    "FlatEntry",
    "IndexSegment",
    "JSONValue",
    "KeySegment",
    "Node",
    "NullNode",
    "NumberNode",
    "ObjectNode",
    "PathSegment",
    "PathSegments",
    "StringNode",
    "dump_document",
    "flatten",
    "format_path",
    "from_json",
    "infer_literal",
    "is_container",
    "iter_leaves",
    "parse_document",
    "parse_number",
    "parse_path",
    "read_path",
    "render_leaf",
    "resolve",
    "to_json",
    "write_path",
]
