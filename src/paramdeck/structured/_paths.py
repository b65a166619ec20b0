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

"""Path grammar for addressing one field inside a structured value.

Segments are separated by ``.``. A ``[<digits>]`` suffix turns the key token
before it into an array access: ``items[0]`` means "member ``items``, element
0". A bracket with no key before it (``[0]`` or the second bracket in
``grid[0][1]``) indexes the node reached so far. There is no escaping, so
keys containing ``.``, ``[`` or ``]`` cannot be addressed.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ..errors import MalformedPathError


@dataclass(frozen=True, slots=True)
class KeySegment:
    """Object member access."""

    key: str

    @property
    def text(self) -> str:
        return self.key


@dataclass(frozen=True, slots=True)
class IndexSegment:
    """Array element access, optionally through object member ``key`` first.

    ``token`` keeps the raw bracket contents; :attr:`index` is ``None`` when
    it is not a non-negative decimal integer, which resolves as a bad index
    rather than failing the parse.
    """

    key: str
    token: str

    @property
    def index(self) -> int | None:
        if self.token.isascii() and self.token.isdigit():
            return int(self.token)
        return None

    @property
    def text(self) -> str:
        return f"{self.key}[{self.token}]"


type PathSegment = KeySegment | IndexSegment
type PathSegments = tuple[PathSegment, ...]


def parse_path(path: str) -> PathSegments:
    """Parse ``path`` into segments.

    An empty path, or one made only of dots, yields no segments and
    addresses the whole tree.

    Raises:
        MalformedPathError: on ``[`` without a closing ``]``, or a stray ``]``.
    """

    segments: list[PathSegment] = []
    current: list[str] = []
    position = 0
    while position < len(path):
        char = path[position]
        if char == ".":
            if current:
                segments.append(KeySegment("".join(current)))
                current = []
        elif char == "[":
            end = path.find("]", position + 1)
            if end == -1:
                raise MalformedPathError(path, position)
            segments.append(IndexSegment("".join(current), path[position + 1 : end]))
            current = []
            position = end
        elif char == "]":
            raise MalformedPathError(path, position)
        else:
            current.append(char)
        position += 1

    if current:
        segments.append(KeySegment("".join(current)))
    return tuple(segments)


def format_path(segments: Sequence[PathSegment]) -> str:
    """Render segments back into path syntax."""

    parts: list[str] = []
    for segment in segments:
        if isinstance(segment, IndexSegment) and not segment.key and parts:
            parts[-1] += segment.text
        else:
            parts.append(segment.text)
    return ".".join(parts)


__all__ = [
    "IndexSegment",
    "KeySegment",
    "PathSegment",
    "PathSegments",
    "format_path",
    "parse_path",
]
