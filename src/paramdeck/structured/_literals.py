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

"""Best-effort literal inference for values typed into the editor.

Inference is deliberately lossy: a string that reads ``true`` or ``42``
becomes a boolean or a number. The opt-in ``quoted_strings`` mode lets a
user keep such text a string by typing it as a JSON string literal.
"""

from __future__ import annotations

import json
import math
import re

from ._nodes import BoolNode, Node, NullNode, NumberNode, StringNode

_NUMBER = re.compile(
    r"-?(?:0|[1-9][0-9]*)(?P<fraction>\.[0-9]+)?(?P<exponent>[eE][+-]?[0-9]+)?"
)
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def parse_number(raw: str) -> int | float | None:
    """Decode a JSON number literal, preferring ``int`` when exact.

    The result is an ``int`` when the value is integral and round-trips
    exactly through a signed 64-bit integer. Other finite values are
    ``float``. Text that is not a JSON number, or overflows to infinity,
    yields ``None``.
    """

    match = _NUMBER.fullmatch(raw)
    if match is None:
        return None
    if match.group("fraction") is None and match.group("exponent") is None:
        whole = int(raw)
        if _INT64_MIN <= whole <= _INT64_MAX:
            return whole
        return float(whole)

    number = float(raw)
    if not math.isfinite(number):
        return None
    if number.is_integer() and _INT64_MIN <= number <= _INT64_MAX:
        whole = int(number)
        if float(whole) == number:
            return whole
    return number


def infer_literal(raw: str, *, quoted_strings: bool = False) -> Node:
    """Infer the node a raw edited value stands for.

    Tried in order: ``null``, ``true``/``false``, a numeric literal, then the
    text itself as a string. With ``quoted_strings``, a valid JSON string
    literal such as ``"true"`` is decoded and kept as a string.
    """

    if raw == "null":
        return NullNode()
    if raw == "true":
        return BoolNode(True)
    if raw == "false":
        return BoolNode(False)
    number = parse_number(raw)
    if number is not None:
        return NumberNode(number)
    if quoted_strings and len(raw) >= 2 and raw[0] == raw[-1] == '"':
        try:
            decoded = json.loads(raw)
        except ValueError:
            decoded = None
        if isinstance(decoded, str):
            return StringNode(decoded)
    return StringNode(raw)


__all__ = ["infer_literal", "parse_number"]
