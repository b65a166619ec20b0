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

"""Tests for literal inference of edited values."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from paramdeck.structured import (
    BoolNode,
    Node,
    NullNode,
    NumberNode,
    StringNode,
    infer_literal,
    parse_number,
)

pytestmark = pytest.mark.core


class TestParseNumber:
    """Tests for parse_number."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("0", 0),
            ("-12", -12),
            ("9090", 9090),
            ("1.5", 1.5),
            ("2.0", 2),
            ("1e3", 1000),
            ("-2.5E-1", -0.25),
        ],
    )
    def test_json_numbers(self, raw: str, expected: float) -> None:
        """JSON number literals decode, preferring exact integers."""
        value = parse_number(raw)
        assert value == expected
        assert type(value) is type(expected)

    @pytest.mark.parametrize(
        "raw", ["", "007", "+1", "1.", ".5", "0x10", "1_000", " 1", "inf", "1e999"]
    )
    def test_rejects_non_json_numbers(self, raw: str) -> None:
        """Leading zeros, signs, hex and overflow are not numbers."""
        assert parse_number(raw) is None

    def test_large_integers_fall_back_to_float(self) -> None:
        """Integers beyond 64 bits are kept as floats."""
        value = parse_number(str(2**64))
        assert isinstance(value, float)

    @given(st.integers(min_value=-(2**63), max_value=2**63 - 1))
    def test_int64_values_round_trip(self, number: int) -> None:
        """Every signed 64-bit integer decodes to itself."""
        assert parse_number(str(number)) == number


class TestInferLiteral:
    """Tests for infer_literal."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("null", NullNode()),
            ("true", BoolNode(True)),
            ("false", BoolNode(False)),
            ("42", NumberNode(42)),
            ("-0.5", NumberNode(-0.5)),
            ("hello", StringNode("hello")),
            ("007", StringNode("007")),
            ("True", StringNode("True")),
            ("", StringNode("")),
            ('"true"', StringNode('"true"')),
        ],
    )
    def test_default_inference(self, raw: str, expected: Node) -> None:
        """Keywords and numbers are recognized; everything else is a string."""
        assert infer_literal(raw) == expected

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ('"true"', StringNode("true")),
            ('"42"', StringNode("42")),
            ('"a\\nb"', StringNode("a\nb")),
            ('"unterminated', StringNode('"unterminated')),
            ('"a"b"', StringNode('"a"b"')),
            ("true", BoolNode(True)),
        ],
    )
    def test_quoted_strings_mode(self, raw: str, expected: Node) -> None:
        """Quoted mode decodes JSON string literals and leaves the rest alone."""
        assert infer_literal(raw, quoted_strings=True) == expected
