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

"""Tests for the structured value path grammar."""

from __future__ import annotations

import pytest

from paramdeck.errors import MalformedPathError
from paramdeck.structured import IndexSegment, KeySegment, format_path, parse_path

pytestmark = pytest.mark.core


class TestParsePath:
    """Tests for parse_path."""

    def test_dotted_keys(self) -> None:
        """Dots separate object member segments."""
        assert parse_path("server.port") == (KeySegment("server"), KeySegment("port"))

    def test_bracket_converts_preceding_key(self) -> None:
        """A bracket suffix turns the key before it into an index segment."""
        assert parse_path("items[0]") == (IndexSegment("items", "0"),)

    def test_path_continues_after_index(self) -> None:
        """Segments after an index address the element's members."""
        assert parse_path("items[2].name") == (
            IndexSegment("items", "2"),
            KeySegment("name"),
        )

    def test_chained_brackets_index_the_current_node(self) -> None:
        """A second bracket has no key and indexes the element reached so far."""
        assert parse_path("grid[0][1]") == (
            IndexSegment("grid", "0"),
            IndexSegment("", "1"),
        )

    def test_leading_bracket_indexes_root(self) -> None:
        """A path may start with a bracket to index a root array."""
        assert parse_path("[3]") == (IndexSegment("", "3"),)

    @pytest.mark.parametrize("path", ["", ".", "...", ".."])
    def test_empty_and_dot_only_paths_address_the_whole_tree(self, path: str) -> None:
        """Empty paths yield no segments."""
        assert parse_path(path) == ()

    def test_consecutive_dots_are_skipped(self) -> None:
        """Empty key tokens between dots are dropped."""
        assert parse_path("a..b") == (KeySegment("a"), KeySegment("b"))

    def test_non_numeric_index_parses(self) -> None:
        """Bad index text is kept and reported at resolution time."""
        (segment,) = parse_path("items[x]")
        assert isinstance(segment, IndexSegment)
        assert segment.token == "x"
        assert segment.index is None

    def test_unterminated_bracket_fails(self) -> None:
        """A bracket without a closing bracket is malformed."""
        with pytest.raises(MalformedPathError) as excinfo:
            _ = parse_path("items[0")
        assert excinfo.value.path == "items[0"
        assert excinfo.value.position == 5

    def test_stray_closing_bracket_fails(self) -> None:
        """A closing bracket without an opening bracket is malformed."""
        with pytest.raises(MalformedPathError):
            _ = parse_path("items]0")

    def test_malformed_path_is_a_value_error(self) -> None:
        """Callers catching ValueError also see malformed paths."""
        with pytest.raises(ValueError):
            _ = parse_path("[")


class TestIndexSegment:
    """Tests for IndexSegment."""

    @pytest.mark.parametrize(
        ("token", "expected"),
        [("0", 0), ("12", 12), ("-1", None), ("", None), ("1.5", None), ("٣", None)],
    )
    def test_index_accepts_only_ascii_digits(
        self, token: str, expected: int | None
    ) -> None:
        """Only non-negative ASCII decimal integers are indices."""
        assert IndexSegment("items", token).index == expected


class TestFormatPath:
    """Tests for format_path."""

    @pytest.mark.parametrize(
        "path", ["server.port", "items[1]", "items[2].name", "grid[0][1]", "[0].id"]
    )
    def test_format_inverts_parse(self, path: str) -> None:
        """Formatting parsed segments reproduces canonical paths."""
        assert format_path(parse_path(path)) == path
