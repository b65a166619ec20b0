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

"""Tests for the Textual host."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from rich.text import Text
from textual.pilot import Pilot

from paramdeck.messages import KeyPressed
from paramdeck.navigation import Screen
from paramdeck.orchestrator import Orchestrator
from paramdeck.screens import ScreenView, ViewRow
from paramdeck.tui import ParamdeckApp, normalize_key, render_view


def _lines(view: ScreenView) -> list[str]:
    group = render_view(view)
    return [
        renderable.plain
        for renderable in group.renderables
        if isinstance(renderable, Text)
    ]


class TestNormalizeKey:
    """Tests for normalize_key."""

    def test_printable_keys_use_their_character(self) -> None:
        assert normalize_key("slash", "/", is_printable=True) == KeyPressed("/", "/")
        assert normalize_key("G", "G", is_printable=True) == KeyPressed("G", "G")

    def test_named_keys_keep_their_name(self) -> None:
        assert normalize_key("enter", "\r", is_printable=False) == KeyPressed("enter")
        assert normalize_key("ctrl+s", "\x13", is_printable=False) == KeyPressed(
            "ctrl+s"
        )


class TestRenderView:
    """Tests for render_view."""

    def test_rows_mark_the_selection(self) -> None:
        view = ScreenView(
            title="Select AWS Profile",
            rows=(ViewRow("1. dev", selected=True), ViewRow("2. prod")),
            help="'q' to quit",
        )
        lines = _lines(view)
        assert lines[0] == "Select AWS Profile"
        assert "▸ 1. dev" in lines
        assert "  2. prod" in lines
        assert "'q' to quit" in lines

    def test_loading_replaces_the_content(self) -> None:
        view = ScreenView(title="t", rows=(ViewRow("hidden"),), loading="Loading...")
        lines = _lines(view)
        assert "⠋ Loading..." in lines
        assert all("hidden" not in line for line in lines)

    def test_error_and_input_line(self) -> None:
        view = ScreenView(title="t", input_line="Search: db█", error="denied")
        lines = _lines(view)
        assert "Search: db█" in lines
        assert "Error: denied" in lines


async def _wait_for(pilot: Pilot[None], predicate: Callable[[], bool]) -> None:
    for _ in range(100):
        if predicate():
            return
        await pilot.pause(0.02)
    raise AssertionError("condition not reached")


def test_app_walks_to_the_parameter_list(orchestrator: Orchestrator) -> None:
    app = ParamdeckApp(orchestrator, orchestrator.initial_state())

    async def scenario() -> None:
        async with app.run_test() as pilot:
            await pilot.press("enter", "enter")
            await _wait_for(
                pilot,
                lambda: app.runner.state.screen is Screen.PARAM_LIST
                and not app.runner.state.param_list.loading,
            )
            assert app.runner.view().rows[0].text == "/app/name"
            await pilot.press("q")

    asyncio.run(scenario())
    assert app.runner.state.screen is Screen.PARAM_LIST
